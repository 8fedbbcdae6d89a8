from __future__ import annotations

from ...endpoints import EndpointDescriptor, make_web3
from .base import (
    BaseQuoteAdapter,
    BatchSwapRequest,
    QuoteRequest,
    RouterSwapRequest,
    Web3Factory,
)
from .batch_swap import BatchSwapQuoteAdapter
from .router_swap import RouterSwapQuoteAdapter


def get_quote_adapter(
    request: QuoteRequest, web3_factory: Web3Factory = make_web3
) -> BaseQuoteAdapter:
    """Pick the quote provider matching the request variant.

    Raises:
        TypeError: If ``request`` is not a known quote request.
    """
    match request:
        case BatchSwapRequest():
            return BatchSwapQuoteAdapter(web3_factory)
        case RouterSwapRequest():
            return RouterSwapQuoteAdapter(web3_factory)
        case _:
            raise TypeError(f"Unsupported quote request: {type(request).__name__}")


async def quote(
    endpoint: EndpointDescriptor,
    request: QuoteRequest,
    web3_factory: Web3Factory = make_web3,
) -> str:
    """Quote ``request`` against ``endpoint`` with the matching provider."""
    adapter = get_quote_adapter(request, web3_factory)
    return await adapter.quote(endpoint, request)


__all__ = [
    "BaseQuoteAdapter",
    "BatchSwapQuoteAdapter",
    "BatchSwapRequest",
    "QuoteRequest",
    "RouterSwapQuoteAdapter",
    "RouterSwapRequest",
    "get_quote_adapter",
    "quote",
]
