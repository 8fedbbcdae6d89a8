from __future__ import annotations

import asyncio
import logging

from web3 import Web3

from ...abi import load_tetuswap_pair_abi, load_tetuswap_router_abi
from ...endpoints import EndpointDescriptor
from ...errors import QuoteError
from .base import BaseQuoteAdapter, QuoteRequest, RouterSwapRequest, token_sort_key

logger = logging.getLogger(__name__)


def order_reserves(
    input_token: str, output_token: str, reserve0: int, reserve1: int
) -> tuple[int, int]:
    """Map a pair's (reserve0, reserve1) onto (reserve_in, reserve_out).

    Pairs store their tokens sorted by ascending numeric address, so the
    lower address owns reserve zero.
    """
    if token_sort_key(input_token) < token_sort_key(output_token):
        return reserve0, reserve1
    return reserve1, reserve0


class RouterSwapQuoteAdapter(BaseQuoteAdapter):
    """Quote a swap from pair reserves and the router's ``getAmountOut``."""

    @property
    def adapter_name(self) -> str:
        return "router_swap"

    async def quote(self, endpoint: EndpointDescriptor, request: QuoteRequest) -> str:
        if not isinstance(request, RouterSwapRequest):
            raise TypeError(f"{self.adapter_name} cannot quote {type(request).__name__}")

        w3 = self.web3_factory(endpoint)
        pair = w3.eth.contract(
            address=Web3.to_checksum_address(request.pair),
            abi=load_tetuswap_pair_abi(),
        )
        router = w3.eth.contract(
            address=Web3.to_checksum_address(request.router),
            abi=load_tetuswap_router_abi(),
        )

        try:
            reserves = await asyncio.to_thread(pair.functions.getReserves().call)
        except Exception as e:
            raise QuoteError("getReserves failed", e) from e

        try:
            reserve0, reserve1 = int(reserves[0]), int(reserves[1])
        except (TypeError, ValueError, IndexError) as e:
            raise QuoteError("Malformed getReserves response", e) from e

        reserve_in, reserve_out = order_reserves(
            request.input_token, request.output_token, reserve0, reserve1
        )
        logger.debug(
            "getAmountOut amount=%d reserve_in=%d reserve_out=%d fee=%d",
            request.input_amount,
            reserve_in,
            reserve_out,
            request.fee,
        )

        try:
            amount_out = await asyncio.to_thread(
                router.functions.getAmountOut(
                    request.input_amount, reserve_in, reserve_out, request.fee
                ).call
            )
        except Exception as e:
            raise QuoteError("getAmountOut failed", e) from e

        try:
            amount = int(amount_out)
        except (TypeError, ValueError) as e:
            raise QuoteError("Malformed getAmountOut response", e) from e
        if amount < 0:
            raise QuoteError(f"Negative getAmountOut response: {amount}")

        return str(amount)
