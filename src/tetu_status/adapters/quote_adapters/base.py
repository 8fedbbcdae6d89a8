from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Union

from web3 import Web3

from ...endpoints import EndpointDescriptor, make_web3

Web3Factory = Callable[[EndpointDescriptor], Web3]


def _validate_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValueError(f"input_amount must be an integer in base units, got {amount!r}")
    if amount < 0:
        raise ValueError(f"input_amount must be non-negative, got {amount}")


def _validate_tokens(input_token: str, output_token: str) -> None:
    for token in (input_token, output_token):
        if not Web3.is_address(token):
            raise ValueError(f"Invalid token address: {token}")
    if token_sort_key(input_token) == token_sort_key(output_token):
        raise ValueError("input_token and output_token must differ")


def token_sort_key(address: str) -> int:
    """Numeric value of a 20-byte hex address, used for pool token ordering."""
    return int(address, 16)


@dataclass(frozen=True)
class BatchSwapRequest:
    """Simulated single-step Balancer batch swap."""

    pool_id: str
    input_token: str
    output_token: str
    input_amount: int

    def __post_init__(self) -> None:
        _validate_amount(self.input_amount)
        _validate_tokens(self.input_token, self.output_token)
        try:
            pool_id = Web3.to_bytes(hexstr=self.pool_id)
        except ValueError as e:
            raise ValueError(f"Invalid pool id: {self.pool_id}") from e
        if len(pool_id) != 32:
            raise ValueError(f"pool_id must be 32 bytes, got {len(pool_id)}")


@dataclass(frozen=True)
class RouterSwapRequest:
    """Output amount for a swap through a two-reserve pair and its router."""

    router: str
    pair: str
    fee: int
    input_token: str
    output_token: str
    input_amount: int

    def __post_init__(self) -> None:
        _validate_amount(self.input_amount)
        _validate_tokens(self.input_token, self.output_token)
        for address in (self.router, self.pair):
            if not Web3.is_address(address):
                raise ValueError(f"Invalid contract address: {address}")
        if isinstance(self.fee, bool) or not isinstance(self.fee, int) or self.fee < 0:
            raise ValueError(f"fee must be a non-negative integer, got {self.fee!r}")


QuoteRequest = Union[BatchSwapRequest, RouterSwapRequest]


class BaseQuoteAdapter(ABC):
    """Abstract base class for read-only quote providers."""

    def __init__(self, web3_factory: Web3Factory = make_web3):
        """Initialize the adapter with the factory used to reach an endpoint."""
        self.web3_factory = web3_factory

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @abstractmethod
    async def quote(self, endpoint: EndpointDescriptor, request: QuoteRequest) -> str:
        """Return the quoted output amount as a base-unit integer string.

        Raises:
            QuoteError: If any underlying contract read fails.
        """
        ...
