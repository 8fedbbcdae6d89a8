from __future__ import annotations

import asyncio
import logging

from web3 import Web3
from web3.constants import ADDRESS_ZERO

from ...abi import load_balancer_vault_abi
from ...constants import BALANCER_VAULT
from ...endpoints import EndpointDescriptor
from ...errors import QuoteError
from .base import BaseQuoteAdapter, BatchSwapRequest, QuoteRequest

logger = logging.getLogger(__name__)

SWAP_KIND_GIVEN_IN = 0


class BatchSwapQuoteAdapter(BaseQuoteAdapter):
    """Quote a swap by simulating ``queryBatchSwap`` on the Balancer vault."""

    vault_address = BALANCER_VAULT

    @property
    def adapter_name(self) -> str:
        return "batch_swap"

    async def quote(self, endpoint: EndpointDescriptor, request: QuoteRequest) -> str:
        """Simulate swapping ``input_amount`` of the input token for the output token.

        Args:
            endpoint: Resolved RPC endpoint of the pool's network.
            request: Pool id, token pair and base-unit input amount.

        Returns:
            Absolute value of the output asset delta as an integer string.

        Notes:
            - One swap step, asset index 0 in, asset index 1 out.
            - Sender and recipient are the zero address; nothing is transferred.
            - The vault reports the output delta as negative (tokens leaving the
              vault), so only its magnitude is kept.
        """
        if not isinstance(request, BatchSwapRequest):
            raise TypeError(f"{self.adapter_name} cannot quote {type(request).__name__}")

        w3 = self.web3_factory(endpoint)
        vault = w3.eth.contract(
            address=Web3.to_checksum_address(self.vault_address),
            abi=load_balancer_vault_abi(),
        )
        swaps = [
            (
                Web3.to_bytes(hexstr=request.pool_id),
                0,
                1,
                request.input_amount,
                b"",
            )
        ]
        assets = [
            Web3.to_checksum_address(request.input_token),
            Web3.to_checksum_address(request.output_token),
        ]
        funds = (ADDRESS_ZERO, False, ADDRESS_ZERO, False)

        logger.debug(
            "queryBatchSwap pool=%s amount=%d on %s",
            request.pool_id,
            request.input_amount,
            endpoint.network.value,
        )
        try:
            deltas = await asyncio.to_thread(
                vault.functions.queryBatchSwap(
                    SWAP_KIND_GIVEN_IN, swaps, assets, funds
                ).call
            )
        except Exception as e:
            raise QuoteError("queryBatchSwap failed", e) from e

        try:
            output_delta = int(deltas[1])
        except (TypeError, ValueError, IndexError) as e:
            raise QuoteError("Malformed queryBatchSwap response", e) from e

        return str(abs(output_delta))
