import pytest
from unittest.mock import MagicMock

from tetu_status.adapters.quote_adapters import RouterSwapQuoteAdapter, RouterSwapRequest
from tetu_status.adapters.quote_adapters.router_swap import order_reserves
from tetu_status.constants import POLYGON_TOKENS, TETUSWAP_ROUTER
from tetu_status.endpoints import parse_endpoint
from tetu_status.errors import QuoteError
from tetu_status.settings import Network

PAIR = "0x0000000000000000000000000000000000000abc"
LOW = "0x0000000000000000000000000000000000000001"
HIGH = "0x00000000000000000000000000000000000000ff"


@pytest.fixture
def endpoint():
    return parse_endpoint(Network.POLYGON, "https://rpc.example.org")


@pytest.fixture
def contracts():
    """Separate pair and router contract mocks keyed by address."""
    pair = MagicMock()
    router = MagicMock()
    pair.functions.getReserves.return_value.call.return_value = [1000, 2000, 0]
    router.functions.getAmountOut.return_value.call.return_value = 950

    def contract(address, abi):
        return pair if address.lower() == PAIR.lower() else router

    w3 = MagicMock()
    w3.eth.contract.side_effect = contract
    return w3, pair, router


def _request(input_token, output_token, amount=10**18):
    return RouterSwapRequest(
        router=TETUSWAP_ROUTER,
        pair=PAIR,
        fee=10,
        input_token=input_token,
        output_token=output_token,
        input_amount=amount,
    )


def test_order_reserves_lower_address_owns_reserve0():
    assert order_reserves(LOW, HIGH, 1000, 2000) == (1000, 2000)
    assert order_reserves(HIGH, LOW, 1000, 2000) == (2000, 1000)


def test_order_reserves_is_case_insensitive():
    assert order_reserves(HIGH.upper().replace("0X", "0x"), LOW, 1, 2) == (2, 1)


def test_order_reserves_compares_numerically():
    # tetuQI (0x4C..) sorts before QI (0x58..)
    assert order_reserves(POLYGON_TOKENS["TETUQI"], POLYGON_TOKENS["QI"], 7, 9) == (7, 9)
    assert order_reserves(POLYGON_TOKENS["QI"], POLYGON_TOKENS["TETUQI"], 7, 9) == (9, 7)


@pytest.mark.asyncio
async def test_quote_passes_ordered_reserves_and_fee(contracts, endpoint):
    w3, _pair, router = contracts
    adapter = RouterSwapQuoteAdapter(web3_factory=lambda _endpoint: w3)

    result = await adapter.quote(endpoint, _request(LOW, HIGH))

    assert result == "950"
    router.functions.getAmountOut.assert_called_once_with(10**18, 1000, 2000, 10)


@pytest.mark.asyncio
async def test_quote_reversed_direction_swaps_reserves(contracts, endpoint):
    w3, _pair, router = contracts
    adapter = RouterSwapQuoteAdapter(web3_factory=lambda _endpoint: w3)

    await adapter.quote(endpoint, _request(HIGH, LOW, amount=5))

    router.functions.getAmountOut.assert_called_once_with(5, 2000, 1000, 10)


@pytest.mark.asyncio
async def test_quote_wraps_reserve_failure(contracts, endpoint):
    w3, pair, router = contracts
    pair.functions.getReserves.return_value.call.side_effect = ConnectionError("reset")
    adapter = RouterSwapQuoteAdapter(web3_factory=lambda _endpoint: w3)

    with pytest.raises(QuoteError, match="getReserves failed: reset"):
        await adapter.quote(endpoint, _request(LOW, HIGH))
    router.functions.getAmountOut.assert_not_called()


@pytest.mark.asyncio
async def test_quote_wraps_router_failure(contracts, endpoint):
    w3, _pair, router = contracts
    router.functions.getAmountOut.return_value.call.side_effect = ValueError("x" * 500)
    adapter = RouterSwapQuoteAdapter(web3_factory=lambda _endpoint: w3)

    with pytest.raises(QuoteError, match="getAmountOut failed") as exc_info:
        await adapter.quote(endpoint, _request(LOW, HIGH))
    assert str(exc_info.value) == "getAmountOut failed: " + "x" * 128


@pytest.mark.asyncio
async def test_quote_rejects_negative_amount_out(contracts, endpoint):
    w3, _pair, router = contracts
    router.functions.getAmountOut.return_value.call.return_value = -1
    adapter = RouterSwapQuoteAdapter(web3_factory=lambda _endpoint: w3)

    with pytest.raises(QuoteError, match="Negative"):
        await adapter.quote(endpoint, _request(LOW, HIGH))


def test_request_rejects_identical_tokens():
    with pytest.raises(ValueError, match="must differ"):
        _request(LOW, LOW.upper().replace("0X", "0x"))


def test_request_rejects_invalid_pair_address():
    with pytest.raises(ValueError, match="Invalid contract address"):
        RouterSwapRequest(
            router=TETUSWAP_ROUTER,
            pair="0x1234",
            fee=10,
            input_token=LOW,
            output_token=HIGH,
            input_amount=1,
        )


def test_request_rejects_negative_fee():
    with pytest.raises(ValueError, match="fee"):
        RouterSwapRequest(
            router=TETUSWAP_ROUTER,
            pair=PAIR,
            fee=-1,
            input_token=LOW,
            output_token=HIGH,
            input_amount=1,
        )
