"""Contract addresses, feed endpoints and agent defaults."""

from typing import Optional, TypedDict


class PolygonTokens(TypedDict):
    TETU: str
    TETUBAL: str
    BAL_WETH_BPT: str
    TETUQI: str
    QI: str


BALANCER_VAULT = "0xba12222222228d8ba445958a75a0704d566bf2c8"

POLYGON_TOKENS: PolygonTokens = {
    "TETU": "0x255707b70bf90aa112006e1b07b9aea6de021424",
    "TETUBAL": "0x7fc9e0aa043787bfad28e29632ada302c790ce33",
    "BAL_WETH_BPT": "0x3d468ab2329f296e1b9d8476bb54dd77d8c2320f",
    "TETUQI": "0x4cd44ced63d9a6fef595f6ad3f7ced13fceac768",
    "QI": "0x580a84c73811e1839f75d86d75d88cca0c241ff4",
}

# tetuBAL / 80BAL-20WETH stable pool on Polygon
TETUBAL_POOL_ID = "0xb797adfb7b268faeaa90cadbfed464c76ee599cd0002000000000000000005ba"

TETUSWAP_ROUTER = "0xbca055f25c3670fe0b1463e8d470585fe15ca819"
TETUSWAP_DEFAULT_FEE = 10

CONTRACT_READERS: dict[str, Optional[str]] = {
    "polygon": "0xca9c8fba773caafe19e6140ec0a7a54d996030da",
    "fantom": None,
    "ethereum": None,
}

# https://www.coingecko.com/en/api/documentation
PRICE_FEED_URL = (
    "https://api.coingecko.com/api/v3/simple/price"
    "?ids=tetu&vs_currencies=usd&include_24hr_change=true"
)
PRICE_FEED_COIN_ID = "tetu"
SUPPLY_FEED_URL = "https://api.tetu.io/api/v1/info/circulationSupply"
TVL_FEED_URL = "https://api.llama.fi/protocol/tetu"

TOKEN_DECIMALS = 18
STATUS_MAX_LENGTH = 128

# Polling cadence per agent, seconds
DEFAULT_AGENT_INTERVALS: dict[str, float] = {
    "tetu-price": 60,
    "circulating-supply": 300,
    "tvl": 300,
    "vault-tvl": 300,
    "tetubal-discount": 120,
    "tetuqi-discount": 120,
}
