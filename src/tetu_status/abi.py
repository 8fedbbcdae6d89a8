from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path

ABIS_DIR = Path(__file__).parent / "abis"

BALANCER_VAULT_ABI_PATH = ABIS_DIR / "BalancerVault.json"
TETUSWAP_PAIR_ABI_PATH = ABIS_DIR / "TetuSwapPair.json"
TETUSWAP_ROUTER_ABI_PATH = ABIS_DIR / "TetuSwapRouter.json"
CONTRACT_READER_ABI_PATH = ABIS_DIR / "ContractReader.json"


@lru_cache(maxsize=None)
def _load_abi_cached(path: str) -> tuple[dict, ...]:
    with Path(path).open() as f:
        data = json.load(f)
    return tuple(data["abi"])


def load_abi(path: str | Path) -> list[dict]:
    """Load an ABI from a JSON file and return its "abi" field.

    Args:
        path: Path to the JSON file containing an "abi" field.

    Returns:
        ABI as a list of dictionaries.

    Raises:
        FileNotFoundError: If the file does not exist.
        json.JSONDecodeError: If the file is not valid JSON.
        KeyError: If the JSON does not contain an "abi" field.
    """
    return list(_load_abi_cached(str(path)))


def load_balancer_vault_abi() -> list[dict]:
    """Load the Balancer Vault ABI (queryBatchSwap only)."""
    return load_abi(BALANCER_VAULT_ABI_PATH)


def load_tetuswap_pair_abi() -> list[dict]:
    """Load the TetuSwap pair ABI."""
    return load_abi(TETUSWAP_PAIR_ABI_PATH)


def load_tetuswap_router_abi() -> list[dict]:
    """Load the TetuSwap router ABI."""
    return load_abi(TETUSWAP_ROUTER_ABI_PATH)


def load_contract_reader_abi() -> list[dict]:
    return load_abi(CONTRACT_READER_ABI_PATH)
