"""Agent configuration, resolved once at startup: CLI > ENV > TOML file."""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SecretStr,
    field_validator,
    model_validator,
)
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .constants import (
    CONTRACT_READERS,
    DEFAULT_AGENT_INTERVALS,
    POLYGON_TOKENS,
    PRICE_FEED_COIN_ID,
    PRICE_FEED_URL,
    SUPPLY_FEED_URL,
    TETUBAL_POOL_ID,
    TETUSWAP_DEFAULT_FEE,
    TETUSWAP_ROUTER,
    TVL_FEED_URL,
)
from .errors import ConfigurationError

load_dotenv()


class Network(str, Enum):
    POLYGON = "polygon"
    FANTOM = "fantom"
    ETHEREUM = "ethereum"


class ActivityKind(str, Enum):
    """Presence activity shown next to a status text."""

    PLAYING = "playing"
    LISTENING = "listening"
    WATCHING = "watching"
    COMPETING = "competing"


def _default_reader_addresses() -> dict[Network, str]:
    return {
        Network(network): address
        for network, address in CONTRACT_READERS.items()
        if address is not None
    }


class QuoteSettings(BaseModel):
    """Contract coordinates used by the discount agents."""

    network: Network = Network.POLYGON

    # tetuBAL -> 80BAL-20WETH BPT via Balancer batch swap
    tetubal_pool_id: str = TETUBAL_POOL_ID
    tetubal_token: str = POLYGON_TOKENS["TETUBAL"]
    tetubal_underlying: str = POLYGON_TOKENS["BAL_WETH_BPT"]

    # tetuQI -> QI via TetuSwap router
    tetuqi_router: str = TETUSWAP_ROUTER
    tetuqi_pair: str | None = None
    tetuqi_fee: int = Field(default=TETUSWAP_DEFAULT_FEE, ge=0)
    tetuqi_token: str = POLYGON_TOKENS["TETUQI"]
    qi_token: str = POLYGON_TOKENS["QI"]

    model_config = ConfigDict(extra="ignore", frozen=True)


class TetuStatusSettings(BaseSettings):
    """Endpoints, feeds, agent schedule and publishing credentials.

    Init kwargs (the CLI) win over TETU_STATUS_* environment variables,
    which win over the TOML config file.

    The model is frozen: it is built once at startup and shared read-only
    by every agent.
    """

    # --- network endpoints ---
    polygon_rpc: str | None = None
    fantom_rpc: str | None = None
    ethereum_rpc: str | None = None

    # --- publishing ---
    agent_keys: dict[str, SecretStr] = Field(default_factory=dict)
    require_agent_keys: bool = False
    guild_ids: list[str] = Field(default_factory=list)
    activity_kind: ActivityKind = ActivityKind.WATCHING

    # --- agents ---
    enabled_agents: list[str] | None = None
    agent_intervals: dict[str, float] = Field(default_factory=dict)

    # --- HTTP feeds ---
    price_feed_url: str = PRICE_FEED_URL
    price_feed_coin_id: str = PRICE_FEED_COIN_ID
    supply_feed_url: str = SUPPLY_FEED_URL
    tvl_feed_url: str = TVL_FEED_URL
    feed_timeout: float = Field(default=10.0, gt=0)
    feed_max_tries: int = Field(default=3, ge=1)

    # --- on-chain TVL ---
    tvl_networks: list[Network] = Field(default_factory=lambda: [Network.POLYGON])
    reader_addresses: dict[Network, str] = Field(
        default_factory=_default_reader_addresses
    )
    ignored_vaults: list[str] = Field(default_factory=list)

    # --- discount quotes ---
    quotes: QuoteSettings = Field(default_factory=QuoteSettings)

    # --- logging ---
    verbose: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="TETU_STATUS_",
        env_file=".env",
        extra="ignore",  # ignore unknown keys in env/config file
        frozen=True,
    )

    @field_validator("agent_intervals")
    @classmethod
    def validate_intervals(cls, v: dict[str, float]) -> dict[str, float]:
        """Reject non-positive polling intervals."""
        bad = {name: seconds for name, seconds in v.items() if seconds <= 0}
        if bad:
            raise ValueError(f"agent_intervals must be positive: {bad}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_reader_coverage(self) -> "TetuStatusSettings":
        """Every TVL network needs a contract reader address."""
        missing = [n.value for n in self.tvl_networks if n not in self.reader_addresses]
        if missing:
            raise ValueError(
                f"reader_addresses missing for tvl_networks: {', '.join(missing)}"
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert the TOML file below the environment; secrets are refused there."""
        env_cfg = os.environ.get("TETU_STATUS_CONFIG")
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    local_config = Path("tetu-status.toml")
                    user_config = Path.home() / ".config" / "tetu-status" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [tetu_status]
                body = data.get("tetu_status", data)
                if not isinstance(body, dict):
                    return {}

                if "agent_keys" in body:
                    raise ValueError(
                        "Security violation: 'agent_keys' found in TOML config file. "
                        "Secrets must only be provided via environment variables or CLI flags."
                    )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,  # optional secrets dir
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a JSON-friendly dict with secrets redacted."""
        data = self.model_dump(mode="json")
        data["agent_keys"] = {name: "***redacted***" for name in self.agent_keys}
        for network in Network:
            key = f"{network.value}_rpc"
            if data.get(key):
                data[key] = _redact_userinfo(data[key])
        return data

    @property
    def effective_log_level(self) -> str:
        return "DEBUG" if self.verbose else self.log_level

    def rpc_url(self, network: Network) -> str | None:
        return getattr(self, f"{Network(network).value}_rpc")

    def interval_for(self, agent_name: str) -> float:
        """Polling interval for an agent, honouring overrides."""
        if agent_name in self.agent_intervals:
            return self.agent_intervals[agent_name]
        return DEFAULT_AGENT_INTERVALS.get(agent_name, 60.0)

    def is_agent_enabled(self, agent_name: str) -> bool:
        return self.enabled_agents is None or agent_name in self.enabled_agents

    def agent_key_required(self, agent_name: str) -> SecretStr:
        """Get the publishing key of an agent, raising ConfigurationError if not set."""
        key = self.agent_keys.get(agent_name)
        if key is None or not key.get_secret_value():
            raise ConfigurationError(f"agent key for '{agent_name}' must be configured")
        return key


def _redact_userinfo(url: str) -> str:
    scheme, sep, rest = url.partition("://")
    if not sep or "@" not in rest.split("/", 1)[0]:
        return url
    return f"{scheme}://***@{rest.split('@', 1)[1]}"
