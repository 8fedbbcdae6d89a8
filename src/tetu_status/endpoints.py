"""Network endpoint resolution and web3 client construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

from eth_typing import URI
from web3 import Web3

from .errors import ConfigurationError
from .settings import Network, TetuStatusSettings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EndpointDescriptor:
    """Connection details for one network's RPC endpoint.

    Credentials embedded in the URL userinfo are split out; ``origin`` never
    carries them.
    """

    network: Network
    origin: str
    path: str = ""
    user: str | None = None
    password: str | None = None

    @property
    def url(self) -> str:
        return f"{self.origin}{self.path}"

    @property
    def auth(self) -> tuple[str, str] | None:
        if self.user is None:
            return None
        return self.user, self.password or ""


def parse_endpoint(network: Network, raw_url: str) -> EndpointDescriptor:
    """Split an RPC URL into origin, path and basic-auth credentials."""
    parts = urlsplit(raw_url.strip())
    if not parts.scheme or not parts.hostname:
        raise ConfigurationError(f"Invalid RPC URL configured for {network.value}")

    host = parts.hostname
    if ":" in host:  # IPv6 literal
        host = f"[{host}]"
    origin = f"{parts.scheme}://{host}"
    try:
        port = parts.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid RPC port for {network.value}") from e
    if port is not None:
        origin = f"{origin}:{port}"

    path = parts.path
    if parts.query:
        path = f"{path}?{parts.query}"

    user = unquote(parts.username) if parts.username is not None else None
    password = unquote(parts.password) if parts.password is not None else None

    return EndpointDescriptor(
        network=network,
        origin=origin,
        path=path,
        user=user,
        password=password,
    )


def resolve_endpoint(
    settings: TetuStatusSettings, network: Network | str
) -> EndpointDescriptor:
    """Resolve the RPC endpoint configured for ``network``.

    Raises:
        ConfigurationError: If the network is unknown or has no RPC URL.
    """
    try:
        network = Network(network)
    except ValueError as e:
        raise ConfigurationError(f"Unknown network: {network}") from e

    raw_url = settings.rpc_url(network)
    if not raw_url:
        raise ConfigurationError(
            f"{network.value}_rpc must be configured "
            f"(env TETU_STATUS_{network.value.upper()}_RPC)"
        )
    return parse_endpoint(network, raw_url)


def make_web3(endpoint: EndpointDescriptor) -> Web3:
    """Build a web3 client for ``endpoint``, passing credentials out-of-band."""
    request_kwargs = {}
    if endpoint.auth is not None:
        request_kwargs["auth"] = endpoint.auth
    logger.debug("Connecting to %s RPC %s", endpoint.network.value, endpoint.origin)
    return Web3(Web3.HTTPProvider(URI(endpoint.url), request_kwargs=request_kwargs))
