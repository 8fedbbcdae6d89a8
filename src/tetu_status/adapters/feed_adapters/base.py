from __future__ import annotations

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from decimal import Decimal, InvalidOperation
from typing import Any, Generic, TypeVar

import backoff
import requests

from ...errors import FeedError, truncate_message
from ...settings import TetuStatusSettings
from ...units import to_decimal

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}


def _is_permanent(e: Exception) -> bool:
    return (
        isinstance(e, requests.exceptions.HTTPError)
        and e.response is not None
        and e.response.status_code not in RETRYABLE_STATUS_CODES
    )


def parse_amount(value: Any, field: str) -> Decimal:
    """Convert a JSON scalar to Decimal, raising FeedError when it is not numeric."""
    if isinstance(value, bool) or value is None or isinstance(value, (dict, list)):
        raise FeedError(f"Invalid {field} value: {value!r}")
    try:
        amount = to_decimal(value)
    except (InvalidOperation, ValueError, TypeError) as e:
        raise FeedError(f"Invalid {field} value: {value!r}") from e
    if not amount.is_finite():
        raise FeedError(f"Invalid {field} value: {value!r}")
    return amount


class BaseFeedAdapter(ABC, Generic[T]):
    """Abstract base class for HTTP JSON feeds."""

    def __init__(self, config: TetuStatusSettings):
        """Initialize the adapter with configuration."""
        self.config = config

    @property
    @abstractmethod
    def adapter_name(self) -> str:
        """Return the name of this adapter."""
        ...

    @property
    @abstractmethod
    def url(self) -> str:
        """Return the feed URL."""
        ...

    @abstractmethod
    def parse(self, payload: Any) -> T:
        """Extract the metric input from a decoded JSON payload."""
        ...

    async def fetch(self) -> T:
        """Fetch and parse the feed.

        Raises:
            FeedError: If the request fails or the payload is malformed.
        """
        payload = await self.fetch_json(self.url)
        return self.parse(payload)

    async def fetch_json(self, url: str) -> Any:
        """GET ``url`` and decode its JSON body with Decimal floats.

        Transient failures (connection errors, 429 and 5xx) are retried with
        exponential backoff up to ``feed_max_tries`` attempts.
        """

        def _on_backoff(details: Any) -> None:
            logger.warning(
                "%s feed attempt %d failed: %s",
                self.adapter_name,
                details["tries"],
                truncate_message(details.get("exception")),
            )

        @backoff.on_exception(
            backoff.expo,
            requests.exceptions.RequestException,
            max_tries=self.config.feed_max_tries,
            giveup=_is_permanent,
            jitter=backoff.full_jitter,
            on_backoff=_on_backoff,
        )
        async def _get_with_retry() -> requests.Response:
            response = await asyncio.to_thread(
                requests.get, url, timeout=self.config.feed_timeout
            )
            response.raise_for_status()
            return response

        logger.debug(f"Calling {url}")
        try:
            response = await _get_with_retry()
        except requests.exceptions.RequestException as e:
            raise FeedError(
                f"{self.adapter_name} feed request failed: {truncate_message(e)}"
            ) from e

        try:
            return response.json(parse_float=Decimal)
        except (json.JSONDecodeError, ValueError) as e:
            raise FeedError(f"Invalid JSON from {self.adapter_name} feed") from e
