"""Boundary to the presence/status display."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Iterable

from pydantic import SecretStr

from ..errors import PublishError, truncate_message
from ..settings import ActivityKind
from ..units import truncate_status

if TYPE_CHECKING:
    from ..metrics import Metric

logger = logging.getLogger(__name__)


class StatusPublisher(ABC):
    """Abstract base class for status displays.

    One publisher belongs to one agent; ``key`` is the agent's credential
    for the display service, if it needs one.
    """

    def __init__(self, agent_name: str, key: SecretStr | None = None):
        self.agent_name = agent_name
        self.key = key

    @abstractmethod
    async def add_status(self, kind: ActivityKind, text: str) -> None:
        """Register ``text`` in the display's status rotation."""
        ...

    @abstractmethod
    async def update_status(self, kind: ActivityKind, text: str) -> None:
        """Show ``text`` as the current status."""
        ...

    @abstractmethod
    async def set_nickname(self, group_id: str, text: str) -> None:
        """Rename the agent inside one display group."""
        ...


async def publish_metric(
    publisher: StatusPublisher,
    metric: Metric,
    kind: ActivityKind = ActivityKind.WATCHING,
    group_ids: Iterable[str] = (),
) -> None:
    """Push a metric to the display: status first, then a nickname per group.

    Nicknames are only set for labelled metrics. A rejected status update
    leaves both the old status and the old nickname in place.

    Raises:
        PublishError: If the display rejects any of the updates.
    """
    text = truncate_status(metric.value)
    try:
        await publisher.add_status(kind, text)
        await publisher.update_status(kind, text)
        if metric.label:
            for group_id in group_ids:
                await publisher.set_nickname(group_id, metric.label)
    except PublishError:
        raise
    except Exception as e:
        raise PublishError(
            f"{publisher.agent_name} status update failed: {truncate_message(e)}"
        ) from e
    logger.debug("%s published %r", publisher.agent_name, text)
