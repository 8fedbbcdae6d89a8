from __future__ import annotations

from rich.console import Console

from ..settings import TetuStatusSettings
from .base import StatusPublisher, publish_metric
from .console import ConsoleStatusPublisher


def create_publisher(
    settings: TetuStatusSettings,
    agent_name: str,
    console: Console | None = None,
) -> StatusPublisher:
    """Build the status publisher of one agent.

    Raises:
        ConfigurationError: If agent keys are required and this agent has none.
    """
    if settings.require_agent_keys:
        key = settings.agent_key_required(agent_name)
    else:
        key = settings.agent_keys.get(agent_name)
    return ConsoleStatusPublisher(agent_name, key=key, console=console)


__all__ = [
    "ConsoleStatusPublisher",
    "StatusPublisher",
    "create_publisher",
    "publish_metric",
]
