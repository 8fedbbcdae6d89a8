"""Rich console status display."""

from __future__ import annotations

from collections import deque

from pydantic import SecretStr
from rich.console import Console
from rich.text import Text

from ..settings import ActivityKind
from .base import StatusPublisher

ROTATION_SIZE = 10


class ConsoleStatusPublisher(StatusPublisher):
    """Print status and nickname changes to the terminal.

    Keeps the same state a presence display would: a bounded status
    rotation, the current status and one nickname per group.
    """

    def __init__(
        self,
        agent_name: str,
        key: SecretStr | None = None,
        console: Console | None = None,
    ):
        super().__init__(agent_name, key)
        self.console = console or Console()
        self.statuses: deque[tuple[ActivityKind, str]] = deque(maxlen=ROTATION_SIZE)
        self.current: tuple[ActivityKind, str] | None = None
        self.nicknames: dict[str, str] = {}

    async def add_status(self, kind: ActivityKind, text: str) -> None:
        if (kind, text) not in self.statuses:
            self.statuses.append((kind, text))

    async def update_status(self, kind: ActivityKind, text: str) -> None:
        self.current = (kind, text)
        self.console.print(
            Text.assemble(
                (f"[{self.agent_name}] ", "bold cyan"),
                (f"{kind.value.capitalize()} ", "dim"),
                (text, "green"),
            )
        )

    async def set_nickname(self, group_id: str, text: str) -> None:
        if self.nicknames.get(group_id) == text:
            return
        self.nicknames[group_id] = text
        self.console.print(
            Text.assemble(
                (f"[{self.agent_name}] ", "bold cyan"),
                (f"nickname in {group_id}: ", "dim"),
                (text, "magenta"),
            )
        )
