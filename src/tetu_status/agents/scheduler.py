"""Per-agent polling loop: compute, publish, sleep, repeat."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Sequence

from ..errors import truncate_message
from ..metrics import Metric
from ..publishers import StatusPublisher, publish_metric
from ..settings import ActivityKind

logger = logging.getLogger(__name__)

MetricComputation = Callable[[], Awaitable[Metric]]
SleepFn = Callable[[float], Awaitable[None]]


@dataclass
class Agent:
    """One independently scheduled metric."""

    name: str
    interval_seconds: float
    compute: MetricComputation
    publisher: StatusPublisher
    kind: ActivityKind = ActivityKind.WATCHING
    group_ids: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class CycleResult:
    """Outcome of one compute + publish cycle."""

    agent: str
    metric: Metric | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _describe(e: Exception) -> str:
    return truncate_message(str(e) or type(e).__name__)


async def run_cycle(agent: Agent) -> CycleResult:
    """Compute the agent's metric and publish it.

    Never raises: failures of either step come back as a failed result. A
    metric that fails to compute is not published, so the display keeps the
    previous value.
    """
    try:
        metric = await agent.compute()
    except Exception as e:
        return CycleResult(agent=agent.name, error=_describe(e))

    try:
        await publish_metric(agent.publisher, metric, agent.kind, agent.group_ids)
    except Exception as e:
        return CycleResult(agent=agent.name, metric=metric, error=_describe(e))

    return CycleResult(agent=agent.name, metric=metric)


async def run_agent(
    agent: Agent,
    *,
    max_cycles: int | None = None,
    sleep: SleepFn = asyncio.sleep,
    on_result: Callable[[CycleResult], None] | None = None,
) -> None:
    """Run ``agent`` forever (or for ``max_cycles`` cycles).

    Each cycle finishes publishing before the next one starts. Errors are
    logged with the agent name and the loop carries on at the same cadence.
    """
    logger.info(
        "Starting agent '%s' (every %ss)", agent.name, f"{agent.interval_seconds:g}"
    )
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        result = await run_cycle(agent)
        cycles += 1

        if result.ok:
            assert result.metric is not None
            logger.info(
                "[%s] %s | %s", agent.name, result.metric.label, result.metric.value
            )
        else:
            logger.error("[%s] %s", agent.name, result.error)

        if on_result is not None:
            on_result(result)

        if max_cycles is not None and cycles >= max_cycles:
            break
        await sleep(agent.interval_seconds)


async def run_agents(agents: Sequence[Agent], *, sleep: SleepFn = asyncio.sleep) -> None:
    """Run every agent as its own task until the process stops."""
    if not agents:
        logger.warning("No agents to run")
        return
    tasks = [
        asyncio.create_task(run_agent(agent, sleep=sleep), name=f"agent:{agent.name}")
        for agent in agents
    ]
    await asyncio.gather(*tasks)


async def run_once(agents: Sequence[Agent]) -> list[CycleResult]:
    """Run a single cycle of every agent concurrently."""
    return list(await asyncio.gather(*(run_cycle(agent) for agent in agents)))
