from __future__ import annotations

from .registry import AGENT_REGISTRY, build_agents
from .scheduler import Agent, CycleResult, run_agent, run_agents, run_cycle, run_once

__all__ = [
    "AGENT_REGISTRY",
    "Agent",
    "CycleResult",
    "build_agents",
    "run_agent",
    "run_agents",
    "run_cycle",
    "run_once",
]
