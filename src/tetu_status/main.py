"""CLI entrypoint for the TETU status agents."""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import Annotated, Any

import typer
from pydantic import ValidationError
from rich.console import Console

from .agents import build_agents, run_agents, run_once
from .formatter import format_results_table
from .logger import setup_logging
from .settings import TetuStatusSettings

app = typer.Typer(
    add_completion=False,
    no_args_is_help=False,
    add_help_option=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
    rich_markup_mode="rich",
    help="Publish TETU price, supply, discount and TVL metrics as status updates.",
)


def _build_logger() -> logging.Logger:
    """Build a logger instance."""
    return logging.getLogger("tetu_status")


@app.callback(invoke_without_command=True)
def run(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a TOML config file (can include [tetu_status] table).",
        ),
    ] = None,
    agents: Annotated[
        list[str] | None,
        typer.Option(
            "--agent",
            "-a",
            help="Only run the named agent (repeatable).",
        ),
    ] = None,
    log_level: Annotated[
        str | None,
        typer.Option(
            "--log-level",
            help="Override logging verbosity (TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL).",
        ),
    ] = None,
    verbose: Annotated[
        bool | None,
        typer.Option(
            "--verbose/--quiet",
            help="Verbose (DEBUG) logging.",
        ),
    ] = None,
    once: Annotated[
        bool,
        typer.Option(
            "--once",
            help="Compute and publish every metric once, print a summary and exit.",
        ),
    ] = False,
    show_config: Annotated[
        bool,
        typer.Option(
            "--show-config",
            help="Print effective config (with secrets redacted) and exit.",
        ),
    ] = False,
):
    """Start every enabled agent and keep publishing until interrupted."""
    if config_path:
        os.environ["TETU_STATUS_CONFIG"] = str(config_path)

    init_kwargs: dict[str, Any] = {}
    if agents:
        init_kwargs["enabled_agents"] = agents
    if log_level is not None:
        init_kwargs["log_level"] = log_level.upper()
    if verbose is not None:
        init_kwargs["verbose"] = verbose

    try:
        settings = TetuStatusSettings(**init_kwargs)
    except ValidationError as e:
        raise typer.BadParameter(str(e)) from e

    if show_config:
        typer.echo(json.dumps(settings.as_safe_dict(), indent=2))
        raise typer.Exit(code=0)

    setup_logging(settings.effective_log_level)
    logger = _build_logger()

    console = Console()
    built = build_agents(settings, console=console)
    logger.info("Built %d agent(s): %s", len(built), ", ".join(a.name for a in built))
    if not built:
        raise typer.Exit(code=1)

    if once:
        results = asyncio.run(run_once(built))
        format_results_table(results, console)
        raise typer.Exit(code=0 if all(r.ok for r in results) else 1)

    try:
        asyncio.run(run_agents(built))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


def main() -> None:
    """Entrypoint used by the console script."""
    app()


if __name__ == "__main__":
    main()
