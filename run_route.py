#!/usr/bin/env python3
"""
run_route.py - CLI entrypoint for paper route execution.

Usage:
    python run_route.py route.json
    python run_route.py route.json --halt-after 1 --resume
    python run_route.py route.json --fail-step step-2 --no-json-logs
"""

import asyncio
import json
import sys
from pathlib import Path

import click

from config import load_sdk_config
from core.exceptions import HopsError
from core.logging import get_logger, set_global_context, setup_logging
from core.models import Route
from core.validators import require_step
from execution.orchestrator import RouteOrchestrator
from execution.paper_executor import PaperExecutorConfig, paper_executor_factory
from execution.state_machine import RouteState

logger = get_logger("hops.cli")


def _config_default(name: str):
    """Option default read from sdk.yaml and HOPS_* overrides when the CLI runs."""
    return lambda: getattr(load_sdk_config(), name)


def load_route(path: Path) -> Route:
    """
    Load a route from a JSON file (service format).

    Raises:
        ValidationError: a step is malformed
    """
    with open(path, "r", encoding="utf-8") as f:
        route = Route.from_dict(json.load(f))
    for step in route.steps:
        require_step(step)
    return route


async def run_route(
    route: Route,
    executor_config: PaperExecutorConfig,
    halt_after: int | None,
    resume: bool,
) -> RouteState | None:
    """
    Execute a route with the paper executor.

    Returns the lifecycle state the route ended in (None once deregistered
    after completing, failing or stopping).
    """
    orchestrator = RouteOrchestrator(executor_factory=paper_executor_factory(executor_config))
    background_requested = False
    background_tasks: list[asyncio.Task] = []

    def on_update(updated: Route) -> None:
        nonlocal background_requested
        done = sum(1 for step in updated.steps if step.is_done)
        if halt_after is not None and not background_requested and done >= halt_after:
            background_requested = True
            background_tasks.append(asyncio.get_running_loop().create_task(
                orchestrator.move_execution_to_background(updated)
            ))

    try:
        await orchestrator.execute_route(None, route, {"update_callback": on_update})
        await asyncio.gather(*background_tasks)

        if resume and orchestrator.get_route_state(route) == RouteState.HALTED:
            logger.info("Resuming halted route", extra={"context": {"route_id": route.id}})
            await orchestrator.resume_route(None, route)
    finally:
        await asyncio.gather(*background_tasks, return_exceptions=True)

    return orchestrator.get_route_state(route)


def print_summary(route: Route, state: RouteState | None) -> None:
    click.echo("\n" + "=" * 60)
    click.echo(f"ROUTE {route.id}")
    click.echo("=" * 60)
    for index, step in enumerate(route.steps):
        status = step.execution.status.value if step.execution else "NOT_STARTED"
        to_amount = step.execution.to_amount if step.execution and step.execution.to_amount else "-"
        click.echo(
            f"[{index}] {step.id:<16} {step.tool:<12} {step.action.from_amount:>24} -> {to_amount:>24}  {status}"
        )
    click.echo("-" * 60)
    if state is None:
        click.echo("Result: COMPLETED" if route.is_done else "Result: NOT COMPLETED")
    else:
        click.echo(f"Result: {state.value}")
    click.echo("=" * 60)


@click.command()
@click.argument("route_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--halt-after",
    default=None,
    type=int,
    help="Move execution to the background once this many steps are DONE",
)
@click.option(
    "--resume/--no-resume",
    default=False,
    help="Resume the route if it ended halted",
)
@click.option(
    "--fail-step",
    multiple=True,
    help="Step id that the paper executor should fail (repeatable)",
)
@click.option(
    "--slippage-bps",
    default=0,
    type=int,
    help="Slippage applied to every simulated step output",
)
@click.option(
    "--delay-ms",
    default=50,
    type=int,
    help="Simulated duration of each step in milliseconds",
)
@click.option(
    "--output",
    "-o",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write the executed route as JSON to this file",
)
@click.option(
    "--log-level",
    "-l",
    default=_config_default("log_level"),
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (default: logging.level in sdk.yaml or HOPS_LOG_LEVEL)",
)
@click.option(
    "--json-logs/--no-json-logs",
    default=_config_default("json_logs"),
    help="Use JSON log format (default: logging.json in sdk.yaml)",
)
def main(
    route_file: Path,
    halt_after: int | None,
    resume: bool,
    fail_step: tuple[str, ...],
    slippage_bps: int,
    delay_ms: int,
    output: Path | None,
    log_level: str,
    json_logs: bool,
) -> None:
    """
    HOPS Paper Route Execution.

    Runs every step of a route through the paper executor and prints
    the realized amounts.
    """
    setup_logging(level=log_level, json_output=json_logs)
    set_global_context(service="hops-cli", version="0.1.0")

    try:
        route = load_route(route_file)
    except HopsError as e:
        logger.error(
            f"Route file rejected: {e}",
            extra={"context": {"route_file": str(route_file), "error_code": e.code.value}},
        )
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    executor_config = PaperExecutorConfig(
        delay_ms=max(delay_ms, 1) if halt_after is not None else delay_ms,
        slippage_bps=slippage_bps,
        fail_step_ids=set(fail_step),
    )

    exit_code = 0
    state: RouteState | None = None
    try:
        state = asyncio.run(run_route(route, executor_config, halt_after, resume))
    except HopsError as e:
        logger.error(
            f"Route execution failed: {e}",
            extra={"context": {"route_id": route.id, "error_code": e.code.value}},
        )
        click.echo(f"Error: {e}", err=True)
        exit_code = 1

    print_summary(route, state)

    if output is not None:
        output.write_text(json.dumps(route.to_dict(), indent=2), encoding="utf-8")

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
