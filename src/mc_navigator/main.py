"""CLI startup entrypoint for MC Navigator."""

from __future__ import annotations

import asyncio

import typer
from rich import print

from mc_navigator.config import settings
from mc_navigator.movement import StepController, drive_to_target
from mc_navigator.navigation import describe_surroundings
from mc_navigator.scenarios import SCENARIOS, Scenario, build_scenario
from mc_navigator.telemetry import LoggingTelemetry, NullTelemetry, configure_logging

app = typer.Typer(help="MC Navigator movement engine")


def _load_scenario(name: str) -> Scenario:
    try:
        return build_scenario(name)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--scenario") from exc


@app.command("settings")
def show_settings() -> None:
    """Print the effective configuration."""
    print(settings.model_dump())


@app.command()
def simulate(
    scenario: str = typer.Option("tunnel", help=f"Scenario to run: {'/'.join(SCENARIOS)}"),
    max_iterations: int = typer.Option(None, help="Step budget (defaults to the configured value)"),
    dig_timeout: float = typer.Option(None, help="Per-block dig timeout in seconds"),
    allow_dig_down: bool = typer.Option(True, help="Allow digging straight down"),
) -> None:
    """Drive the agent through a simulated scenario and print the report."""
    configure_logging(settings.log_level)
    world = _load_scenario(scenario)
    telemetry = LoggingTelemetry() if settings.telemetry_enabled else NullTelemetry()
    controller = StepController(world.bot, tuning=settings.tuning(), telemetry=telemetry)

    report = asyncio.run(
        drive_to_target(
            controller,
            world.target,
            pillar_materials=world.pillar_materials,
            dig_timeout=dig_timeout,
            allow_dig_down=allow_dig_down,
            max_iterations=max_iterations or settings.max_iterations,
        )
    )

    print(
        {
            "scenario": world.name,
            "description": world.description,
            "arrived": report.arrived,
            "iterations": report.iterations,
            "blocks_mined": report.blocks_mined,
            "blocks_pillared": report.blocks_pillared,
            "final_position": world.bot.position.as_tuple(),
            "summary": report.summary(world.target),
            "steps": [
                {
                    "strategy": step.strategy.value if step.strategy else None,
                    "progress": round(step.progress_delta, 2),
                    "narrative": step.narrative,
                    "error": step.error,
                }
                for step in report.steps
            ],
        }
    )


@app.command()
def inspect(
    scenario: str = typer.Option("tunnel", help=f"Scenario to inspect: {'/'.join(SCENARIOS)}"),
) -> None:
    """Print the blocks around the agent at the scenario's start."""
    world = _load_scenario(scenario)
    print(describe_surroundings(world.bot))


if __name__ == "__main__":
    app()
