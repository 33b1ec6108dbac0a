"""Drive the agent toward a target by repeating single steps."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from mc_navigator.config import DEFAULT_MAX_ITERATIONS, MovementTuning
from mc_navigator.models import StepOutcome, ToolMapping, Vec3, format_block_position
from mc_navigator.movement.controller import StepController

logger = logging.getLogger("mc_navigator.movement.driver")


@dataclass(slots=True)
class DriveReport:
    """Summary of one drive toward a target."""

    arrived: bool
    iterations: int
    distance_remaining: float
    distance_traveled: float
    blocks_mined: int = 0
    blocks_pillared: int = 0
    error: str | None = None
    steps: list[StepOutcome] = field(default_factory=list)

    @property
    def hit_iteration_limit(self) -> bool:
        return not self.arrived and self.error is None

    def summary(self, target: Vec3) -> str:
        if self.arrived:
            return (
                f"Reached target {format_block_position(target)}. Traveled {self.distance_traveled:.1f} blocks "
                f"in {self.iterations} steps. Mined {self.blocks_mined} blocks."
            )
        if self.error is not None:
            return self.error
        return (
            f"Reached iteration limit ({self.iterations} iterations). Made progress: traveled "
            f"{self.distance_traveled:.1f} blocks, mined {self.blocks_mined} blocks, pillared "
            f"{self.blocks_pillared} blocks, {self.distance_remaining:.1f} blocks remaining to target."
        )


def has_arrived(position: Vec3, target: Vec3, tuning: MovementTuning) -> bool:
    distance = position.distance_to(target)
    vertical = abs(position.y - target.y)
    return distance <= tuning.arrival_distance and vertical <= tuning.arrival_vertical_tolerance


def made_progress(outcome: StepOutcome, tuning: MovementTuning) -> bool:
    return (
        outcome.blocks_mined > 0
        or outcome.blocks_pillared > 0
        or outcome.progress_delta >= tuning.min_step_progress
    )


async def drive_to_target(
    controller: StepController,
    target: Vec3,
    *,
    pillar_materials: Sequence[str] = (),
    tool_mapping: ToolMapping | None = None,
    dig_timeout: float | None = None,
    allow_dig_down: bool = True,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> DriveReport:
    """Step toward ``target`` until it is reached or a step stalls.

    Movement controls are released on every exit.
    """
    bot = controller.bot
    tuning = controller.tuning
    start = bot.position
    report = DriveReport(arrived=False, iterations=0, distance_remaining=start.distance_to(target), distance_traveled=0.0)

    try:
        for _ in range(max_iterations):
            if has_arrived(bot.position, target, tuning):
                report.arrived = True
                break

            outcome = await controller.step(
                target,
                pillar_materials=pillar_materials,
                tool_mapping=tool_mapping,
                dig_timeout=dig_timeout,
                allow_dig_down=allow_dig_down,
            )
            report.iterations += 1
            report.steps.append(outcome)
            report.blocks_mined += outcome.blocks_mined
            report.blocks_pillared += outcome.blocks_pillared

            if not made_progress(outcome, tuning):
                report.error = outcome.error or "Stuck at this iteration with no info from the step"
                break
        else:
            report.arrived = has_arrived(bot.position, target, tuning)
    finally:
        bot.set_control_state("forward", False)
        bot.set_control_state("jump", False)

    position = bot.position
    report.distance_remaining = position.distance_to(target)
    report.distance_traveled = start.distance_to(position)
    logger.info(
        "drive_finished",
        extra={
            "arrived": report.arrived,
            "iterations": report.iterations,
            "blocks_mined": report.blocks_mined,
            "blocks_pillared": report.blocks_pillared,
            "error": report.error,
        },
    )
    return report
