"""Strafe the agent toward the middle of its block before precision actions."""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Literal

from mc_navigator.adapters.world import Bot
from mc_navigator.config import MovementTuning
from mc_navigator.errors import CenteringFailedError
from mc_navigator.models import AxisDirection, Vec3
from mc_navigator.navigation.direction import facing_direction

StrafeSide = Literal["left", "right"]

logger = logging.getLogger("mc_navigator.navigation.centering")


def perpendicular_offset(position: Vec3, facing: AxisDirection) -> float:
    """Offset from block center on the axis perpendicular to ``facing``, in [-0.5, 0.5)."""
    coord = position.z if facing.x != 0 else position.x
    return (coord % 1.0) - 0.5


def strafe_direction(facing: AxisDirection, offset: float) -> StrafeSide:
    if facing.x > 0:
        return "left" if offset > 0 else "right"
    if facing.x < 0:
        return "right" if offset > 0 else "left"
    if facing.z > 0:
        return "left" if offset > 0 else "right"
    return "right" if offset > 0 else "left"


async def strafe_to_middle(bot: Bot, tuning: MovementTuning | None = None) -> None:
    """Pulse-strafe until the perpendicular offset is inside the centered band.

    Does nothing when the agent is already within the alignment threshold.
    Raises ``CenteringFailedError`` when the band is not reached after the
    configured number of attempts.
    """
    tuning = tuning or MovementTuning()
    facing = facing_direction(bot.yaw)

    for attempt in range(1, tuning.strafe_max_attempts + 1):
        offset = perpendicular_offset(bot.position, facing)
        if abs(offset) <= tuning.alignment_threshold:
            return

        side = strafe_direction(facing, offset)
        before = bot.position
        bot.set_control_state(side, True)
        await asyncio.sleep(tuning.strafe_pulse)
        bot.set_control_state(side, False)

        after = bot.position
        remaining = perpendicular_offset(after, facing)
        logger.debug(
            "strafe_attempt",
            extra={
                "attempt": attempt,
                "side": side,
                "offset_before": round(abs(offset), 3),
                "offset_after": round(abs(remaining), 3),
                "moved": round(before.distance_to(after), 3),
            },
        )
        if abs(remaining) <= tuning.centered_band:
            return

    remaining = perpendicular_offset(bot.position, facing)
    if abs(remaining) > tuning.centered_band:
        raise CenteringFailedError(
            f"Failed to center after {tuning.strafe_max_attempts} attempts: "
            f"still {abs(remaining):.2f}b from center",
            details={"offset": remaining, "facing": str(facing)},
        )


async def center_both_axes(bot: Bot, tuning: MovementTuning | None = None) -> None:
    """Center on x then z by turning to each axis, then restore the original yaw."""
    tuning = tuning or MovementTuning()
    original_yaw = bot.yaw

    try:
        await bot.look(0.0, 0.0)
        await asyncio.sleep(tuning.look_settle)
        await strafe_to_middle(bot, tuning)

        await bot.look(math.pi / 2, 0.0)
        await asyncio.sleep(tuning.look_settle)
        await strafe_to_middle(bot, tuning)
    finally:
        await bot.look(original_yaw, 0.0)
