from __future__ import annotations

import asyncio
import math

import pytest

from mc_navigator.adapters.simulated import SimulatedBot
from mc_navigator.config import MovementTuning
from mc_navigator.errors import CenteringFailedError
from mc_navigator.models import EAST, NORTH, SOUTH, WEST, AxisDirection, FailureKind, Vec3
from mc_navigator.navigation.centering import (
    center_both_axes,
    perpendicular_offset,
    strafe_direction,
    strafe_to_middle,
)


@pytest.mark.parametrize(
    ("facing", "positive", "negative"),
    [
        (EAST, "left", "right"),
        (WEST, "right", "left"),
        (SOUTH, "left", "right"),
        (NORTH, "right", "left"),
    ],
)
def test_strafe_direction_table(facing: AxisDirection, positive: str, negative: str) -> None:
    assert strafe_direction(facing, 0.3) == positive
    assert strafe_direction(facing, -0.3) == negative


def test_perpendicular_offset_uses_cross_axis_and_handles_negatives() -> None:
    assert perpendicular_offset(Vec3(0.5, 64, 0.8), EAST) == pytest.approx(0.3)
    assert perpendicular_offset(Vec3(0.8, 64, 0.5), NORTH) == pytest.approx(0.3)
    assert perpendicular_offset(Vec3(0.5, 64, -0.2), WEST) == pytest.approx(0.3)
    assert perpendicular_offset(Vec3(-3.9, 64, 0.5), SOUTH) == pytest.approx(-0.4)


@pytest.mark.parametrize("yaw", [0.0, math.pi / 2, math.pi, -math.pi / 2])
@pytest.mark.parametrize("offset", [0.3, -0.3, 0.45, -0.45])
def test_strafe_to_middle_reaches_centered_band(
    yaw: float, offset: float, fast_tuning: MovementTuning
) -> None:
    along_x = abs(math.sin(yaw)) > 0.5
    position = Vec3(4.5, 64, 7.5 + offset) if along_x else Vec3(4.5 + offset, 64, 7.5)
    bot = SimulatedBot(position=position, yaw=yaw)

    asyncio.run(strafe_to_middle(bot, fast_tuning))

    remaining = (bot.position.z if along_x else bot.position.x) % 1.0 - 0.5
    assert abs(remaining) <= 0.2


def test_already_centered_agent_does_not_move(fast_tuning: MovementTuning) -> None:
    bot = SimulatedBot(position=Vec3(0.55, 64, 0.45), yaw=0.0)

    asyncio.run(strafe_to_middle(bot, fast_tuning))

    assert bot.position == Vec3(0.55, 64, 0.45)


class _StuckBot:
    def __init__(self) -> None:
        self.position = Vec3(0.5, 64, 0.9)
        self.yaw = -math.pi / 2
        self.presses: list[str] = []

    def set_control_state(self, control: str, state: bool) -> None:
        if state:
            self.presses.append(control)


def test_centering_gives_up_after_three_attempts(fast_tuning: MovementTuning) -> None:
    bot = _StuckBot()

    with pytest.raises(CenteringFailedError) as exc_info:
        asyncio.run(strafe_to_middle(bot, fast_tuning))

    assert exc_info.value.kind is FailureKind.CENTERING_FAILED
    assert "Failed to center after 3 attempts" in str(exc_info.value)
    assert bot.presses == ["left", "left", "left"]


def test_center_both_axes_restores_yaw(fast_tuning: MovementTuning) -> None:
    bot = SimulatedBot(position=Vec3(0.8, 64, 0.15), yaw=-math.pi / 2)

    asyncio.run(center_both_axes(bot, fast_tuning))

    assert abs(bot.position.x % 1.0 - 0.5) <= 0.2
    assert abs(bot.position.z % 1.0 - 0.5) <= 0.2
    assert bot.yaw == pytest.approx(-math.pi / 2)
