from __future__ import annotations

import math

import pytest

from mc_navigator.errors import NotAxisAlignedError
from mc_navigator.models import EAST, NORTH, SOUTH, WEST, AxisDirection, FailureKind, Vec3
from mc_navigator.navigation.direction import facing_direction, horizontal_distance, next_direction


def test_next_direction_follows_larger_axis() -> None:
    origin = Vec3(0, 64, 0)

    assert next_direction(origin, Vec3(5, 64, 1)) == EAST
    assert next_direction(origin, Vec3(-5, 64, 1)) == WEST
    assert next_direction(origin, Vec3(1, 64, 4)) == SOUTH
    assert next_direction(origin, Vec3(1, 64, -4)) == NORTH


def test_next_direction_ties_resolve_to_z_axis() -> None:
    origin = Vec3(0, 64, 0)

    assert next_direction(origin, Vec3(3, 64, 3)) == SOUTH
    assert next_direction(origin, Vec3(3, 64, -3)) == NORTH
    assert next_direction(origin, Vec3(0, 70, 0)) == NORTH


def test_next_direction_is_always_axis_aligned() -> None:
    for target in (Vec3(2.4, 0, -7.1), Vec3(-0.2, 3, 0.1), Vec3(9, -4, 9)):
        direction = next_direction(Vec3(0.5, 0, 0.5), target)
        assert abs(direction.x) + abs(direction.z) == 1
        assert direction.y == 0


@pytest.mark.parametrize(
    ("yaw", "expected"),
    [
        (0.0, SOUTH),
        (math.pi / 2, WEST),
        (math.pi, NORTH),
        (3 * math.pi / 2, EAST),
        (-math.pi / 2, EAST),
        (math.radians(90.6), WEST),
        (4 * math.pi, SOUTH),
    ],
)
def test_facing_direction_table(yaw: float, expected: AxisDirection) -> None:
    assert facing_direction(yaw) == expected


def test_facing_direction_rejects_off_axis_yaw() -> None:
    with pytest.raises(NotAxisAlignedError) as exc_info:
        facing_direction(math.radians(45))

    assert exc_info.value.kind is FailureKind.NOT_AXIS_ALIGNED
    assert "not axis-aligned" in str(exc_info.value)


def test_axis_direction_rejects_diagonals_and_zero() -> None:
    with pytest.raises(ValueError):
        AxisDirection(1, 1)
    with pytest.raises(ValueError):
        AxisDirection(0, 0)


def test_horizontal_distance_ignores_height() -> None:
    assert horizontal_distance(Vec3(0, 0, 0), Vec3(3, 50, 4)) == pytest.approx(5.0)
