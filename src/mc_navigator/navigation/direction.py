"""Greedy axis-aligned direction choice and yaw interpretation."""

from __future__ import annotations

import math

from mc_navigator.errors import NotAxisAlignedError
from mc_navigator.models import EAST, NORTH, SOUTH, WEST, AxisDirection, Vec3

FACING_TOLERANCE_DEGREES = 1.0

_FACING_BY_DEGREES = {
    0: SOUTH,
    90: WEST,
    180: NORTH,
    270: EAST,
}


def next_direction(current: Vec3, target: Vec3) -> AxisDirection:
    """Return the unit step along the axis with the larger remaining delta.

    Ties (including a zero delta on both axes) resolve to the z axis, and a
    zero delta on the chosen axis yields the negative direction.
    """
    dx = target.x - current.x
    dz = target.z - current.z
    if abs(dx) > abs(dz):
        return EAST if dx > 0 else WEST
    return SOUTH if dz > 0 else NORTH


def facing_direction(yaw: float) -> AxisDirection:
    """Map a yaw in radians to the cardinal direction it points along."""
    full_turn = 2 * math.pi
    normalized = ((yaw % full_turn) + full_turn) % full_turn
    degrees = math.degrees(normalized)
    rounded = round(degrees / 90) * 90
    if abs(degrees - rounded) > FACING_TOLERANCE_DEGREES:
        raise NotAxisAlignedError(
            f"Agent is not axis-aligned. Yaw: {yaw:.2f} rad ({degrees:.1f} deg). "
            "Expected exactly 0, 90, 180 or 270 deg",
            details={"yaw": yaw, "degrees": degrees},
        )
    return _FACING_BY_DEGREES[int(rounded) % 360]


def horizontal_distance(a: Vec3, b: Vec3) -> float:
    return a.horizontal_distance_to(b)
