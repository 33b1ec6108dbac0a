"""Passability checks for the cells around the agent."""

from __future__ import annotations

from dataclasses import dataclass, field

from mc_navigator.adapters.world import WorldSensor
from mc_navigator.models import AxisDirection, Block, Vec3, format_block_position

PASSABLE_BLOCK_NAMES = frozenset({"air", "cave_air", "void_air", "water", "lava"})
PATH_CHECK_MAX_BLOCKS = 100


def is_passable(block: Block | None) -> bool:
    """Whether the agent can occupy the cell (air, fluids and flora)."""
    if block is None:
        return True
    if block.name in PASSABLE_BLOCK_NAMES:
        return True
    return block.bounding_box == "empty"


@dataclass(slots=True)
class BlocksAhead:
    feet: Block | None
    head: Block | None
    feet_clear: bool
    head_clear: bool

    @property
    def both_clear(self) -> bool:
        return self.feet_clear and self.head_clear

    @property
    def both_blocked(self) -> bool:
        return not self.feet_clear and not self.head_clear


def blocks_ahead(sensor: WorldSensor, pos: Vec3, direction: AxisDirection) -> BlocksAhead:
    """Return the cells one step ahead at feet and head height."""
    feet = sensor.block_at(pos.offset(direction.x, 0, direction.z).floored())
    head = sensor.block_at(pos.offset(direction.x, 1, direction.z).floored())
    return BlocksAhead(feet=feet, head=head, feet_clear=is_passable(feet), head_clear=is_passable(head))


@dataclass(slots=True)
class PathCheck:
    clear: bool
    blocking: list[Block] = field(default_factory=list)

    def describe_blocking(self) -> str:
        if not self.blocking:
            return "Maybe dig those blocks first."
        names = ", ".join(f"{block.name} at {format_block_position(block.position)}" for block in self.blocking)
        return f"Blocking block(s): {names}"


def is_path_clear(
    sensor: WorldSensor,
    start: Vec3,
    goal: Vec3,
    max_blocks: int = PATH_CHECK_MAX_BLOCKS,
) -> PathCheck:
    """Search axis steps that shrink the distance to ``goal`` for an open route.

    The goal cell itself is never tested, so this answers whether the agent
    can reach the block it is about to break. At most ``max_blocks`` cells are
    visited; exhausting the budget counts as blocked.
    """
    return _search(sensor, start, goal.floored(), max_blocks, set())


def _search(
    sensor: WorldSensor,
    pos: Vec3,
    goal: Vec3,
    max_blocks: int,
    visited: set[tuple[int, int, int]],
) -> PathCheck:
    key = pos.block_key()
    if key in visited or len(visited) >= max_blocks:
        return PathCheck(clear=False)
    visited.add(key)

    cell = pos.floored()
    if (cell.x, cell.y, cell.z) == (goal.x, goal.y, goal.z):
        return PathCheck(clear=True)

    current = sensor.block_at(cell)
    if not is_passable(current):
        return PathCheck(clear=False, blocking=[current] if current is not None else [])

    steps: list[Vec3] = []
    dx, dy, dz = goal.x - cell.x, goal.y - cell.y, goal.z - cell.z
    if dx:
        steps.append(Vec3(1 if dx > 0 else -1, 0, 0))
    if dy:
        steps.append(Vec3(0, 1 if dy > 0 else -1, 0))
    if dz:
        steps.append(Vec3(0, 0, 1 if dz > 0 else -1))

    blocking: list[Block] = []
    for step in steps:
        result = _search(sensor, pos.plus(step), goal, max_blocks, visited)
        if result.clear:
            return result
        blocking.extend(result.blocking)
    return PathCheck(clear=False, blocking=blocking)


def describe_surroundings(sensor: WorldSensor) -> str:
    """Text dump of the cells around the agent.

    Each horizontal neighbour is reported at four heights (above head, head,
    feet, below feet), followed by the column the agent stands in.
    """
    origin = sensor.position.floored()
    bx, by, bz = int(origin.x), int(origin.y), int(origin.z)

    def name_at(x: int, y: int, z: int) -> str:
        block = sensor.block_at(Vec3(x, y, z))
        return block.name if block is not None else "null"

    levels = (("above_head", 2), ("head_height", 1), ("feet_height", 0), ("below_feet", -1))
    sections: list[str] = []

    for label, x in (("higher x", bx + 1), ("lower x", bx - 1)):
        lines = [f"direction {label} (x={x}) :", ""]
        for level, dy in levels:
            row = ", ".join(name_at(x, by + dy, z) for z in (bz - 1, bz, bz + 1))
            lines.append(f"{level}: {row}")
        sections.append("\n".join(lines))

    for label, z in (("higher z", bz + 1), ("lower z", bz - 1)):
        lines = [f"direction {label} (z={z}) :", ""]
        for level, dy in levels:
            lines.append(f"{level}: {name_at(bx, by + dy, z)}")
        sections.append("\n".join(lines))

    sections.append(f"above head: {name_at(bx, by + 2, bz)}")
    sections.append(f"at head: {name_at(bx, by + 1, bz)}")
    sections.append(f"at feet: {name_at(bx, by, bz)} (x,y,z={bx},{by},{bz})")
    sections.append(f"below feet: {name_at(bx, by - 1, bz)}")
    return "\n\n".join(sections)
