from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

ToolMapping = Mapping[str, Sequence[str]]


@dataclass(frozen=True, slots=True)
class Vec3:
    """Continuous world position; floored values double as block coordinates."""

    x: float
    y: float
    z: float

    def offset(self, dx: float, dy: float, dz: float) -> Vec3:
        return Vec3(self.x + dx, self.y + dy, self.z + dz)

    def plus(self, other: Vec3) -> Vec3:
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def scaled(self, factor: float) -> Vec3:
        return Vec3(self.x * factor, self.y * factor, self.z * factor)

    def floored(self) -> Vec3:
        return Vec3(math.floor(self.x), math.floor(self.y), math.floor(self.z))

    def block_center(self) -> Vec3:
        return self.floored().offset(0.5, 0.5, 0.5)

    def distance_to(self, other: Vec3) -> float:
        return math.dist(self.as_tuple(), other.as_tuple())

    def horizontal_distance_to(self, other: Vec3) -> float:
        return math.hypot(self.x - other.x, self.z - other.z)

    def as_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def block_key(self) -> tuple[int, int, int]:
        return (math.floor(self.x), math.floor(self.y), math.floor(self.z))


@dataclass(frozen=True, slots=True)
class AxisDirection:
    """Horizontal unit vector with exactly one nonzero component."""

    x: int
    z: int

    def __post_init__(self) -> None:
        if (abs(self.x), abs(self.z)) not in ((1, 0), (0, 1)):
            raise ValueError(f"Direction must be axis-aligned, got ({self.x}, 0, {self.z})")

    @property
    def y(self) -> int:
        return 0

    def as_vec(self) -> Vec3:
        return Vec3(self.x, 0, self.z)

    def __str__(self) -> str:
        return f"({self.x}, 0, {self.z})"


EAST = AxisDirection(1, 0)
WEST = AxisDirection(-1, 0)
SOUTH = AxisDirection(0, 1)
NORTH = AxisDirection(0, -1)


@dataclass(frozen=True, slots=True)
class Block:
    """Read-only block snapshot returned by the world sensor."""

    name: str
    position: Vec3
    bounding_box: str = "block"


@dataclass(slots=True)
class Item:
    name: str
    count: int = 1


class FailureKind(str, Enum):
    """Domain failure taxonomy returned as values by strategies."""

    UNREACHABLE = "unreachable"
    MISSING_TOOL = "missing_tool"
    NOT_DIGGABLE = "not_diggable"
    DIG_TIMEOUT = "dig_timeout"
    DIG_FAILED = "dig_failed"
    PILLAR_BLOCKED = "pillar_blocked"
    PILLAR_OUT_OF_MATERIAL = "pillar_out_of_material"
    UNSAFE_DIG_DOWN = "unsafe_dig_down"
    CENTERING_FAILED = "centering_failed"
    NOT_AXIS_ALIGNED = "not_axis_aligned"
    NO_PROGRESS = "no_progress"
    NOT_APPLICABLE = "not_applicable"


class DigTimeoutKind(str, Enum):
    NEVER_STARTED = "never_started"
    TOO_SLOW = "too_slow"
    HARD_TIMEOUT = "hard_timeout"


class Strategy(str, Enum):
    """Movement strategies in cascade order."""

    WALK = "walk"
    JUMP = "jump"
    MINE_FORWARD = "mine_forward"
    PILLAR_UP = "pillar_up"
    DIG_DOWN = "dig_down"

    @property
    def label(self) -> str:
        return _STRATEGY_LABELS[self]


_STRATEGY_LABELS = {
    Strategy.WALK: "Walk",
    Strategy.JUMP: "Jump",
    Strategy.MINE_FORWARD: "Mine error",
    Strategy.PILLAR_UP: "Pillar",
    Strategy.DIG_DOWN: "Dig down",
}


@dataclass(slots=True)
class MiningResult:
    """Outcome of mining one or more blocks.

    ``error`` carries the failure reason and is only set when ``success`` is
    false. ``narrative`` is a human-readable log that may be present either way.
    """

    success: bool
    blocks_mined: int = 0
    error: str | None = None
    kind: FailureKind | None = None
    timeout_kind: DigTimeoutKind | None = None
    details: dict[str, Any] = field(default_factory=dict)
    narrative: str | None = None

    @classmethod
    def mined(cls, blocks_mined: int = 1, narrative: str | None = None) -> MiningResult:
        return cls(success=True, blocks_mined=blocks_mined, narrative=narrative)

    @classmethod
    def failed(
        cls,
        kind: FailureKind,
        error: str,
        *,
        blocks_mined: int = 0,
        timeout_kind: DigTimeoutKind | None = None,
        details: dict[str, Any] | None = None,
    ) -> MiningResult:
        return cls(
            success=False,
            blocks_mined=blocks_mined,
            error=error,
            kind=kind,
            timeout_kind=timeout_kind,
            details=details or {},
        )


@dataclass(slots=True)
class StrategyResult:
    strategy: Strategy
    success: bool
    blocks_mined: int = 0
    blocks_pillared: int = 0
    error: str | None = None
    kind: FailureKind | None = None
    narrative: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def failed(
        cls,
        strategy: Strategy,
        kind: FailureKind,
        error: str,
        *,
        blocks_mined: int = 0,
        details: dict[str, Any] | None = None,
    ) -> StrategyResult:
        return cls(
            strategy=strategy,
            success=False,
            blocks_mined=blocks_mined,
            error=error,
            kind=kind,
            details=details or {},
        )


@dataclass(slots=True)
class StrategyFailure:
    strategy: Strategy
    kind: FailureKind
    reason: str


@dataclass(slots=True)
class StepOutcome:
    """Structured result of one StepController call."""

    blocks_mined: int = 0
    blocks_pillared: int = 0
    progress_delta: float = 0.0
    error: str | None = None
    strategy: Strategy | None = None
    failures: list[StrategyFailure] = field(default_factory=list)
    narrative: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def failure_kinds(self) -> list[FailureKind]:
        return [failure.kind for failure in self.failures]


def format_agent_position(pos: Vec3) -> str:
    return f"({pos.x:.1f}, {pos.y:.1f}, {pos.z:.1f})"


def format_block_position(pos: Vec3) -> str:
    bx, by, bz = pos.block_key()
    return f"({bx}, {by}, {bz})"
