"""Boundary between the movement engine and a running world connection.

Yaw follows the usual Minecraft bot convention: 0 looks toward -z and the
angle grows counterclockwise, so ``yaw = atan2(-dx, -dz)``.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Protocol

from mc_navigator.models import Block, Item, Vec3

ControlState = Literal["forward", "back", "left", "right", "jump", "sprint", "sneak"]
EquipDestination = Literal["hand", "off-hand", "head", "torso", "legs", "feet"]


class WorldSensor(Protocol):
    """Read-only view of the world and the agent's pose."""

    @property
    def position(self) -> Vec3:
        """Agent feet position with sub-block precision."""

    @property
    def yaw(self) -> float:
        """Agent yaw in radians."""

    @property
    def held_item(self) -> Item | None:
        """Item currently in the main hand."""

    def block_at(self, pos: Vec3) -> Block | None:
        """Return the block containing ``pos`` or None when it is not loaded."""

    def nearest_entity(self, predicate: Callable[[Any], bool]) -> Any | None:
        """Return the closest entity accepted by ``predicate``."""

    def inventory_items(self) -> list[Item]:
        """Return the non-empty inventory stacks."""


class Actuator(Protocol):
    """Input and action surface of the agent."""

    def set_control_state(self, control: ControlState, state: bool) -> None:
        """Press or release a movement control."""

    async def look_at(self, point: Vec3, immediate: bool = False) -> None:
        """Turn the head toward ``point``."""

    async def look(self, yaw: float, pitch: float, immediate: bool = False) -> None:
        """Turn the head to an absolute yaw and pitch."""

    async def equip(self, item: Item, destination: EquipDestination = "hand") -> None:
        """Move ``item`` into the given slot."""

    async def unequip(self, destination: EquipDestination = "hand") -> None:
        """Empty the given slot."""

    async def place_block(self, reference: Block, face: Vec3) -> None:
        """Place the held block against ``reference`` on ``face``."""

    async def dig_start(self, block: Block) -> None:
        """Start breaking ``block``; resolves once the block is broken."""

    def dig_cancel(self) -> None:
        """Abort the break action in progress."""

    def can_dig_block(self, block: Block) -> bool:
        """Whether ``block`` is breakable and within reach."""

    def currently_breaking(self) -> Block | None:
        """Block the agent is actively breaking, if any."""


class Bot(WorldSensor, Actuator, Protocol):
    """A world sensor and actuator bound to the same agent."""
