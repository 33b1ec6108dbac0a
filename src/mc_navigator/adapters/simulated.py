"""In-memory voxel world with kinematic movement.

Used by the CLI demo and the test-suite where no game instance is running.
Movement is resolved when a control is released instead of by integrating
physics, so pulse durations do not change where the agent ends up.
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import Any, Callable, Iterable

from mc_navigator.adapters.world import ControlState, EquipDestination
from mc_navigator.models import Block, Item, Vec3

AIR_BLOCKS = frozenset({"air", "cave_air", "void_air"})
FLUID_BLOCKS = frozenset({"water", "lava"})
FLORA_BLOCKS = frozenset(
    {"short_grass", "grass", "tall_grass", "fern", "large_fern", "dandelion", "poppy", "dead_bush", "torch"}
)
UNBREAKABLE_BLOCKS = frozenset({"bedrock", "barrier"})

EYE_HEIGHT = 1.62
JUMP_APEX = 1.25


class DigAbortedError(RuntimeError):
    """Raised into a pending dig when it is cancelled."""


class SimulatedBot:
    """Bot adapter backed by a sparse block dictionary (missing cells are air)."""

    def __init__(
        self,
        *,
        position: Vec3 = Vec3(0.5, 64.0, 0.5),
        yaw: float = 0.0,
        inventory: Iterable[Item] = (),
        break_seconds: dict[str, float] | None = None,
        default_break_seconds: float = 0.01,
        reach: float = 4.5,
        walk_step: float = 1.0,
        strafe_step: float = 0.2,
        min_y: int = -64,
        logger: logging.Logger | None = None,
    ) -> None:
        self._blocks: dict[tuple[int, int, int], str] = {}
        self._position = position
        self._yaw = yaw
        self._pitch = 0.0
        self._inventory: list[Item] = list(inventory)
        self._held: Item | None = None
        self._break_seconds = dict(break_seconds or {})
        self._default_break_seconds = default_break_seconds
        self._reach = reach
        self._walk_step = walk_step
        self._strafe_step = strafe_step
        self._min_y = min_y
        self._logger = logger or logging.getLogger("mc_navigator.adapters.simulated")

        self._controls: dict[str, bool] = {}
        self._airborne = False
        self._breaking: Block | None = None
        self._dig_future: asyncio.Future[None] | None = None
        self._dig_handle: asyncio.TimerHandle | None = None
        self.entities: list[Any] = []
        self.dig_count = 0
        self.placed_count = 0

    # ------------------------------------------------------------------
    # World setup helpers
    # ------------------------------------------------------------------

    def set_block(self, x: int, y: int, z: int, name: str) -> None:
        if name in AIR_BLOCKS:
            self._blocks.pop((x, y, z), None)
        else:
            self._blocks[(x, y, z)] = name

    def fill(self, start: tuple[int, int, int], end: tuple[int, int, int], name: str) -> None:
        """Fill the inclusive box between two corners."""
        (x1, y1, z1), (x2, y2, z2) = start, end
        for x in range(min(x1, x2), max(x1, x2) + 1):
            for y in range(min(y1, y2), max(y1, y2) + 1):
                for z in range(min(z1, z2), max(z1, z2) + 1):
                    self.set_block(x, y, z, name)

    def give(self, name: str, count: int = 1) -> Item:
        for stack in self._inventory:
            if stack.name == name:
                stack.count += count
                return stack
        stack = Item(name=name, count=count)
        self._inventory.append(stack)
        return stack

    def count_of(self, name: str) -> int:
        return sum(stack.count for stack in self._inventory if stack.name == name)

    def block_name(self, x: int, y: int, z: int) -> str:
        return self._blocks.get((x, y, z), "air")

    def teleport(self, position: Vec3) -> None:
        self._position = position
        self._airborne = False

    # ------------------------------------------------------------------
    # WorldSensor
    # ------------------------------------------------------------------

    @property
    def position(self) -> Vec3:
        return self._position

    @property
    def yaw(self) -> float:
        return self._yaw

    @property
    def pitch(self) -> float:
        return self._pitch

    @property
    def held_item(self) -> Item | None:
        return self._held

    def block_at(self, pos: Vec3) -> Block | None:
        key = pos.block_key()
        name = self._blocks.get(key, "air")
        bounding_box = "empty" if _is_open(name) else "block"
        return Block(name=name, position=Vec3(*key), bounding_box=bounding_box)

    def nearest_entity(self, predicate: Callable[[Any], bool]) -> Any | None:
        matches = [entity for entity in self.entities if predicate(entity)]
        if not matches:
            return None
        return min(matches, key=lambda entity: entity.position.distance_to(self._position))

    def inventory_items(self) -> list[Item]:
        return [stack for stack in self._inventory if stack.count > 0]

    # ------------------------------------------------------------------
    # Actuator
    # ------------------------------------------------------------------

    def set_control_state(self, control: ControlState, state: bool) -> None:
        was_pressed = self._controls.get(control, False)
        self._controls[control] = state
        if state and not was_pressed:
            if control == "jump":
                self._start_jump()
        elif was_pressed and not state:
            if control == "forward":
                self._move_along_facing()
                self._land()
            elif control == "jump" and not self._controls.get("forward", False):
                self._land()
            elif control in ("left", "right"):
                self._strafe(control)

    async def look_at(self, point: Vec3, immediate: bool = False) -> None:
        dx = point.x - self._position.x
        dz = point.z - self._position.z
        dy = point.y - (self._position.y + EYE_HEIGHT)
        if dx != 0 or dz != 0:
            self._yaw = math.atan2(-dx, -dz)
        self._pitch = math.atan2(dy, math.hypot(dx, dz))

    async def look(self, yaw: float, pitch: float, immediate: bool = False) -> None:
        self._yaw = yaw
        self._pitch = pitch

    async def equip(self, item: Item, destination: EquipDestination = "hand") -> None:
        stack = next((s for s in self._inventory if s.name == item.name and s.count > 0), None)
        if stack is None:
            raise RuntimeError(f"Cannot equip {item.name}: not in inventory")
        self._held = stack

    async def unequip(self, destination: EquipDestination = "hand") -> None:
        self._held = None

    async def place_block(self, reference: Block, face: Vec3) -> None:
        held = self._held
        if held is None or held.count <= 0:
            raise RuntimeError("Must be holding an item to place a block")

        ref_key = reference.position.block_key()
        if _is_open(self._blocks.get(ref_key, "air")):
            raise RuntimeError(f"Cannot place against {reference.name}: reference is not solid")

        target = reference.position.plus(face).block_key()
        if not _is_open(self._blocks.get(target, "air")):
            raise RuntimeError(f"Cannot place at {target}: cell is occupied")

        feet = self._position.block_key()
        head = (feet[0], feet[1] + 1, feet[2])
        if target in (feet, head):
            raise RuntimeError(f"Cannot place at {target}: obstructed by the agent")

        self._blocks[target] = held.name
        self.placed_count += 1
        held.count -= 1
        if held.count <= 0:
            self._inventory.remove(held)
            self._held = None

    async def dig_start(self, block: Block) -> None:
        loop = asyncio.get_running_loop()
        future: asyncio.Future[None] = loop.create_future()
        self._dig_future = future

        name = self._blocks.get(block.position.block_key(), "air")
        if name not in UNBREAKABLE_BLOCKS:
            self._breaking = block
            delay = self._break_seconds.get(name, self._default_break_seconds)
            self._dig_handle = loop.call_later(delay, self._finish_dig, block, future)

        try:
            await future
        finally:
            if self._dig_future is future:
                self._clear_dig()

    def dig_cancel(self) -> None:
        future = self._dig_future
        self._clear_dig()
        if future is not None and not future.done():
            future.set_exception(DigAbortedError("Digging aborted"))

    def can_dig_block(self, block: Block) -> bool:
        name = self._blocks.get(block.position.block_key(), "air")
        if _is_open(name) or name in UNBREAKABLE_BLOCKS:
            return False
        eye = self._position.offset(0, EYE_HEIGHT, 0)
        return eye.distance_to(block.position.block_center()) <= self._reach

    def currently_breaking(self) -> Block | None:
        return self._breaking

    # ------------------------------------------------------------------
    # Kinematics
    # ------------------------------------------------------------------

    def _is_open_at(self, x: float, y: float, z: float) -> bool:
        return _is_open(self._blocks.get(Vec3(x, y, z).block_key(), "air"))

    def _facing_axis(self) -> tuple[int, int]:
        fx = -math.sin(self._yaw)
        fz = -math.cos(self._yaw)
        if abs(fx) >= abs(fz):
            return (1 if fx > 0 else -1), 0
        return 0, (1 if fz > 0 else -1)

    def _body_fits(self, pos: Vec3) -> bool:
        feet_y = math.floor(pos.y)
        return self._is_open_at(pos.x, feet_y, pos.z) and self._is_open_at(pos.x, feet_y + 1, pos.z)

    def _start_jump(self) -> None:
        if self._airborne:
            return
        pos = self._position
        if not self._is_open_at(pos.x, math.floor(pos.y) + 2, pos.z):
            return
        self._position = pos.offset(0, JUMP_APEX, 0)
        self._airborne = True

    def _move_along_facing(self) -> None:
        fx, fz = self._facing_axis()
        candidate = self._position.offset(fx * self._walk_step, 0, fz * self._walk_step)
        if self._body_fits(candidate):
            self._position = candidate

    def _strafe(self, control: str) -> None:
        fx, fz = self._facing_axis()
        # left of the facing vector (fx, fz) is (fz, -fx)
        lx, lz = fz, -fx
        if control == "right":
            lx, lz = -lx, -lz
        candidate = self._position.offset(lx * self._strafe_step, 0, lz * self._strafe_step)
        if self._body_fits(candidate):
            self._position = candidate

    def _land(self) -> None:
        self._airborne = False
        self._settle()

    def _settle(self) -> None:
        pos = self._position
        cell_y = math.floor(pos.y - 1)
        while cell_y >= self._min_y:
            if not self._is_open_at(pos.x, cell_y, pos.z):
                self._position = Vec3(pos.x, float(cell_y + 1), pos.z)
                return
            cell_y -= 1
        self._position = Vec3(pos.x, float(self._min_y), pos.z)

    def _finish_dig(self, block: Block, future: asyncio.Future[None]) -> None:
        key = block.position.block_key()
        self._blocks.pop(key, None)
        self.dig_count += 1
        self._clear_dig()
        if not self._airborne:
            self._settle()
        self._logger.debug("sim_block_broken", extra={"block": block.name, "position": key})
        if not future.done():
            future.set_result(None)

    def _clear_dig(self) -> None:
        if self._dig_handle is not None:
            self._dig_handle.cancel()
            self._dig_handle = None
        self._breaking = None
        self._dig_future = None


def _is_open(name: str) -> bool:
    return name in AIR_BLOCKS or name in FLUID_BLOCKS or name in FLORA_BLOCKS
