"""Movement strategies tried by the step controller.

Each strategy returns a ``StrategyResult`` value. Refusals and failures are
reported through ``kind`` and ``error``; only inventory desync escapes as an
exception.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Sequence

from mc_navigator.adapters.world import Bot
from mc_navigator.config import MovementTuning
from mc_navigator.errors import InventoryDesyncError, NavigationError
from mc_navigator.mining.mine_block import mine_one_block
from mc_navigator.mining.watchdog import ExcavationMonitor
from mc_navigator.models import (
    AxisDirection,
    Block,
    FailureKind,
    Item,
    MiningResult,
    Strategy,
    StrategyResult,
    ToolMapping,
    Vec3,
    format_agent_position,
    format_block_position,
)
from mc_navigator.navigation.centering import center_both_axes
from mc_navigator.navigation.obstacles import BlocksAhead, is_passable

logger = logging.getLogger("mc_navigator.movement.strategies")

PILLAR_CLEARANCE_OFFSETS = (2, 3, 4)
PLACE_ON_TOP = Vec3(0, 1, 0)


@dataclass(slots=True)
class MovementContext:
    """Per-step inputs shared by the strategies."""

    bot: Bot
    target: Vec3
    tool_mapping: ToolMapping = field(default_factory=dict)
    pillar_materials: Sequence[str] = ()
    dig_timeout: float | None = None
    tuning: MovementTuning = field(default_factory=MovementTuning)
    monitor: ExcavationMonitor | None = None

    async def mine(self, block: Block, *, allow_diagonal: bool = False) -> MiningResult:
        return await mine_one_block(
            self.bot,
            block,
            self.tool_mapping,
            self.dig_timeout,
            allow_diagonal=allow_diagonal,
            tuning=self.tuning,
            monitor=self.monitor,
        )


def _name(block: Block | None) -> str:
    return block.name if block is not None else "null"


async def walk(ctx: MovementContext, direction: AxisDirection, ahead: BlocksAhead) -> StrategyResult:
    """Pulse forward one block when both cells ahead are open."""
    if not ahead.both_clear:
        return StrategyResult.failed(
            Strategy.WALK,
            FailureKind.NOT_APPLICABLE,
            f"Path ahead is not clear. Feet: {_name(ahead.feet)}, head: {_name(ahead.head)}",
        )

    bot = ctx.bot
    bot.set_control_state("forward", True)
    try:
        await asyncio.sleep(ctx.tuning.walk_pulse)
    finally:
        bot.set_control_state("forward", False)
    return StrategyResult(strategy=Strategy.WALK, success=True, narrative=f"Walked {direction}")


async def jump_over_obstacle(ctx: MovementContext, direction: AxisDirection, ahead: BlocksAhead) -> StrategyResult:
    """Hop onto a one-block step ahead."""
    bot = ctx.bot
    tuning = ctx.tuning
    start = bot.position
    above_head = bot.block_at(start.offset(0, 2, 0).floored())
    landing = bot.block_at(start.offset(direction.x, 2, direction.z).floored())

    situation = (
        f"Block ahead of feet: {_name(ahead.feet)}, ahead of head: {_name(ahead.head)}, "
        f"above head: {_name(above_head)}, planned head dest (ahead+up): {_name(landing)}"
    )

    refusal = None
    if ahead.feet_clear:
        refusal = "feet ahead are clear (no obstacle to jump over)"
    elif not ahead.head_clear:
        refusal = "block ahead of head is not clear"
    elif not is_passable(above_head):
        refusal = "block above head is not clear (no room to jump)"
    elif not is_passable(landing):
        refusal = "planned head destination (ahead+up) is not clear"
    if refusal is not None:
        return StrategyResult.failed(
            Strategy.JUMP, FailureKind.NOT_APPLICABLE, f"Jump not attempted: {refusal}. {situation}"
        )

    start_distance = start.distance_to(ctx.target)
    bot.set_control_state("forward", True)
    try:
        await asyncio.sleep(tuning.jump_forward_lead)
        bot.set_control_state("jump", True)
        await asyncio.sleep(tuning.jump_hold)
        bot.set_control_state("jump", False)
        await asyncio.sleep(tuning.jump_carry)
    finally:
        bot.set_control_state("jump", False)
        bot.set_control_state("forward", False)
    await asyncio.sleep(tuning.jump_settle)

    end = bot.position
    progress = start_distance - end.distance_to(ctx.target)
    if progress < tuning.min_jump_progress:
        head_now = bot.block_at(end.offset(0, 1, 0).floored())
        return StrategyResult.failed(
            Strategy.JUMP,
            FailureKind.NO_PROGRESS,
            f"Jump failed - made only {progress:.2f} blocks progress. "
            f"Before: {format_agent_position(start)}, After: {format_agent_position(end)}. "
            f"Block above agent head now: {_name(head_now)}. {situation}",
            details={"progress": progress},
        )
    return StrategyResult(strategy=Strategy.JUMP, success=True, narrative="Jumped over object")


async def mine_forward(ctx: MovementContext, direction: AxisDirection, ahead: BlocksAhead) -> StrategyResult:
    """Clear the head-ahead then the feet-ahead cell."""
    mined = 0
    for block, clear in ((ahead.head, ahead.head_clear), (ahead.feet, ahead.feet_clear)):
        if clear or block is None:
            continue
        result = await ctx.mine(block)
        mined += result.blocks_mined
        if not result.success:
            return StrategyResult.failed(
                Strategy.MINE_FORWARD,
                result.kind or FailureKind.DIG_FAILED,
                result.error or "Mining failed",
                blocks_mined=mined,
                details=result.details,
            )

    if mined == 0:
        return StrategyResult.failed(
            Strategy.MINE_FORWARD,
            FailureKind.NOT_APPLICABLE,
            f"No blocks mined. Agent bottom-half at {format_agent_position(ctx.bot.position)}. "
            f"Block ahead of head: {_name(ahead.head)}. Block ahead of feet: {_name(ahead.feet)}.",
        )
    return StrategyResult(strategy=Strategy.MINE_FORWARD, success=True, blocks_mined=mined, narrative="Mined.")


async def pillar_up_one_block(bot: Bot, tuning: MovementTuning) -> bool:
    """Jump and place the held block into the cell just vacated.

    Returns False when there is nothing to place against or placement fails.
    """
    reference = bot.block_at(bot.position.offset(0, -1, 0).floored())

    bot.set_control_state("jump", True)
    try:
        await asyncio.sleep(tuning.pillar_jump_delay)
        await asyncio.sleep(tuning.pillar_airborne_wait)
        if reference is None or is_passable(reference):
            return False
        try:
            await bot.place_block(reference, PLACE_ON_TOP)
        except Exception as exc:  # noqa: BLE001 - a refused placement is a pillar failure, not a fault.
            logger.warning("pillar_place_failed", extra={"reference": reference.name, "error": str(exc)})
            return False
        return True
    finally:
        bot.set_control_state("jump", False)
        await asyncio.sleep(tuning.pillar_landing_wait)


def _find_material(items: Sequence[Item], materials: Sequence[str]) -> Item | None:
    for item in items:
        if item.name in materials and item.count > 0:
            return item
    return None


async def pillar_up(ctx: MovementContext) -> StrategyResult:
    """Raise the agent one block by placing a building block beneath it."""
    bot = ctx.bot
    start = bot.position
    rise = ctx.target.y - start.y

    if rise <= ctx.tuning.pillar_trigger_rise:
        return StrategyResult.failed(
            Strategy.PILLAR_UP,
            FailureKind.NOT_APPLICABLE,
            f"Target not above us (target.y={ctx.target.y:g}, current.y={start.y:g})",
        )

    if not ctx.pillar_materials:
        return StrategyResult.failed(
            Strategy.PILLAR_UP,
            FailureKind.PILLAR_OUT_OF_MATERIAL,
            f"Target is {rise:.1f} blocks above but no building blocks were provided",
        )

    material = _find_material(bot.inventory_items(), ctx.pillar_materials)
    if material is None:
        return StrategyResult.failed(
            Strategy.PILLAR_UP,
            FailureKind.PILLAR_OUT_OF_MATERIAL,
            f"Need blocks {', '.join(ctx.pillar_materials)} but none found in inventory",
        )
    material_name = material.name

    mined = 0
    for offset in PILLAR_CLEARANCE_OFFSETS:
        above = bot.block_at(start.offset(0, offset, 0).floored())
        if is_passable(above):
            continue
        result = await ctx.mine(above, allow_diagonal=True)
        mined += result.blocks_mined
        if not result.success:
            return StrategyResult.failed(
                Strategy.PILLAR_UP,
                FailureKind.PILLAR_BLOCKED,
                f"Blocked at Y+{offset} by {above.name}, failed to clear: {result.error}",
                blocks_mined=mined,
                details=result.details,
            )

    stack = next((item for item in bot.inventory_items() if item.name == material_name), None)
    if stack is None:
        raise InventoryDesyncError(f"Lost {material_name} from inventory while clearing blocks above")
    await bot.equip(stack, "hand")

    before_y = bot.position.y
    placed = await pillar_up_one_block(bot, ctx.tuning)
    after_y = bot.position.y

    if placed and after_y > before_y:
        return StrategyResult(
            strategy=Strategy.PILLAR_UP,
            success=True,
            blocks_mined=mined,
            blocks_pillared=1,
            narrative=f"Did pillar-up with {material_name}",
        )

    held = bot.held_item
    still_holding = held is not None and held.name == material_name
    return StrategyResult.failed(
        Strategy.PILLAR_UP,
        FailureKind.PILLAR_BLOCKED,
        f"Failed to pillar up (Y {before_y:.1f}->{after_y:.1f}). Still have {material_name}: {str(still_holding).lower()}",
        blocks_mined=mined,
    )


async def dig_down(ctx: MovementContext, *, guarded: bool = True) -> StrategyResult:
    """Mine the cell beneath the agent when the cells below it can hold the fall."""
    bot = ctx.bot
    try:
        await center_both_axes(bot, ctx.tuning)
    except NavigationError as exc:
        return StrategyResult.failed(Strategy.DIG_DOWN, exc.kind, str(exc), details=exc.details)

    pos = bot.position
    checks = [2, 3] if guarded else [2]
    for depth in checks:
        cell = pos.offset(0, -depth, 0).floored()
        block = bot.block_at(cell)
        if is_passable(block):
            return StrategyResult.failed(
                Strategy.DIG_DOWN,
                FailureKind.UNSAFE_DIG_DOWN,
                f"Not digging for caution: block at {format_block_position(cell)} (below what we are digging) "
                f"is {_name(block)}, would fall into hole if we dug one down.",
                details={"depth": depth, "block": _name(block)},
            )

    beneath = bot.block_at(pos.offset(0, -1, 0).floored())
    if beneath is None or is_passable(beneath):
        return StrategyResult.failed(
            Strategy.DIG_DOWN,
            FailureKind.NOT_APPLICABLE,
            f"Nothing to dig under agent at {format_agent_position(pos)} ({_name(beneath)})",
        )

    result = await ctx.mine(beneath)
    if not result.success:
        return StrategyResult.failed(
            Strategy.DIG_DOWN,
            result.kind or FailureKind.DIG_FAILED,
            f"Failed to dig block under agent: {result.error}",
            blocks_mined=result.blocks_mined,
            details=result.details,
        )

    await asyncio.sleep(ctx.tuning.dig_down_fall_wait)
    return StrategyResult(
        strategy=Strategy.DIG_DOWN,
        success=True,
        blocks_mined=result.blocks_mined,
        narrative="Dug down",
    )
