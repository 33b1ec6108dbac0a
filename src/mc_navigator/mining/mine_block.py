"""Mine a single block with safety, tool and reachability checks."""

from __future__ import annotations

import logging
from typing import Any

from mc_navigator.adapters.world import Bot
from mc_navigator.config import MovementTuning
from mc_navigator.errors import ToolResolutionError
from mc_navigator.mining.tools import resolve_tool
from mc_navigator.mining.watchdog import ExcavationMonitor
from mc_navigator.models import (
    Block,
    DigTimeoutKind,
    FailureKind,
    MiningResult,
    ToolMapping,
    format_agent_position,
    format_block_position,
)
from mc_navigator.navigation.obstacles import is_path_clear

logger = logging.getLogger("mc_navigator.mining.mine_block")


async def mine_one_block(
    bot: Bot,
    block: Block,
    tool_mapping: ToolMapping | None = None,
    dig_timeout: float | None = None,
    *,
    allow_diagonal: bool = False,
    tuning: MovementTuning | None = None,
    monitor: ExcavationMonitor | None = None,
) -> MiningResult:
    """Break ``block`` and report the outcome as a value.

    Diagonal blocks in the horizontal plane are refused unless
    ``allow_diagonal`` is set. Failures carry the block name and position,
    the held item and the distance, both in the message and in ``details``.
    """
    tuning = tuning or MovementTuning()
    mapping = tool_mapping or {}
    agent_pos = bot.position
    block_label = f"{block.name} at {format_block_position(block.position)}"
    distance = agent_pos.distance_to(block.position)

    def failed(
        kind: FailureKind,
        reason: str,
        *,
        timeout_kind: DigTimeoutKind | None = None,
        extra: dict[str, Any] | None = None,
    ) -> MiningResult:
        held = bot.held_item
        held_label = held.name if held is not None else "nothing (empty hand)"
        details = {
            "block": block.name,
            "position": block.position.block_key(),
            "held_item": held.name if held is not None else None,
            "distance": round(distance, 2),
            **(extra or {}),
        }
        logger.info("mine_block_failed", extra={"kind": kind.value, **details})
        return MiningResult.failed(
            kind,
            f"{reason} Holding: {held_label}. Distance: {distance:.1f} blocks.",
            timeout_kind=timeout_kind,
            details=details,
        )

    bot.set_control_state("forward", False)

    if not allow_diagonal:
        block_x, _, block_z = block.position.block_key()
        agent_x, _, agent_z = agent_pos.block_key()
        if agent_x != block_x and agent_z != block_z:
            return failed(
                FailureKind.UNREACHABLE,
                f"Block {block_label} is diagonal in XZ plane from agent at {format_agent_position(agent_pos)}. "
                "Only blocks that are axis-aligned in XZ can be mined (up/down is OK).",
            )

    try:
        choice = resolve_tool(block.name, mapping, bot.inventory_items())
    except ToolResolutionError as exc:
        return failed(exc.kind, f"{exc} (block {block_label}).", extra=exc.details)

    if choice.item is not None:
        await bot.equip(choice.item, "hand")
    elif bot.held_item is not None:
        await bot.unequip("hand")

    target = block.position.block_center()
    await bot.look_at(target, immediate=True)

    path = is_path_clear(bot, agent_pos, target)
    if not path.clear:
        return failed(
            FailureKind.UNREACHABLE,
            f"No clear path to {block_label}. {path.describe_blocking()}",
            extra={"blocking": [(b.name, b.position.block_key()) for b in path.blocking]},
        )

    if not bot.can_dig_block(block):
        return failed(
            FailureKind.NOT_DIGGABLE,
            f"Cannot dig {block_label}. Block might be out of reach or require a different tool.",
        )

    monitor = monitor or ExcavationMonitor(bot, tuning=tuning)
    result = await monitor.excavate(block, dig_timeout)
    if result.success:
        logger.debug("mine_block_succeeded", extra={"block": block.name, "tool": choice.label, "source": choice.source})
        return result

    return failed(
        result.kind or FailureKind.DIG_FAILED,
        f"Failed to mine {block_label}. Error: {result.error}",
        timeout_kind=result.timeout_kind,
        extra=result.details,
    )
