"""Tool choice for a block: caller allow-list first, tier-ranked auto pick otherwise."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from mc_navigator.errors import ToolResolutionError
from mc_navigator.models import FailureKind, Item, ToolMapping

HAND = "hand"

SHOVEL_BLOCKS = frozenset({
    'dirt', 'grass_block', 'sand', 'gravel', 'clay', 'soul_sand', 'soul_soil',
    'snow', 'snow_block', 'podzol', 'mycelium', 'coarse_dirt', 'rooted_dirt',
    'farmland', 'grass_path', 'mud', 'muddy_mangrove_roots',
})

PICKAXE_BLOCKS = frozenset({
    'stone', 'cobblestone', 'andesite', 'diorite', 'granite', 'deepslate', 'cobbled_deepslate',
    'netherrack', 'end_stone', 'sandstone', 'red_sandstone', 'basalt', 'blackstone',
    'obsidian', 'crying_obsidian', 'ancient_debris', 'nether_bricks', 'red_nether_bricks',
    'prismarine', 'prismarine_bricks', 'dark_prismarine', 'terracotta', 'coal_ore',
    'iron_ore', 'gold_ore', 'diamond_ore', 'emerald_ore', 'lapis_ore', 'redstone_ore',
    'nether_gold_ore', 'nether_quartz_ore', 'copper_ore', 'deepslate_coal_ore',
    'deepslate_iron_ore', 'deepslate_gold_ore', 'deepslate_diamond_ore', 'deepslate_emerald_ore',
    'deepslate_lapis_ore', 'deepslate_redstone_ore', 'deepslate_copper_ore',
    'bricks', 'stone_bricks', 'mossy_stone_bricks', 'cracked_stone_bricks',
    'ice', 'packed_ice', 'blue_ice', 'frosted_ice',
})

AXE_BLOCKS = frozenset({
    'oak_log', 'spruce_log', 'birch_log', 'jungle_log', 'acacia_log', 'dark_oak_log',
    'mangrove_log', 'cherry_log', 'oak_wood', 'spruce_wood', 'birch_wood', 'jungle_wood',
    'acacia_wood', 'dark_oak_wood', 'mangrove_wood', 'cherry_wood',
    'oak_planks', 'spruce_planks', 'birch_planks', 'jungle_planks', 'acacia_planks',
    'dark_oak_planks', 'mangrove_planks', 'cherry_planks', 'crafting_table', 'bookshelf',
    'chest', 'barrel', 'fence', 'fence_gate', 'ladder', 'sign', 'door',
})

# Worst first.
TOOL_TIERS = ("wooden", "stone", "iron", "golden", "diamond", "netherite")

ToolType = Literal["shovel", "pickaxe", "axe"]
ToolSource = Literal["explicit", "auto"]


@dataclass(frozen=True, slots=True)
class ToolChoice:
    """Resolved tool; ``item`` is None when the block is mined bare-handed."""

    item: Item | None
    source: ToolSource

    @property
    def bare_hand(self) -> bool:
        return self.item is None

    @property
    def label(self) -> str:
        return self.item.name if self.item is not None else "nothing (empty hand)"


def tool_type_for(block_name: str) -> ToolType | None:
    if block_name in SHOVEL_BLOCKS:
        return "shovel"
    if block_name in PICKAXE_BLOCKS:
        return "pickaxe"
    if block_name in AXE_BLOCKS:
        return "axe"
    return None


def tool_tier(item_name: str) -> int:
    """Rank of the tool's material, -1 when it has no known tier prefix."""
    for rank, tier in enumerate(TOOL_TIERS):
        if item_name.startswith(f"{tier}_"):
            return rank
    return -1


def best_tool_for(block_name: str, inventory: Iterable[Item]) -> Item | None:
    tool_type = tool_type_for(block_name)
    if tool_type is None:
        return None
    # Suffix match so an "axe" lookup does not pick up pickaxes.
    candidates = [item for item in inventory if item.name.endswith(f"_{tool_type}") or item.name == tool_type]
    if not candidates:
        return None
    return max(candidates, key=lambda item: tool_tier(item.name))


def resolve_tool(block_name: str, mapping: ToolMapping, inventory: Iterable[Item]) -> ToolChoice:
    """Pick the tool used to mine ``block_name``.

    A non-empty ``mapping`` is an exhaustive allow-list: the first entry
    listing the block wins, and a block no entry lists is refused. The
    ``"hand"`` key means bare hands. With an empty mapping the best-tier tool
    of the block's category is picked from ``inventory``, falling back to
    bare hands.
    """
    items = list(inventory)

    for tool_name, block_names in mapping.items():
        if block_name not in block_names:
            continue
        if tool_name == HAND:
            return ToolChoice(item=None, source="explicit")
        found = next((item for item in items if item.name == tool_name), None)
        if found is None:
            raise ToolResolutionError(
                f"Tool {tool_name} needed to mine {block_name} but not found in inventory",
                kind=FailureKind.MISSING_TOOL,
                details={"tool": tool_name, "block": block_name},
            )
        return ToolChoice(item=found, source="explicit")

    if mapping:
        raise ToolResolutionError(
            f"Block {block_name} missing from the allowed mining tools mapping, add it if you want to mine it",
            kind=FailureKind.UNREACHABLE,
            details={"block": block_name, "allowed_tools": list(mapping)},
        )

    return ToolChoice(item=best_tool_for(block_name, items), source="auto")
