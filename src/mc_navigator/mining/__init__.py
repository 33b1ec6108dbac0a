"""Tool choice, the excavation watchdog and single-block mining."""

from .mine_block import mine_one_block
from .tools import HAND, ToolChoice, best_tool_for, resolve_tool, tool_type_for
from .watchdog import ExcavationMonitor, MiningSession

__all__ = [
    "HAND",
    "ExcavationMonitor",
    "MiningSession",
    "ToolChoice",
    "best_tool_for",
    "mine_one_block",
    "resolve_tool",
    "tool_type_for",
]
