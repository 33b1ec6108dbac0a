"""Direction choice, obstacle classification and centering."""

from .centering import center_both_axes, perpendicular_offset, strafe_direction, strafe_to_middle
from .direction import facing_direction, horizontal_distance, next_direction
from .obstacles import BlocksAhead, PathCheck, blocks_ahead, describe_surroundings, is_passable, is_path_clear

__all__ = [
    "BlocksAhead",
    "PathCheck",
    "blocks_ahead",
    "center_both_axes",
    "describe_surroundings",
    "facing_direction",
    "horizontal_distance",
    "is_passable",
    "is_path_clear",
    "next_direction",
    "perpendicular_offset",
    "strafe_direction",
    "strafe_to_middle",
]
