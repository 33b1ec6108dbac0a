"""Movement strategies, the step controller and the reference driver."""

from .controller import StepController
from .driver import DriveReport, drive_to_target, has_arrived
from .strategies import MovementContext, dig_down, jump_over_obstacle, mine_forward, pillar_up, pillar_up_one_block, walk

__all__ = [
    "DriveReport",
    "MovementContext",
    "StepController",
    "dig_down",
    "drive_to_target",
    "has_arrived",
    "jump_over_obstacle",
    "mine_forward",
    "pillar_up",
    "pillar_up_one_block",
    "walk",
]
