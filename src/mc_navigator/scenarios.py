"""Small simulated worlds used by the CLI demo."""

from __future__ import annotations

from dataclasses import dataclass, field

from mc_navigator.adapters.simulated import SimulatedBot
from mc_navigator.models import Vec3


@dataclass(slots=True)
class Scenario:
    name: str
    bot: SimulatedBot
    target: Vec3
    pillar_materials: list[str] = field(default_factory=list)
    description: str = ""


def _flat_floor(bot: SimulatedBot, radius: int = 8, floor_y: int = 63) -> None:
    bot.fill((-radius, floor_y - 3, -radius), (radius, floor_y, radius), "stone")


def tunnel() -> Scenario:
    bot = SimulatedBot(position=Vec3(0.0, 64.0, 0.0))
    bot.fill((-1, 63, -1), (7, 63, 1), "stone")
    bot.fill((-1, 60, -1), (7, 62, 1), "stone")
    bot.fill((-1, 64, -1), (7, 65, -1), "stone")
    bot.fill((-1, 64, 1), (7, 65, 1), "stone")
    bot.fill((-1, 66, -1), (7, 66, 1), "stone")
    return Scenario(
        name="tunnel",
        bot=bot,
        target=Vec3(5.0, 64.0, 0.0),
        description="Walk east through a one-wide tunnel.",
    )


def wall() -> Scenario:
    bot = SimulatedBot(position=Vec3(0.5, 64.0, 0.5), default_break_seconds=0.05)
    _flat_floor(bot)
    bot.fill((3, 64, -2), (3, 65, 2), "stone")
    bot.set_block(5, 64, 0, "dirt")
    bot.give("wooden_pickaxe")
    bot.give("stone_pickaxe")
    return Scenario(
        name="wall",
        bot=bot,
        target=Vec3(6.5, 65.0, 0.5),
        description="Mine through a stone wall, then hop onto a dirt step.",
    )


def tower() -> Scenario:
    bot = SimulatedBot(position=Vec3(0.5, 64.0, 0.5))
    _flat_floor(bot)
    bot.give("dirt", 5)
    return Scenario(
        name="tower",
        bot=bot,
        target=Vec3(0.5, 67.0, 0.5),
        pillar_materials=["cobblestone", "dirt"],
        description="Pillar three blocks straight up using dirt.",
    )


SCENARIOS = {"tunnel": tunnel, "wall": wall, "tower": tower}


def build_scenario(name: str) -> Scenario:
    try:
        factory = SCENARIOS[name]
    except KeyError:
        raise ValueError(f"Unknown scenario {name!r}; choose from {', '.join(SCENARIOS)}") from None
    return factory()
