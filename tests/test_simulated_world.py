from __future__ import annotations

import asyncio

import pytest

from mc_navigator.adapters.simulated import DigAbortedError, SimulatedBot
from mc_navigator.models import Item, Vec3


def _standing_bot(**kwargs) -> SimulatedBot:
    bot = SimulatedBot(position=Vec3(0.5, 64, 0.5), **kwargs)
    bot.fill((-2, 63, -2), (2, 63, 2), "stone")
    return bot


def test_missing_cells_read_as_air() -> None:
    bot = _standing_bot()

    block = bot.block_at(Vec3(0.7, 64.2, 0.1))

    assert block.name == "air"
    assert block.bounding_box == "empty"
    assert block.position == Vec3(0, 64, 0)
    assert bot.block_at(Vec3(0, 63, 0)).bounding_box == "block"


def test_placing_into_the_body_is_refused() -> None:
    bot = _standing_bot(inventory=[Item("dirt", 2)])
    asyncio.run(bot.equip(Item("dirt")))

    with pytest.raises(RuntimeError, match="obstructed"):
        asyncio.run(bot.place_block(bot.block_at(Vec3(0, 63, 0)), Vec3(0, 1, 0)))

    assert bot.count_of("dirt") == 2


def test_placing_consumes_the_held_stack() -> None:
    bot = _standing_bot(inventory=[Item("dirt", 1)])
    asyncio.run(bot.equip(Item("dirt")))

    asyncio.run(bot.place_block(bot.block_at(Vec3(1, 63, 0)), Vec3(0, 1, 0)))

    assert bot.block_name(1, 64, 0) == "dirt"
    assert bot.count_of("dirt") == 0
    assert bot.held_item is None
    assert bot.inventory_items() == []


def test_unbreakable_block_never_starts_breaking() -> None:
    bot = _standing_bot()
    bot.set_block(1, 64, 0, "bedrock")
    block = bot.block_at(Vec3(1, 64, 0))

    async def _run() -> None:
        task = asyncio.create_task(bot.dig_start(block))
        await asyncio.sleep(0.02)
        assert bot.currently_breaking() is None
        bot.dig_cancel()
        with pytest.raises(DigAbortedError):
            await task

    asyncio.run(_run())
    assert not bot.can_dig_block(block)
    assert bot.block_name(1, 64, 0) == "bedrock"


def test_breaking_the_floor_drops_the_agent() -> None:
    bot = _standing_bot()
    bot.set_block(0, 61, 0, "stone")

    asyncio.run(bot.dig_start(bot.block_at(Vec3(0, 63, 0))))

    assert bot.dig_count == 1
    assert bot.position == Vec3(0.5, 62, 0.5)


def test_ceiling_prevents_jumping() -> None:
    bot = _standing_bot()
    bot.set_block(0, 66, 0, "stone")

    bot.set_control_state("jump", True)
    assert bot.position.y == 64
    bot.set_control_state("jump", False)

    assert bot.position.y == 64


def test_walking_into_a_wall_keeps_position() -> None:
    bot = _standing_bot(yaw=-1.5707963267948966)
    bot.set_block(1, 65, 0, "stone")

    bot.set_control_state("forward", True)
    bot.set_control_state("forward", False)

    assert bot.position == Vec3(0.5, 64, 0.5)


def test_reach_limits_digging() -> None:
    bot = _standing_bot()
    bot.set_block(0, 64, 6, "stone")
    bot.set_block(0, 64, 2, "stone")

    assert not bot.can_dig_block(bot.block_at(Vec3(0, 64, 6)))
    assert bot.can_dig_block(bot.block_at(Vec3(0, 64, 2)))
