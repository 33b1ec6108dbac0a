from __future__ import annotations

import asyncio
from typing import Any

import pytest

from mc_navigator.adapters.simulated import SimulatedBot
from mc_navigator.config import MovementTuning
from mc_navigator.errors import StepInProgressError
from mc_navigator.models import FailureKind, Item, Strategy, Vec3
from mc_navigator.movement.controller import StepController
from mc_navigator.movement.driver import drive_to_target
from mc_navigator.scenarios import tunnel, wall
from mc_navigator.telemetry.logging import NullTelemetry


class RecordingTelemetry:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self.events.append((event_name, payload))


def _controller(bot: SimulatedBot, tuning: MovementTuning, telemetry=None) -> StepController:
    return StepController(bot, tuning=tuning, telemetry=telemetry or NullTelemetry())


def _flat_bot(**kwargs) -> SimulatedBot:
    bot = SimulatedBot(position=Vec3(0.5, 64, 0.5), **kwargs)
    bot.fill((-3, 60, -3), (6, 63, 3), "stone")
    return bot


def test_tunnel_is_walked_step_by_step(fast_tuning: MovementTuning) -> None:
    world = tunnel()
    controller = _controller(world.bot, fast_tuning)

    async def _run() -> list:
        outcomes = []
        while world.bot.position.distance_to(world.target) > 1.5:
            outcomes.append(await controller.step(world.target))
        return outcomes

    outcomes = asyncio.run(_run())

    assert len(outcomes) == 4
    assert all(outcome.strategy is Strategy.WALK for outcome in outcomes)
    assert all(outcome.error is None for outcome in outcomes)
    assert world.bot.position.x == pytest.approx(4.0)
    assert world.bot.position.block_key()[2] == 0


def test_drive_reports_arrival_through_tunnel(fast_tuning: MovementTuning) -> None:
    world = tunnel()

    report = asyncio.run(drive_to_target(_controller(world.bot, fast_tuning), world.target))

    assert report.arrived
    assert report.error is None
    assert report.iterations == 4
    assert report.summary(world.target).startswith("Reached target (5, 64, 0)")


def test_drive_mines_through_wall_and_jumps_onto_step(fast_tuning: MovementTuning) -> None:
    world = wall()

    report = asyncio.run(drive_to_target(_controller(world.bot, fast_tuning), world.target))

    assert report.arrived
    assert report.blocks_mined == 2
    assert [step.strategy for step in report.steps] == [
        Strategy.WALK,
        Strategy.WALK,
        Strategy.MINE_FORWARD,
        Strategy.WALK,
        Strategy.WALK,
        Strategy.JUMP,
    ]
    assert world.bot.position == Vec3(5.5, 65, 0.5)


def test_pillars_straight_up_to_target(fast_tuning: MovementTuning) -> None:
    bot = _flat_bot(inventory=[Item("dirt", 5)])
    controller = _controller(bot, fast_tuning)
    target = Vec3(0.5, 67, 0.5)

    async def _run() -> list[float]:
        heights = []
        for _ in range(3):
            outcome = await controller.step(target, pillar_materials=["dirt"])
            assert outcome.strategy is Strategy.PILLAR_UP
            assert outcome.blocks_pillared == 1
            heights.append(bot.position.y)
        return heights

    assert asyncio.run(_run()) == [65, 66, 67]
    assert bot.count_of("dirt") == 2


def test_pillar_runs_out_of_material(fast_tuning: MovementTuning) -> None:
    bot = _flat_bot(inventory=[Item("dirt", 3)])
    controller = _controller(bot, fast_tuning)
    target = Vec3(0.5, 68, 0.5)

    async def _run():
        for _ in range(3):
            await controller.step(target, pillar_materials=["dirt"])
        return await controller.step(target, pillar_materials=["dirt"])

    outcome = asyncio.run(_run())

    assert bot.position.y == 67
    assert outcome.strategy is None
    assert outcome.failure_kinds == [FailureKind.PILLAR_OUT_OF_MATERIAL]
    assert outcome.error.startswith("Close horizontally (0.00b), tried pillar:")


def _boxed_in_bot() -> SimulatedBot:
    bot = SimulatedBot(position=Vec3(0.5, 64, 0.5))
    bot.fill((-1, 60, -1), (1, 66, 1), "bedrock")
    bot.fill((0, 64, 0), (0, 65, 0), "air")
    return bot


def test_every_strategy_failure_is_reported_in_order(fast_tuning: MovementTuning) -> None:
    bot = _boxed_in_bot()

    outcome = asyncio.run(_controller(bot, fast_tuning).step(Vec3(5.5, 64, 0.5)))

    assert outcome.strategy is None
    assert outcome.failure_kinds == [FailureKind.NOT_DIGGABLE, FailureKind.NOT_APPLICABLE, FailureKind.NOT_DIGGABLE]
    error = outcome.error
    assert error.index("Mine error: ") < error.index("; Pillar: ") < error.index("; Dig down: ")
    assert bot.position == Vec3(0.5, 64, 0.5)


def test_dig_down_can_be_disallowed(fast_tuning: MovementTuning) -> None:
    bot = _boxed_in_bot()

    outcome = asyncio.run(_controller(bot, fast_tuning).step(Vec3(5.5, 64, 0.5), allow_dig_down=False))

    assert [failure.strategy for failure in outcome.failures] == [Strategy.MINE_FORWARD, Strategy.PILLAR_UP]
    assert "Dig down" not in outcome.error


def test_slightly_raised_close_target_runs_the_cascade(fast_tuning: MovementTuning) -> None:
    bot = _flat_bot(inventory=[Item("dirt", 4)])

    outcome = asyncio.run(_controller(bot, fast_tuning).step(Vec3(1.2, 64.4, 0.5), pillar_materials=["dirt"]))

    assert outcome.strategy is Strategy.WALK
    assert outcome.error is None
    assert bot.position == Vec3(1.5, 64, 0.5)
    assert bot.count_of("dirt") == 4


def test_target_straight_below_digs_down(fast_tuning: MovementTuning) -> None:
    bot = _flat_bot()

    outcome = asyncio.run(_controller(bot, fast_tuning).step(Vec3(0.5, 60, 0.5)))

    assert outcome.strategy is Strategy.DIG_DOWN
    assert outcome.blocks_mined == 1
    assert bot.position.y == 63


def test_concurrent_step_is_rejected(fast_tuning: MovementTuning) -> None:
    bot = _flat_bot()
    controller = _controller(bot, fast_tuning)
    target = Vec3(5.5, 64, 0.5)

    async def _run():
        first = asyncio.create_task(controller.step(target))
        await asyncio.sleep(0)
        with pytest.raises(StepInProgressError):
            await controller.step(target)
        return await first

    outcome = asyncio.run(_run())

    assert outcome.strategy is Strategy.WALK


def test_each_step_emits_one_telemetry_event(fast_tuning: MovementTuning) -> None:
    world = tunnel()
    telemetry = RecordingTelemetry()

    report = asyncio.run(drive_to_target(_controller(world.bot, fast_tuning, telemetry), world.target))

    assert [name for name, _ in telemetry.events] == ["step_completed"] * report.iterations
    payload = telemetry.events[0][1]
    assert payload["strategy"] == "walk"
    assert payload["target"] == (5.0, 64.0, 0.0)
    assert payload["failure_kinds"] == []


def test_drive_stops_when_a_step_makes_no_progress(fast_tuning: MovementTuning) -> None:
    bot = _boxed_in_bot()

    report = asyncio.run(drive_to_target(_controller(bot, fast_tuning), Vec3(5.5, 64, 0.5), max_iterations=5))

    assert not report.arrived
    assert report.iterations == 1
    assert not report.hit_iteration_limit
    assert report.error.startswith("Mine error: ")
    assert report.summary(Vec3(5.5, 64, 0.5)) == report.error
