"""One-step movement decision: orient, center, then run the strategy cascade."""

from __future__ import annotations

import logging
from typing import Sequence

from mc_navigator.adapters.world import Bot
from mc_navigator.config import MovementTuning
from mc_navigator.errors import NavigationError, StepInProgressError
from mc_navigator.mining.watchdog import ExcavationMonitor
from mc_navigator.models import (
    AxisDirection,
    FailureKind,
    StepOutcome,
    Strategy,
    StrategyFailure,
    StrategyResult,
    ToolMapping,
    Vec3,
    format_agent_position,
)
from mc_navigator.movement.strategies import MovementContext, dig_down, jump_over_obstacle, mine_forward, pillar_up, walk
from mc_navigator.navigation.centering import center_both_axes, strafe_to_middle
from mc_navigator.navigation.direction import horizontal_distance, next_direction
from mc_navigator.navigation.obstacles import BlocksAhead, blocks_ahead
from mc_navigator.telemetry.logging import LoggingTelemetry, Telemetry

LOOK_AHEAD_BLOCKS = 5


class StepController:
    """Moves the agent one discrete step toward a target.

    Calls must be serialized; a second ``step`` while one is running raises
    ``StepInProgressError``.
    """

    def __init__(
        self,
        bot: Bot,
        *,
        tuning: MovementTuning | None = None,
        telemetry: Telemetry | None = None,
        monitor: ExcavationMonitor | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._bot = bot
        self._tuning = tuning or MovementTuning()
        self._monitor = monitor
        self._logger = logger or logging.getLogger("mc_navigator.movement.controller")
        self._telemetry = telemetry or LoggingTelemetry(self._logger)
        self._running = False

    @property
    def bot(self) -> Bot:
        return self._bot

    @property
    def tuning(self) -> MovementTuning:
        return self._tuning

    async def step(
        self,
        target: Vec3,
        *,
        pillar_materials: Sequence[str] = (),
        tool_mapping: ToolMapping | None = None,
        dig_timeout: float | None = None,
        allow_dig_down: bool = True,
    ) -> StepOutcome:
        if self._running:
            raise StepInProgressError("A step is already in progress for this agent")
        self._running = True
        try:
            ctx = MovementContext(
                bot=self._bot,
                target=target,
                tool_mapping=tool_mapping or {},
                pillar_materials=tuple(pillar_materials),
                dig_timeout=dig_timeout,
                tuning=self._tuning,
                monitor=self._monitor,
            )
            outcome = await self._run(ctx, allow_dig_down)
        finally:
            self._running = False

        self._telemetry.emit(
            "step_completed",
            {
                "target": target.as_tuple(),
                "position": self._bot.position.as_tuple(),
                "strategy": outcome.strategy.value if outcome.strategy else None,
                "blocks_mined": outcome.blocks_mined,
                "blocks_pillared": outcome.blocks_pillared,
                "progress_delta": round(outcome.progress_delta, 3),
                "failure_kinds": [kind.value for kind in outcome.failure_kinds],
                "error": outcome.error,
            },
        )
        return outcome

    async def _run(self, ctx: MovementContext, allow_dig_down: bool) -> StepOutcome:
        bot = self._bot
        target = ctx.target
        start = bot.position
        initial_distance = start.distance_to(target)
        horizontal = horizontal_distance(start, target)
        outcome = StepOutcome()

        if (
            horizontal <= self._tuning.close_horizontal_distance
            and target.y - start.y > self._tuning.pillar_trigger_rise
        ):
            try:
                await center_both_axes(bot, self._tuning)
            except NavigationError as exc:
                outcome.narrative.append(f"Centering: {exc}")
            result = await pillar_up(ctx)
            return self._finish_shortcut(
                outcome, result, target, initial_distance, f"Close horizontally ({horizontal:.2f}b), tried pillar"
            )

        if horizontal <= self._tuning.close_horizontal_distance and target.y < start.y and allow_dig_down:
            result = await dig_down(ctx, guarded=True)
            return self._finish_shortcut(
                outcome, result, target, initial_distance, f"Close horizontally ({horizontal:.2f}b), tried dig down"
            )

        direction = next_direction(start, target)
        await bot.look_at(start.plus(direction.as_vec().scaled(LOOK_AHEAD_BLOCKS)))
        try:
            await strafe_to_middle(bot, self._tuning)
        except NavigationError as exc:
            outcome.narrative.append(f"Centering: {exc}")

        ahead = blocks_ahead(bot, bot.position, direction)
        for strategy in self._plan(ahead, allow_dig_down):
            result = await self._attempt(strategy, ctx, direction, ahead)
            outcome.blocks_mined += result.blocks_mined
            if result.narrative:
                outcome.narrative.append(result.narrative)
            if result.success:
                outcome.blocks_pillared += result.blocks_pillared
                outcome.strategy = strategy
                break
            self._record_failure(outcome, result)
        else:
            outcome.error = "; ".join(f"{failure.strategy.label}: {failure.reason}" for failure in outcome.failures)

        outcome.progress_delta = initial_distance - bot.position.distance_to(target)
        self._logger.debug(
            "step_cascade_finished",
            extra={
                "position": format_agent_position(bot.position),
                "direction": str(direction),
                "strategy": outcome.strategy.value if outcome.strategy else None,
            },
        )
        return outcome

    @staticmethod
    def _plan(ahead: BlocksAhead, allow_dig_down: bool) -> list[Strategy]:
        plan: list[Strategy] = []
        if ahead.both_clear:
            plan.append(Strategy.WALK)
        elif ahead.head_clear:
            plan.append(Strategy.JUMP)
        elif ahead.both_blocked:
            plan.append(Strategy.MINE_FORWARD)
        plan.append(Strategy.PILLAR_UP)
        if allow_dig_down:
            plan.append(Strategy.DIG_DOWN)
        return plan

    @staticmethod
    async def _attempt(
        strategy: Strategy, ctx: MovementContext, direction: AxisDirection, ahead: BlocksAhead
    ) -> StrategyResult:
        if strategy is Strategy.WALK:
            return await walk(ctx, direction, ahead)
        if strategy is Strategy.JUMP:
            return await jump_over_obstacle(ctx, direction, ahead)
        if strategy is Strategy.MINE_FORWARD:
            return await mine_forward(ctx, direction, ahead)
        if strategy is Strategy.PILLAR_UP:
            return await pillar_up(ctx)
        return await dig_down(ctx, guarded=True)

    @staticmethod
    def _record_failure(outcome: StepOutcome, result: StrategyResult) -> None:
        outcome.failures.append(
            StrategyFailure(
                strategy=result.strategy,
                kind=result.kind or FailureKind.NO_PROGRESS,
                reason=result.error or "no reason given",
            )
        )

    def _finish_shortcut(
        self,
        outcome: StepOutcome,
        result: StrategyResult,
        target: Vec3,
        initial_distance: float,
        prefix: str,
    ) -> StepOutcome:
        outcome.blocks_mined += result.blocks_mined
        if result.narrative:
            outcome.narrative.append(result.narrative)
        if result.success:
            outcome.blocks_pillared += result.blocks_pillared
            outcome.strategy = result.strategy
        else:
            self._record_failure(outcome, result)
            outcome.error = f"{prefix}: {result.error}"
        outcome.progress_delta = initial_distance - self._bot.position.distance_to(target)
        return outcome
