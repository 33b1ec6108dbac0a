"""Watchdog that bounds a single block-break action."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable

from mc_navigator.adapters.world import Bot
from mc_navigator.config import MovementTuning
from mc_navigator.models import Block, DigTimeoutKind, FailureKind, MiningResult


@dataclass(slots=True)
class MiningSession:
    """Watchdog bookkeeping for one excavation."""

    block: Block
    started_at: float
    last_active_at: float
    observed_block: Block | None = None
    was_breaking: bool = False
    polls: int = 0


class ExcavationMonitor:
    """Race the break action against a polling watchdog.

    The break action has no timeout of its own. The watchdog polls the
    agent's breaking state at a fixed interval. It trips when digging never
    starts and when digging outlives the timeout. Both tasks are torn down
    on every exit path.
    """

    def __init__(
        self,
        bot: Bot,
        *,
        tuning: MovementTuning | None = None,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self._bot = bot
        self._tuning = tuning or MovementTuning()
        self._clock = clock
        self._logger = logger or logging.getLogger("mc_navigator.mining.watchdog")
        self.last_session: MiningSession | None = None

    async def excavate(self, block: Block, dig_timeout: float | None = None) -> MiningResult:
        timeout = dig_timeout if dig_timeout is not None else self._tuning.default_dig_timeout
        now = self._clock()
        session = MiningSession(block=block, started_at=now, last_active_at=now)
        self.last_session = session

        dig_task = asyncio.create_task(self._bot.dig_start(block), name="excavation-dig")
        watchdog = asyncio.create_task(self._watch(session, timeout), name="excavation-watchdog")
        try:
            done, _ = await asyncio.wait({dig_task, watchdog}, return_when=asyncio.FIRST_COMPLETED)
            if watchdog in done and dig_task not in done:
                failure = watchdog.result()
                if failure is not None:
                    self._logger.warning(
                        "dig_watchdog_failed",
                        extra={
                            "block": block.name,
                            "timeout_kind": failure.timeout_kind.value if failure.timeout_kind else None,
                            "polls": session.polls,
                        },
                    )
                    return failure

            try:
                await dig_task
            except Exception as exc:  # noqa: BLE001 - break action failures become a result value.
                self._logger.warning("dig_failed", extra={"block": block.name, "error": str(exc)})
                return MiningResult.failed(
                    FailureKind.DIG_FAILED,
                    f"{type(exc).__name__}: {exc}",
                    details={"block": block.name, "polls": session.polls},
                )

            self._logger.debug("dig_completed", extra={"block": block.name, "polls": session.polls})
            return MiningResult.mined(1)
        finally:
            if not dig_task.done():
                self._bot.dig_cancel()
                dig_task.cancel()
            if not watchdog.done():
                watchdog.cancel()
            await asyncio.gather(dig_task, watchdog, return_exceptions=True)

    async def _watch(self, session: MiningSession, timeout: float) -> MiningResult | None:
        """Poll until a check trips (returns the failure) or digging idles out (returns None)."""
        tuning = self._tuning
        while True:
            await asyncio.sleep(tuning.dig_poll_interval)
            now = self._clock()
            session.polls += 1
            elapsed = now - session.started_at

            breaking = self._bot.currently_breaking()
            if breaking is not None:
                session.was_breaking = True
                session.last_active_at = now
                session.observed_block = breaking

            if not session.was_breaking and elapsed > tuning.dig_start_grace:
                return self._timeout(
                    session,
                    DigTimeoutKind.NEVER_STARTED,
                    f"Dig failed to start after {tuning.dig_start_grace:g}s. "
                    "Agent may be stuck or block unreachable.",
                    elapsed,
                )

            if session.was_breaking and breaking is not None and elapsed > timeout:
                return self._timeout(
                    session,
                    DigTimeoutKind.TOO_SLOW,
                    f"Digging is very slow ({elapsed:.1f}s). Block: {session.block.name}. "
                    f"Using: {self._held_label()}. Wrong tool? Or the block may be out of reach.",
                    elapsed,
                )

            if session.was_breaking and breaking is None and now - session.last_active_at > tuning.dig_idle_completion:
                return None

            if elapsed > timeout:
                return self._timeout(
                    session,
                    DigTimeoutKind.HARD_TIMEOUT,
                    f"Dig timeout after {timeout:g}s. Block: {session.block.name}. "
                    f"Using: {self._held_label()}. May need better tools or block is too hard.",
                    elapsed,
                )

    def _timeout(self, session: MiningSession, kind: DigTimeoutKind, message: str, elapsed: float) -> MiningResult:
        return MiningResult.failed(
            FailureKind.DIG_TIMEOUT,
            message,
            timeout_kind=kind,
            details={"block": session.block.name, "elapsed": round(elapsed, 3), "polls": session.polls},
        )

    def _held_label(self) -> str:
        held = self._bot.held_item
        return held.name if held is not None else "no tool"
