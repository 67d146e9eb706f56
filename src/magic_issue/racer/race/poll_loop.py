"""Fixed-interval poll loop driving the attempt evaluator.

The loop is a three-state machine: RUNNING until an attempt terminates, then
DONE_SUCCESS or DONE_FAILURE, both absorbing.

Ticks fire on a grid `start + k * interval`. When an attempt overruns, the late
tick fires once right away and the following ticks realign to the grid; missed
ticks are dropped, never replayed.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from magic_issue.racer.race.attempt import AttemptOutcome, Continue, Terminate

logger = logging.getLogger(__name__)


class LoopState(str, Enum):
    """Where a poll loop is: RUNNING, or one of the two absorbing end states."""

    RUNNING = "running"
    DONE_SUCCESS = "done_success"
    DONE_FAILURE = "done_failure"


ALLOWED_TRANSITIONS: dict[LoopState, set[LoopState]] = {
    LoopState.RUNNING: {LoopState.RUNNING, LoopState.DONE_SUCCESS, LoopState.DONE_FAILURE},
    LoopState.DONE_SUCCESS: set(),
    LoopState.DONE_FAILURE: set(),
}


class IllegalTransitionError(ValueError):
    """Raised when a loop state change is not in `ALLOWED_TRANSITIONS`."""


def transition(*, current: LoopState, to: LoopState) -> LoopState:
    if to not in ALLOWED_TRANSITIONS.get(current, set()):
        raise IllegalTransitionError(f"Illegal transition: {current.value} -> {to.value}")
    return to


def next_tick_deadline(deadline: float, fired_at: float, interval: float) -> float:
    """Return the first grid point after the tick scheduled at `deadline`.

    `fired_at` is when that tick actually started; whole intervals it ran late
    by are skipped.
    """

    late_by = max(fired_at - deadline, 0.0)
    skipped = int(late_by // interval)
    return deadline + interval * (skipped + 1)


@dataclass(frozen=True, slots=True)
class RaceResult:
    """How a finished race ended.

    `state` is DONE_SUCCESS or DONE_FAILURE; `outcome` is the `Terminate` that
    ended the loop (its `error` explains a loss); `ticks` counts attempts run.
    """

    state: LoopState
    outcome: Terminate
    ticks: int

    @property
    def succeeded(self) -> bool:
        return self.state == LoopState.DONE_SUCCESS


class PollLoop:
    """Run `attempt` once per tick until it returns a `Terminate` outcome."""

    def __init__(
        self,
        *,
        attempt: Callable[[], AttemptOutcome],
        interval_seconds: float = 1.0,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be > 0")
        self._attempt = attempt
        self._interval = interval_seconds
        self._state = LoopState.RUNNING

    @property
    def state(self) -> LoopState:
        return self._state

    def run(self) -> RaceResult:
        if self._state != LoopState.RUNNING:
            raise IllegalTransitionError(f"Poll loop already finished ({self._state.value})")

        ticks = 0
        deadline = time.monotonic()

        while True:
            delay = deadline - time.monotonic()
            if delay > 0:
                time.sleep(delay)

            fired_at = time.monotonic()
            ticks += 1
            outcome = self._attempt()

            terminal = self._handle(outcome, tick=ticks)
            if terminal is not None:
                return RaceResult(state=self._state, outcome=terminal, ticks=ticks)

            late_by = fired_at - deadline
            if late_by >= self._interval:
                logger.debug(
                    "Skipping missed ticks",
                    extra={"tick": ticks, "skipped": int(late_by // self._interval)},
                )
            deadline = next_tick_deadline(deadline, fired_at, self._interval)

    def _handle(self, outcome: AttemptOutcome, *, tick: int) -> Terminate | None:
        if isinstance(outcome, Continue):
            self._state = transition(current=self._state, to=LoopState.RUNNING)
            if outcome.error is None:
                logger.debug("Waiting for the magic number", extra={"tick": tick})
            else:
                logger.warning(
                    str(outcome.error),
                    extra={"tick": tick, "error_type": type(outcome.error).__name__},
                )
            return None

        if isinstance(outcome, Terminate):
            if outcome.succeeded:
                self._state = transition(current=self._state, to=LoopState.DONE_SUCCESS)
                logger.info(
                    "Claimed the magic number",
                    extra={
                        "tick": tick,
                        "issue_number": outcome.issue.number if outcome.issue else None,
                    },
                )
            else:
                self._state = transition(current=self._state, to=LoopState.DONE_FAILURE)
                logger.error(
                    str(outcome.error),
                    extra={"tick": tick, "error_type": type(outcome.error).__name__},
                )
            return outcome

        raise TypeError(f"Unknown attempt outcome: {outcome!r}")
