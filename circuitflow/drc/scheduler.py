"""Debounced DRC scheduling on an asyncio event loop.

State machine: IDLE → SCHEDULED → RUNNING → IDLE.

  - ``notify_change`` while IDLE or SCHEDULED cancels the pending run and
    schedules a fresh one ``settle_s`` seconds out.
  - ``notify_change`` while RUNNING does not interrupt the run; it raises a
    single follow-up flag, and exactly one new run is scheduled once the
    current one completes, however many changes arrived meanwhile.
  - A run, once started, always completes.  Cancellation only ever
    replaces the pending ``ScheduledRun``.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable

from circuitflow.board.models import Board
from circuitflow.board.store import BoardStore
from circuitflow.config import BOARD_RULES, BoardRules

from .checker import run_drc
from .models import DrcResult

log = logging.getLogger("circuitflow.drc.scheduler")

ResultListener = Callable[[DrcResult], None]


class SchedulerState(str, Enum):
    IDLE = "idle"
    SCHEDULED = "scheduled"
    RUNNING = "running"


class ScheduledRun:
    """A single pending DRC run.  Once cancelled it can never fire."""

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop,
        delay: float,
        callback: Callable[[ScheduledRun], None],
    ) -> None:
        self.cancelled = False
        self.fired = False
        self._callback = callback
        self._handle = loop.call_later(delay, self._fire)

    def cancel(self) -> None:
        if self.fired or self.cancelled:
            return
        self.cancelled = True
        self._handle.cancel()

    def _fire(self) -> None:
        if self.cancelled:
            return
        self.fired = True
        self._callback(self)


class DrcScheduler:
    """Runs the clearance check after edits settle, one run at a time."""

    def __init__(
        self,
        get_board: Callable[[], Board],
        *,
        rules: BoardRules = BOARD_RULES,
        settle_s: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        check: Callable[[Board, BoardRules], DrcResult] = run_drc,
    ) -> None:
        self._get_board = get_board
        self._rules = rules
        self.settle_s = rules.drc_settle_s if settle_s is None else settle_s
        self._loop = loop
        self._check = check

        self._state = SchedulerState.IDLE
        self._pending: ScheduledRun | None = None
        self._follow_up = False
        self._listeners: list[ResultListener] = []
        self.last_result: DrcResult | None = None
        self.run_count = 0
        self._detach: Callable[[], None] | None = None

    @classmethod
    def for_store(cls, store: BoardStore, **kwargs) -> DrcScheduler:
        """Scheduler that checks ``store.current`` and reschedules on every publish."""
        scheduler = cls(lambda: store.current, **kwargs)
        scheduler._detach = store.subscribe(lambda _board: scheduler.notify_change())
        return scheduler

    @property
    def state(self) -> SchedulerState:
        return self._state

    def on_result(self, listener: ResultListener) -> None:
        self._listeners.append(listener)

    # ── Triggers ───────────────────────────────────────────────────

    def notify_change(self) -> None:
        """The component or trace collection changed."""
        if self._state == SchedulerState.RUNNING:
            self._follow_up = True
            return
        self._schedule()

    def run_now(self) -> DrcResult | None:
        """Run immediately, dropping any pending run.

        Returns None if a run is already in progress (a follow-up is
        queued instead).
        """
        if self._state == SchedulerState.RUNNING:
            self._follow_up = True
            return None
        self._cancel_pending()
        return self._execute()

    def cancel(self) -> None:
        """Drop the pending run and any queued follow-up."""
        self._follow_up = False
        self._cancel_pending()
        if self._state == SchedulerState.SCHEDULED:
            self._state = SchedulerState.IDLE

    def close(self) -> None:
        """Cancel pending work and stop listening to the store, if attached."""
        self.cancel()
        if self._detach is not None:
            self._detach()
            self._detach = None

    # ── Internals ──────────────────────────────────────────────────

    def _event_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _schedule(self) -> None:
        self._cancel_pending()
        self._pending = ScheduledRun(self._event_loop(), self.settle_s, self._on_fire)
        self._state = SchedulerState.SCHEDULED
        log.debug("DRC scheduled in %.3fs", self.settle_s)

    def _on_fire(self, run: ScheduledRun) -> None:
        if run is not self._pending:
            return
        self._pending = None
        self._execute()

    def _execute(self) -> DrcResult:
        self._state = SchedulerState.RUNNING
        try:
            board = self._get_board()
            result = self._check(board, self._rules)
            self.run_count += 1
            self.last_result = result
            for listener in list(self._listeners):
                listener(result)
        finally:
            self._state = SchedulerState.IDLE
            if self._follow_up:
                self._follow_up = False
                self._schedule()
        return result
