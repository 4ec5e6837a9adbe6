"""Board store — the single published snapshot and its change listeners.

Writers build a complete new ``Board`` and hand it to ``publish``; readers
call ``current`` and get a snapshot that can never change under them.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .models import Board

log = logging.getLogger("circuitflow.board.store")

Listener = Callable[[Board], None]


class BoardStore:
    """Holds the current board snapshot and notifies subscribers on change."""

    def __init__(self, board: Board | None = None) -> None:
        self._board = board or Board()
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._revision = 0

    @property
    def current(self) -> Board:
        return self._board

    @property
    def revision(self) -> int:
        return self._revision

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener.  Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def publish(self, board: Board) -> Board:
        """Swap in a new snapshot.  No-op if it equals the current one."""
        with self._lock:
            if board == self._board:
                return self._board
            self._board = board
            self._revision += 1
        log.debug(
            "Published board rev %d: %d components, %d traces",
            self._revision, len(board.components), len(board.traces),
        )
        for listener in list(self._listeners):
            listener(board)
        return board

    def update(self, edit: Callable[[Board], Board]) -> Board:
        """Apply an edit function to the current snapshot and publish the result."""
        return self.publish(edit(self._board))
