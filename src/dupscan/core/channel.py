"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/channel.py
Thread-safe shared state between the scan thread (single producer) and its caller.

SignalChannel
-------------
  • control   : CancellationToken, checked by the engine at every suspension point
  • scanned   : append-only log of accepted paths
  • errors    : append-only log of per-entry error messages
  • duplicates: confirmed DuplicateRecord entries
  • selected  : bool per duplicate, aligned index-for-index with `duplicates`
  • status    : one line of human-readable status text
  • progress  : float in [0, 1]

Every buffer has its own lock and every read returns a snapshot copy.
`duplicates` and `selected` share ONE lock so that len(selected) == len(duplicates)
holds for every observer at every moment.
"""

import threading
import logging
from enum import Enum
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class ControlState(Enum):
    RUNNING = "running"
    STOP_REQUESTED = "stop"
    INTERRUPT_REQUESTED = "interrupt"


class CancellationToken:
    """
    Single cancellation signal for the engine.
    STOP and INTERRUPT behave identically in the engine; the state is kept only
    so callers can tell the user which one happened.
    """

    def __init__(self):
        self._event = threading.Event()
        self._state = ControlState.RUNNING
        self._lock = threading.Lock()

    def cancel(self, state: ControlState = ControlState.STOP_REQUESTED) -> None:
        if state is ControlState.RUNNING:
            raise ValueError("cancel() needs STOP_REQUESTED or INTERRUPT_REQUESTED")
        with self._lock:
            self._state = state
            self._event.set()

    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def state(self) -> ControlState:
        with self._lock:
            return self._state

    def reset(self) -> None:
        """Back to RUNNING. Only a fresh scan invocation calls this."""
        with self._lock:
            self._state = ControlState.RUNNING
            self._event.clear()


class SignalChannel:
    """Logs, progress and cancellation shared between scan and caller."""

    def __init__(self):
        self.token = CancellationToken()

        self._scanned: List[str] = []
        self._scanned_lock = threading.Lock()

        self._errors: List[str] = []
        self._errors_lock = threading.Lock()

        self._duplicates: list = []  # List[DuplicateRecord]
        self._selected: List[bool] = []
        self._duplicates_lock = threading.Lock()

        self._status = ""
        self._status_lock = threading.Lock()

        self._progress = 0.0
        self._progress_lock = threading.Lock()

    # ---- control ----------------------------------------------------------

    def stop(self) -> None:
        self.token.cancel(ControlState.STOP_REQUESTED)
        self.reset_progress()

    def interrupt(self) -> None:
        self.token.cancel(ControlState.INTERRUPT_REQUESTED)
        self.reset_progress()

    def is_cancelled(self) -> bool:
        return self.token.is_cancelled()

    def is_stopped(self) -> bool:
        return self.token.state is ControlState.STOP_REQUESTED

    def is_interrupted(self) -> bool:
        return self.token.state is ControlState.INTERRUPT_REQUESTED

    def control_state(self) -> ControlState:
        return self.token.state

    def clear(self) -> None:
        """Reset control state, all logs, status and progress."""
        self.token.reset()
        with self._scanned_lock:
            self._scanned.clear()
        with self._errors_lock:
            self._errors.clear()
        with self._duplicates_lock:
            self._duplicates.clear()
            self._selected.clear()
        self.set_status("")
        self.reset_progress()

    # ---- scanned / errors ---------------------------------------------------

    def push_scanned(self, path: str) -> None:
        with self._scanned_lock:
            self._scanned.append(path)

    def scanned(self) -> List[str]:
        with self._scanned_lock:
            return list(self._scanned)

    def count_scanned(self) -> int:
        with self._scanned_lock:
            return len(self._scanned)

    def push_error(self, message: str) -> None:
        logger.debug(f"Scan error: {message}")
        with self._errors_lock:
            self._errors.append(message)

    def errors(self) -> List[str]:
        with self._errors_lock:
            return list(self._errors)

    def count_errors(self) -> int:
        with self._errors_lock:
            return len(self._errors)

    # ---- duplicates / selected ---------------------------------------------

    def push_duplicate(self, record) -> None:
        """Appends the record and an unselected flag in one critical section."""
        with self._duplicates_lock:
            self._duplicates.append(record)
            self._selected.append(False)

    def duplicates(self) -> list:
        with self._duplicates_lock:
            return list(self._duplicates)

    def count_duplicates(self) -> int:
        with self._duplicates_lock:
            return len(self._duplicates)

    def selected(self) -> List[bool]:
        with self._duplicates_lock:
            return list(self._selected)

    def set_selected(self, index: int, value: bool) -> None:
        with self._duplicates_lock:
            self._selected[index] = value

    def toggle_selected(self, index: int) -> bool:
        with self._duplicates_lock:
            self._selected[index] = not self._selected[index]
            return self._selected[index]

    def selected_records(self) -> list:
        with self._duplicates_lock:
            return [r for r, s in zip(self._duplicates, self._selected) if s]

    def remove_duplicates(self, paths: Iterable[str]) -> int:
        """Drops records (and their flags) whose path is in `paths`."""
        doomed = set(paths)
        with self._duplicates_lock:
            kept = [(r, s) for r, s in zip(self._duplicates, self._selected)
                    if r.path not in doomed]
            removed = len(self._duplicates) - len(kept)
            self._duplicates = [r for r, _ in kept]
            self._selected = [s for _, s in kept]
        return removed

    # ---- status / progress --------------------------------------------------

    def set_status(self, text: str) -> None:
        with self._status_lock:
            self._status = text

    def status(self) -> str:
        with self._status_lock:
            return self._status

    def set_progress(self, current: int, total: int, status: Optional[str] = "") -> None:
        """
        Progress as current / total. Zero total work counts as done (1.0).
        A non-empty `status` also replaces the status line.
        """
        fraction = 1.0 if total <= 0 else min(max(current / total, 0.0), 1.0)
        with self._progress_lock:
            self._progress = fraction
        if status:
            self.set_status(status)

    def reset_progress(self) -> None:
        with self._progress_lock:
            self._progress = 0.0

    def progress(self) -> float:
        with self._progress_lock:
            return self._progress
