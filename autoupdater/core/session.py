"""Shared state for one update run.

Field ownership:
  current_message / sub_message: written only by the update worker,
      read by the screen. Plain attributes; a reader may see a value one
      tick old, which only affects what is displayed.
  restart/continue confirm flags: armed by the worker (through the gate),
      consumed once by the foreground tick.
  ready_to_advance: set once, never cleared.

The one-shot fields use lock/Event based primitives so a duplicate
confirmation in the same tick cannot fire an action twice.
"""

import threading
from dataclasses import dataclass


class OneShotFlag:
    """A flag that can be armed and then consumed exactly once."""

    def __init__(self):
        self._lock = threading.Lock()
        self._armed = False

    def arm(self):
        with self._lock:
            self._armed = True

    def consume(self) -> bool:
        """Clear the flag. Returns True only for the call that cleared it."""
        with self._lock:
            if not self._armed:
                return False
            self._armed = False
            return True

    @property
    def is_armed(self) -> bool:
        return self._armed


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view handed to the presentation layer."""

    current_message: str | None
    sub_message: str | None
    awaiting_restart_confirm: bool
    awaiting_continue_confirm: bool
    ready_to_advance: bool


class UpdateSession:
    """Progress and outcome of one update run."""

    def __init__(self):
        self.current_message: str | None = None
        self.sub_message: str | None = None
        self._restart_confirm = OneShotFlag()
        self._continue_confirm = OneShotFlag()
        self._ready = threading.Event()

    # ── Confirm flags ────────────────────────────────────────────────

    @property
    def awaiting_restart_confirm(self) -> bool:
        return self._restart_confirm.is_armed

    @property
    def awaiting_continue_confirm(self) -> bool:
        return self._continue_confirm.is_armed

    def await_restart_confirm(self):
        if self._continue_confirm.is_armed:
            raise RuntimeError("Already awaiting continue confirmation")
        self._restart_confirm.arm()

    def await_continue_confirm(self):
        if self._restart_confirm.is_armed:
            raise RuntimeError("Already awaiting restart confirmation")
        self._continue_confirm.arm()

    def consume_restart_confirm(self) -> bool:
        return self._restart_confirm.consume()

    def consume_continue_confirm(self) -> bool:
        return self._continue_confirm.consume()

    # ── Advance ──────────────────────────────────────────────────────

    @property
    def ready_to_advance(self) -> bool:
        return self._ready.is_set()

    def mark_ready_to_advance(self):
        self._ready.set()

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            current_message=self.current_message,
            sub_message=self.sub_message,
            awaiting_restart_confirm=self.awaiting_restart_confirm,
            awaiting_continue_confirm=self.awaiting_continue_confirm,
            ready_to_advance=self.ready_to_advance,
        )
