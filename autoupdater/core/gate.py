"""Decides what happens after all packages were processed.

  IDLE -> PROCESSING -> AUTO_RESTARTING            (no failures)
                     -> AWAITING_RESTART_CONFIRM   (failures, an install was attempted)
                     -> AWAITING_CONTINUE_CONFIRM  (failures, nothing was installed)
  AWAITING_* -> TERMINAL on the first confirmation; later ones are ignored.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable

from autoupdater.core.messages import MessageKey
from autoupdater.core.session import UpdateSession

logger = logging.getLogger(__name__)


class GateState(Enum):
    IDLE = "idle"
    PROCESSING = "processing"
    AUTO_RESTARTING = "auto_restarting"
    AWAITING_RESTART_CONFIRM = "awaiting_restart_confirm"
    AWAITING_CONTINUE_CONFIRM = "awaiting_continue_confirm"
    TERMINAL = "terminal"


class ConfirmationGate:
    """Turns the aggregate update outcome into the action the user must take."""

    def __init__(self, session: UpdateSession,
                 localize: Callable[[MessageKey], str],
                 restart: Callable[[], None],
                 restart_delay: float = 1.0,
                 sleep: Callable[[float], None] = time.sleep):
        self._session = session
        self._localize = localize
        self._restart = restart
        self._restart_delay = restart_delay
        self._sleep = sleep
        self._lock = threading.Lock()
        self._state = GateState.IDLE

    @property
    def state(self) -> GateState:
        return self._state

    def begin(self):
        """Packages are about to be processed."""
        self._transition(GateState.IDLE, GateState.PROCESSING)

    def resolve(self, failures_occurred: bool, restart_required: bool):
        """Called by the worker once every package was attempted."""
        if not failures_occurred:
            self._transition(GateState.PROCESSING, GateState.AUTO_RESTARTING)
            self._session.current_message = self._localize(MessageKey.RESTARTING)
            # Let the message render before the process is replaced
            self._sleep(self._restart_delay)
            logger.info("All updates installed, restarting")
            self._restart()
            return

        self._session.current_message = self._localize(MessageKey.FAILED)
        if restart_required:
            self._transition(GateState.PROCESSING, GateState.AWAITING_RESTART_CONFIRM)
            self._session.sub_message = self._localize(MessageKey.REBOOT)
            self._session.await_restart_confirm()
            logger.info("Updates failed after an install attempt, waiting for restart confirmation")
        else:
            self._transition(GateState.PROCESSING, GateState.AWAITING_CONTINUE_CONFIRM)
            self._session.sub_message = self._localize(MessageKey.CONTINUE)
            self._session.await_continue_confirm()
            logger.info("Updates failed before any install, waiting for continue confirmation")

    def confirm(self) -> bool:
        """Handle a confirmation input. Returns True if it triggered an action."""
        if self._session.consume_restart_confirm():
            self._set_state(GateState.TERMINAL)
            logger.info("Restart confirmed")
            self._restart()
            return True

        if self._session.consume_continue_confirm():
            self._set_state(GateState.TERMINAL)
            logger.info("Continue confirmed")
            self._session.mark_ready_to_advance()
            return True

        return False

    def _transition(self, expected: GateState, new: GateState):
        with self._lock:
            if self._state is not expected:
                raise RuntimeError(
                    f"Invalid gate transition {self._state.value} -> {new.value}"
                )
            self._state = new

    def _set_state(self, new: GateState):
        with self._lock:
            self._state = new
