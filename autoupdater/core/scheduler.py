"""Foreground side of the update run, polled once per host tick."""

import logging
from typing import Callable

from autoupdater.core.gate import ConfirmationGate
from autoupdater.core.session import UpdateSession

logger = logging.getLogger(__name__)


class TransitionScheduler:
    """Waits for ready_to_advance, then hands control to the next stage once.

    tick() never blocks: while the session is not ready it returns right
    away so the host keeps running its own loop.
    """

    def __init__(self, session: UpdateSession, on_transition: Callable[[], None]):
        self._session = session
        self._on_transition = on_transition
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def tick(self) -> bool:
        """Returns True on the tick that fired the transition."""
        if self._finished or not self._session.ready_to_advance:
            return False
        self._finished = True
        logger.info("Update stage done, proceeding")
        self._on_transition()
        return True


class ConfirmLatch:
    """Remembers a confirm press until the next tick reads it."""

    def __init__(self):
        self._pressed = False

    def press(self):
        self._pressed = True

    def __call__(self) -> bool:
        pressed, self._pressed = self._pressed, False
        return pressed


class ForegroundTick:
    """One step of the foreground loop: confirmation input, then the scheduler."""

    def __init__(self, gate: ConfirmationGate, scheduler: TransitionScheduler,
                 confirm_pressed: Callable[[], bool]):
        self._gate = gate
        self._scheduler = scheduler
        self._confirm_pressed = confirm_pressed

    @property
    def finished(self) -> bool:
        return self._scheduler.finished

    def __call__(self) -> bool:
        if self._confirm_pressed():
            self._gate.confirm()
        return self._scheduler.tick()
