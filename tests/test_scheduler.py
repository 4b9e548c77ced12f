"""Tests for the foreground tick: TransitionScheduler and ForegroundTick."""

from autoupdater.core.scheduler import ConfirmLatch, ForegroundTick, TransitionScheduler


class Presses:
    """confirm_pressed() replaying a fixed sequence, then False forever."""

    def __init__(self, *values: bool):
        self._values = list(values)

    def __call__(self) -> bool:
        return self._values.pop(0) if self._values else False


def test_tick_waits_until_ready(session, restart):
    scheduler = TransitionScheduler(session, restart)

    for _ in range(5):
        assert scheduler.tick() is False

    assert restart.calls == 0
    assert scheduler.finished is False


def test_transition_fires_exactly_once(session, restart):
    scheduler = TransitionScheduler(session, restart)
    session.mark_ready_to_advance()

    assert scheduler.tick() is True
    assert scheduler.tick() is False
    assert scheduler.tick() is False

    assert restart.calls == 1
    assert scheduler.finished is True


def test_confirm_on_continue_leads_to_transition(session, gate, restart):
    transitions = []
    scheduler = TransitionScheduler(session, lambda: transitions.append(True))
    gate.begin()
    gate.resolve(failures_occurred=True, restart_required=False)
    tick = ForegroundTick(gate, scheduler, Presses(False, False, True, True))

    assert tick() is False
    assert tick() is False
    assert tick() is True       # confirm consumed and transition fired in the same tick
    assert tick() is False      # second press has nothing left to act on

    assert transitions == [True]
    assert tick.finished is True
    assert restart.calls == 0


def test_confirm_on_restart_does_not_transition(session, gate, restart):
    transitions = []
    scheduler = TransitionScheduler(session, lambda: transitions.append(True))
    gate.begin()
    gate.resolve(failures_occurred=True, restart_required=True)
    tick = ForegroundTick(gate, scheduler, Presses(True, True))

    tick()
    tick()

    assert restart.calls == 1
    assert transitions == []


def test_press_before_failure_is_ignored(session, gate, restart):
    scheduler = TransitionScheduler(session, lambda: None)
    gate.begin()
    tick = ForegroundTick(gate, scheduler, Presses(True))

    tick()
    gate.resolve(failures_occurred=True, restart_required=True)
    tick()

    assert restart.calls == 0
    assert session.awaiting_restart_confirm is True


class TestConfirmLatch:

    def test_unpressed_reads_false(self):
        assert ConfirmLatch()() is False

    def test_press_is_read_once_then_cleared(self):
        latch = ConfirmLatch()
        latch.press()

        assert latch() is True
        assert latch() is False

    def test_repeated_presses_before_a_read_count_once(self):
        latch = ConfirmLatch()
        latch.press()
        latch.press()

        assert latch() is True
        assert latch() is False

    def test_latch_drives_continue_confirmation(self, session, gate, restart):
        transitions = []
        scheduler = TransitionScheduler(session, lambda: transitions.append(True))
        gate.begin()
        gate.resolve(failures_occurred=True, restart_required=False)
        latch = ConfirmLatch()
        tick = ForegroundTick(gate, scheduler, latch)

        assert tick() is False
        latch.press()
        assert tick() is True
        assert tick() is False

        assert transitions == [True]
        assert restart.calls == 0
