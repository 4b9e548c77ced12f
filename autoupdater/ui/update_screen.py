"""Full-window update screen — spinner, status text and confirm button.

The screen never receives progress through signals: a QTimer polls the
shared UpdateSession, forwards confirmation input and lets the
TransitionScheduler decide when to leave.
"""

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel, QPushButton

from autoupdater.core.messages import MessageKey, Messages
from autoupdater.core.scheduler import ConfirmLatch, ForegroundTick
from autoupdater.core.session import SessionSnapshot, UpdateSession

SPINNER_FRAMES = "◐◓◑◒"

# Ticks per spinner frame at the default 16 ms interval
SPINNER_TICKS_PER_FRAME = 6


class UpdateScreen(QWidget):
    """Shows update progress and asks for confirmation after failures."""

    transition_requested = pyqtSignal()  # Hand control to the next stage (emitted once)

    def __init__(self, session: UpdateSession, messages: Messages,
                 latch: ConfirmLatch, tick_interval_ms: int = 16, parent=None):
        super().__init__(parent)
        self._session = session
        self._messages = messages
        self._latch = latch
        self._foreground_tick: ForegroundTick | None = None
        self._tick_count = 0
        self._spinner_frame = 0

        self.setMinimumSize(640, 200)
        self.setStyleSheet("UpdateScreen { background-color: #1e1e1e; }")
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        layout = QHBoxLayout(self)
        layout.setContentsMargins(48, 48, 48, 48)
        layout.setSpacing(16)

        # Spinner, stopped once the run fails
        self._spinner = QLabel(SPINNER_FRAMES[0])
        self._spinner.setAlignment(Qt.AlignmentFlag.AlignTop)
        self._spinner.setStyleSheet("color: #FFFFFF; font-size: 32px; background: transparent;")
        layout.addWidget(self._spinner)

        text_layout = QVBoxLayout()
        text_layout.setSpacing(8)

        self._label = QLabel("")
        self._label.setWordWrap(True)
        self._label.setStyleSheet(
            "color: #FFFFFF; font-weight: bold; font-size: 18px; background: transparent;"
        )
        text_layout.addWidget(self._label)

        # Sub-message (appears smaller under the text)
        self._sub_label = QLabel("")
        self._sub_label.setWordWrap(True)
        self._sub_label.setVisible(False)
        self._sub_label.setStyleSheet("color: #CCCCCC; font-size: 12px; background: transparent;")
        text_layout.addWidget(self._sub_label)

        self._btn = QPushButton("OK")
        self._btn.setFixedSize(90, 28)
        self._btn.setVisible(False)
        self._btn.setStyleSheet(
            "QPushButton { background-color: #F59E0B; color: #FFFFFF; "
            "font-weight: bold; border: none; border-radius: 4px; } "
            "QPushButton:hover { background-color: #D97706; } "
            "QPushButton:pressed { background-color: #B45309; }"
        )
        self._btn.clicked.connect(self._latch.press)
        text_layout.addWidget(self._btn)
        text_layout.addStretch()

        layout.addLayout(text_layout, 1)

        self._timer = QTimer(self)
        self._timer.timeout.connect(self._on_tick)
        self._tick_interval_ms = tick_interval_ms

    def start(self, foreground_tick: ForegroundTick):
        """Begin polling. The worker may already be running."""
        self._foreground_tick = foreground_tick
        self._render(self._session.snapshot())
        self._timer.start(self._tick_interval_ms)

    def keyPressEvent(self, event):
        if event.key() in (Qt.Key.Key_Return, Qt.Key.Key_Enter, Qt.Key.Key_Space):
            self._latch.press()
            event.accept()
            return
        super().keyPressEvent(event)

    def _on_tick(self):
        if self._foreground_tick is None:
            return
        fired = self._foreground_tick()
        snapshot = self._session.snapshot()
        self._render(snapshot)
        if fired:
            self._timer.stop()

    def _render(self, snapshot: SessionSnapshot):
        awaiting = snapshot.awaiting_restart_confirm or snapshot.awaiting_continue_confirm
        failed = snapshot.sub_message is not None

        self._tick_count += 1
        if not failed and self._tick_count % SPINNER_TICKS_PER_FRAME == 0:
            self._spinner_frame = (self._spinner_frame + 1) % len(SPINNER_FRAMES)
            self._spinner.setText(SPINNER_FRAMES[self._spinner_frame])

        if snapshot.current_message is not None:
            self._label.setText(snapshot.current_message)
        elif not snapshot.ready_to_advance:
            self._label.setText(self._messages.localize(MessageKey.CHECKING))
        else:
            self._label.setText("")

        self._sub_label.setVisible(failed)
        if failed:
            self._sub_label.setText(snapshot.sub_message)

        if awaiting and self._btn.isHidden():
            self.setFocus()
        self._btn.setVisible(awaiting)
