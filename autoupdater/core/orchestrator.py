"""Auto-update run — downloads, verifies and installs every pending package.

Architecture:
  UpdateOrchestrator — pure Python logic (no Qt dependency), blocking
  UpdateWorker       — QThread wrapper that runs the orchestrator off the UI thread
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Protocol

from autoupdater.core.gate import ConfirmationGate
from autoupdater.core.messages import MessageKey
from autoupdater.core.models import ModMetadata, UpdateCandidate, UpdateQueue
from autoupdater.core.progress import format_download_line
from autoupdater.core.session import UpdateSession

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int, int], None]


class UpdatePrimitives(Protocol):
    """Download / verify / install building blocks used for every package."""

    def download(self, url: str, dest_path: str, on_progress: ProgressCallback): ...

    def verify_checksum(self, candidate: UpdateCandidate, file_path: str): ...

    def install(self, candidate: UpdateCandidate, metadata: ModMetadata, file_path: str): ...

    def try_delete(self, path: str): ...


@dataclass
class UpdateOutcome:
    """Aggregate result of processing a queue."""

    processed: int = 0
    failures_occurred: bool = False
    restart_required: bool = False   # An install was attempted, installed state may have changed
    installed: list[str] = field(default_factory=list)


class UpdateOrchestrator:
    """Processes an UpdateQueue one package at a time.

    All methods are synchronous (blocking), designed to run in a QThread.
    on_processed receives the names of the installed packages once the
    queue is done, before the outcome reaches the gate.
    """

    def __init__(self, primitives: UpdatePrimitives, session: UpdateSession,
                 gate: ConfirmationGate, localize: Callable[[MessageKey], str],
                 temp_path: str,
                 on_processed: Callable[[list[str]], None] | None = None):
        self._primitives = primitives
        self._session = session
        self._gate = gate
        self._localize = localize
        self._temp_path = temp_path
        self._on_processed = on_processed

    def run(self, queue: UpdateQueue) -> UpdateOutcome:
        """Process the whole queue, then hand the outcome to the gate."""
        outcome = UpdateOutcome()

        if not queue:
            # Nothing to update, continue right away
            self._session.current_message = None
            self._session.mark_ready_to_advance()
            return outcome

        self._gate.begin()
        total = len(queue)
        logger.info("Updating %d package(s)", total)

        for index, (candidate, metadata) in enumerate(queue, start=1):
            # f.e. "[1/3] Auto-updating Polygon Dreams:"
            prefix = (f"[{index}/{total}] {self._localize(MessageKey.UPDATING)} "
                      f"{candidate.display_name}:")
            try:
                self._update_one(prefix, candidate, metadata, outcome)
            except Exception:
                logger.exception("Updating %s failed", candidate.name)
                outcome.failures_occurred = True
                self._primitives.try_delete(self._temp_path)
            outcome.processed += 1

        logger.info("Update run finished: %d processed, failures=%s, restart_required=%s",
                    outcome.processed, outcome.failures_occurred, outcome.restart_required)
        if self._on_processed is not None:
            # Before the gate may restart this process
            self._on_processed(list(outcome.installed))
        self._gate.resolve(outcome.failures_occurred, outcome.restart_required)
        return outcome

    def _update_one(self, prefix: str, candidate: UpdateCandidate,
                    metadata: ModMetadata, outcome: UpdateOutcome):
        downloading = self._localize(MessageKey.DOWNLOADING)
        self._publish(f"{prefix} {downloading}")

        def on_progress(position: int, total: int, speed: int):
            self._publish(format_download_line(prefix, downloading, position, total, speed))

        self._primitives.download(candidate.url, self._temp_path, on_progress)

        self._publish(f"{prefix} {self._localize(MessageKey.VERIFYING)}")
        self._primitives.verify_checksum(candidate, self._temp_path)

        # Install can leave things half-replaced even when it fails
        outcome.restart_required = True
        self._publish(f"{prefix} {self._localize(MessageKey.INSTALLING)}")
        self._primitives.install(candidate, metadata, self._temp_path)
        logger.info("Installed %s %s", candidate.name, candidate.version or "")
        outcome.installed.append(candidate.name)

    def _publish(self, message: str):
        self._session.current_message = message


# ── QThread Worker ───────────────────────────────────────────────────

# Import PyQt6 only when the worker is actually used (lazy import
# to keep UpdateOrchestrator itself free of Qt dependency)

def _get_worker_class():
    """Lazy import to avoid PyQt6 at module level."""
    from PyQt6.QtCore import QThread, pyqtSignal

    class UpdateWorker(QThread):
        """Background worker running one full update run.

        The UI does not listen to per-step signals; it polls the shared
        UpdateSession on its own timer. run_failed is only emitted for a
        fault in the update loop itself.
        """

        run_failed = pyqtSignal(str)     # Error message

        def __init__(self, orchestrator: UpdateOrchestrator,
                     get_pending_updates: Callable[[], UpdateQueue], parent=None):
            super().__init__(parent)
            self._orchestrator = orchestrator
            self._get_pending_updates = get_pending_updates

        def run(self):
            """Thread entry point."""
            try:
                queue = self._get_pending_updates()
                self._orchestrator.run(queue)
            except Exception as e:
                logger.critical("Update run crashed: %s", e, exc_info=True)
                self.run_failed.emit(str(e))

    return UpdateWorker


# Module-level accessor
_UpdateWorkerClass = None


def get_update_worker_class():
    """Get the UpdateWorker class (lazy-imported to avoid PyQt6 at import time)."""
    global _UpdateWorkerClass
    if _UpdateWorkerClass is None:
        _UpdateWorkerClass = _get_worker_class()
    return _UpdateWorkerClass
