"""AutoUpdater — entry point."""

import sys
import os
import logging
from functools import partial

from autoupdater.branding import AppBranding
from autoupdater.config.settings import AppSettings
from autoupdater.core.gate import ConfirmationGate
from autoupdater.core.messages import Messages
from autoupdater.core.orchestrator import UpdateOrchestrator, get_update_worker_class
from autoupdater.core.pending import discard_installed, load_pending_updates
from autoupdater.core.primitives import PackagePrimitives, restart_process
from autoupdater.core.scheduler import ConfirmLatch, ForegroundTick, TransitionScheduler
from autoupdater.core.session import UpdateSession


def setup_logging(data_dir: str):
    """Configure logging to file and console."""
    log_dir = os.path.join(data_dir, 'logs')
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'autoupdater.log')

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler(),
        ],
    )


def main():
    # High-DPI support
    os.environ.setdefault('QT_ENABLE_HIGHDPI_SCALING', '1')

    settings = AppSettings.load()
    settings.ensure_dirs()

    setup_logging(settings.data_dir)
    logger = logging.getLogger(__name__)
    logger.info("%s starting", AppBranding.window_title())

    messages = Messages.load(settings.messages_file)
    session = UpdateSession()
    gate = ConfirmationGate(session, messages.localize, restart_process,
                            restart_delay=settings.restart_delay)
    primitives = PackagePrimitives(settings.mods_dir, timeout=settings.download_timeout)
    orchestrator = UpdateOrchestrator(primitives, session, gate, messages.localize,
                                      settings.temp_download_path,
                                      partial(discard_installed, settings.updates_file))

    from PyQt6.QtWidgets import QApplication
    from autoupdater.ui.update_screen import UpdateScreen

    app = QApplication(sys.argv)
    app.setApplicationName(AppBranding.APP_NAME)
    app.setOrganizationName(AppBranding.PUBLISHER)

    latch = ConfirmLatch()
    screen = UpdateScreen(session, messages, latch, settings.tick_interval_ms)
    screen.setWindowTitle(AppBranding.window_title())

    # Leaving the update stage ends this process with 0 so the launcher moves on
    scheduler = TransitionScheduler(session, screen.transition_requested.emit)
    screen.transition_requested.connect(partial(app.exit, 0))

    worker = get_update_worker_class()(
        orchestrator,
        partial(load_pending_updates, settings.updates_file),
    )
    worker.run_failed.connect(lambda err: app.exit(1))

    screen.show()
    screen.start(ForegroundTick(gate, scheduler, latch))
    worker.start()

    exit_code = app.exec()

    # Worker has no cancellation; let it finish what it is doing
    worker.wait()

    logger.info("Goodbye")
    sys.exit(exit_code)


if __name__ == '__main__':
    main()
