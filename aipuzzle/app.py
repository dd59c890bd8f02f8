"""Application entry point and setup for AI_Puzzle."""

import logging
import sys
from typing import Optional

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import QApplication

from aipuzzle.core.config import load_config
from aipuzzle.core.content import ContentProvider
from aipuzzle.core.progress import ProgressStore, ProgressTracker
from aipuzzle.core.session import GameSession
from aipuzzle.ui.main_window import MainWindow, qt_scheduler


def configure_logging() -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load the configuration, restore any saved game, and start the main window."""
    configure_logging()
    app = QApplication(sys.argv)
    app.setApplicationName("AI_Puzzle")
    app.setApplicationDisplayName("AI_Puzzle")

    config = load_config()
    provider: Optional[ContentProvider] = None
    if config.content.api_key:
        provider = ContentProvider(config.content)

    store: Optional[ProgressStore] = None
    tracker: Optional[ProgressTracker] = None
    saved = None
    if config.save_path is not None:
        store = ProgressStore(config.save_path)
        saved = store.load()
        if saved is not None:
            tracker = saved.tracker

    session = GameSession(config.economy, tracker=tracker, scheduler=qt_scheduler)
    if saved is not None and saved.level is not None:
        session.resume(saved.level, saved.board)

    window = MainWindow(config, session, provider, store)
    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        geometry = screen.availableGeometry()
        window.resize(min(560, geometry.width()), min(860, geometry.height()))
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
