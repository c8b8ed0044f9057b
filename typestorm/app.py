"""Application entry point and setup for the TypeStorm typing exercise."""

import logging
import sys

from PySide6.QtWidgets import QApplication

from typestorm.core.config import Settings, load_settings
from typestorm.core.controller import SessionController
from typestorm.core.phrases import PhraseSource
from typestorm.ui.main_window import MainWindow
from typestorm.ui.qt_scheduler import QtScheduler


def configure_logging(settings: Settings) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def run() -> None:
    """Load phrases, build the session controller and start the main window."""
    settings = load_settings()
    configure_logging(settings)

    try:
        phrases = PhraseSource.from_yaml(settings.phrases_path)
    except (FileNotFoundError, ValueError) as e:
        logging.error("Cannot load phrases: %s", e)
        sys.exit(1)

    app = QApplication(sys.argv)
    app.setApplicationName("TypeStorm")
    app.setApplicationDisplayName("TypeStorm")

    controller = SessionController(phrases, QtScheduler(app), settings=settings)
    window = MainWindow(controller)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
