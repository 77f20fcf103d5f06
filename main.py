#!/usr/bin/env python3
"""
Sticky Tasks - Main Entry Point

A personal to-do list with a sticker canvas and to-do list recognition
from photos.

Usage:
    python main.py
    python main.py --debug            # Enable debug logging
    python main.py --config FILE      # Use another settings file
"""

import sys
import logging
import argparse
from PyQt6.QtWidgets import QApplication, QMessageBox
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont

from services import create_backend, get_settings
from views import MainWindow, request_sign_in
from views.theme import build_palette


def setup_logging(debug: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if debug else logging.INFO

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Keep HTTP client chatter out of debug output
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    # Log startup message
    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at {'DEBUG' if debug else 'INFO'} level")


def setup_application(dark_mode: bool = False) -> QApplication:
    """Configure the Qt application."""
    # High DPI support
    QApplication.setHighDpiScaleFactorRoundingPolicy(
        Qt.HighDpiScaleFactorRoundingPolicy.PassThrough
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Sticky Tasks")
    app.setApplicationVersion("0.1.0")
    app.setOrganizationName("sticky-tasks")

    # Set default font
    font = QFont("SF Pro Display", 10)
    if not font.exactMatch():
        font = QFont("Segoe UI", 10)
    if not font.exactMatch():
        font = QFont("Helvetica Neue", 10)
    app.setFont(font)

    # Set up palette for consistent look
    app.setPalette(build_palette(dark_mode))

    return app


def main():
    """Main entry point."""
    # Parse command line arguments
    parser = argparse.ArgumentParser(description='Sticky Tasks')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--config', help='Path to an alternative settings file')
    args = parser.parse_args()

    # Setup logging
    setup_logging(debug=args.debug)

    settings = get_settings(args.config)
    app = setup_application(settings.dark_mode)

    try:
        backend = create_backend(settings)
    except ValueError as e:
        logging.getLogger(__name__).error(f"Backend configuration error: {e}")
        QMessageBox.critical(None, "Sticky Tasks", f"{e}\n\nCheck {settings.settings_path}.")
        sys.exit(1)

    if not request_sign_in(backend, settings):
        sys.exit(0)

    # Create and show main window
    window = MainWindow(backend)
    window.show()

    # Run event loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
