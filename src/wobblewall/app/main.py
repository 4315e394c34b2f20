"""
Application Initialization
==========================
Constructs the store, restores persisted settings, builds the main window and
starts the Qt event loop.

Run with: python -m wobblewall
"""
from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from wobblewall.app.application import create_app
from wobblewall.app.persistence import SettingsRepository
from wobblewall.app.state import Store
from wobblewall.app.ui.main_window import MainWindow
from wobblewall.logging_config import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="wobblewall", description="Animated wobble-circle wallpaper.")
    parser.add_argument("--debug", action="store_true", help="verbose logging")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    parser.add_argument("--single", action="store_true", help="render one group over the whole screen")
    # Qt consumes its own options (-platform, -style, ...) from sys.argv
    args, _unknown = parser.parse_known_args(argv)
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point for the application."""
    args = parse_args(argv)

    # 1. Logging (console + optional file)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Qt application (also fixes the QSettings location)
    app = create_app()

    # 3. Restored settings, defaults on any failure
    repository = SettingsRepository()
    settings = repository.load()
    if args.single:
        settings = settings.with_changes(split_view=False)
    store = Store(settings)

    # 4. Window; the animation starts on first show
    window = MainWindow(store, repository)
    window.show()

    # 5. Event loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
