"""Entry point for TMX Review."""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path


def _configure_logging() -> None:
    level = os.environ.get("TMXREVIEW_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    from PySide6.QtWidgets import QApplication
    from tmxreview.main_window import MainWindow

    _configure_logging()

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName("TMX Review")
    app.setOrganizationName("TMXReview")

    window = MainWindow()

    # CLI: open the file given as first argument
    if len(sys.argv) > 1:
        target_file = Path(sys.argv[1])
        if target_file.is_file():
            window.load_file(str(target_file))

    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
