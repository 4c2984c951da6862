"""Desktop launcher."""

from __future__ import annotations

import logging
import sys

from PySide6.QtWidgets import QApplication

from formfiller.config import load_settings
from formfiller.ui.main_window import MainWindow


def main() -> int:
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = QApplication(sys.argv)
    window = MainWindow(settings)
    window.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
