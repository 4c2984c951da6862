"""Open source document: a PyMuPDF handle over a temporary working copy."""

from __future__ import annotations

from dataclasses import dataclass
import logging
import os
from pathlib import Path

import fitz

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PdfDocument:
    source_ref: str
    working_path: Path
    handle: fitz.Document

    @property
    def page_count(self) -> int:
        return self.handle.page_count

    @property
    def is_closed(self) -> bool:
        return self.handle.is_closed

    def page_size(self, page_index: int) -> tuple[float, float]:
        rect = self.handle.load_page(page_index).rect
        return float(rect.width), float(rect.height)

    def close(self) -> None:
        if not self.handle.is_closed:
            self.handle.close()
        if self.working_path.exists():
            try:
                os.remove(self.working_path)
            except OSError:
                logger.warning("Could not remove working copy %s", self.working_path)
