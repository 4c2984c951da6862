"""Scrollable view of every template page with its field markers."""

from __future__ import annotations

import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QPixmap
from PySide6.QtWidgets import QLabel, QScrollArea, QVBoxLayout, QWidget

from formfiller.model.document import PdfDocument
from formfiller.pdf.renderer import DEFAULT_SCALE, PdfRenderError, render_document
from formfiller.viewer.canvas import PageCanvas
from formfiller.viewer.editor import MarkerEditor

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load PDF. Please try again."


class TemplateView(QScrollArea):
    markers_changed = Signal()
    load_failed = Signal(str)

    def __init__(self, editor: MarkerEditor, scale: float = DEFAULT_SCALE) -> None:
        super().__init__()
        self._editor = editor
        self._scale = scale
        self._canvases: list[PageCanvas] = []
        self._error: str | None = None

        self.setWidgetResizable(False)
        self.setAlignment(Qt.AlignmentFlag.AlignHCenter)
        self.clear()

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def canvases(self) -> list[PageCanvas]:
        return list(self._canvases)

    def set_editor(self, editor: MarkerEditor) -> None:
        self._editor = editor
        self.clear()

    def show_document(self, document: PdfDocument) -> bool:
        self._editor.set_page_count(None)
        try:
            pages = render_document(document, scale=self._scale)
        except PdfRenderError as exc:
            logger.error("Error rendering %s: %s", document.source_ref, exc)
            self.show_error(LOAD_ERROR_MESSAGE)
            return False

        container = QWidget()
        layout = QVBoxLayout(container)
        layout.setSpacing(16)
        self._canvases = []
        for page in pages:
            canvas = PageCanvas(self._editor, page.index, QPixmap.fromImage(page.image))
            canvas.markers_changed.connect(self.markers_changed)
            layout.addWidget(canvas, alignment=Qt.AlignmentFlag.AlignHCenter)
            self._canvases.append(canvas)

        self._error = None
        self.setWidget(container)
        container.adjustSize()
        self._editor.set_page_count(len(pages))
        return True

    def show_error(self, message: str) -> None:
        self._editor.set_page_count(None)
        self._canvases = []
        self._error = message
        label = QLabel(message)
        label.setStyleSheet("color: #dc2626;")
        label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.setWidget(label)
        label.adjustSize()
        self.load_failed.emit(message)

    def clear(self) -> None:
        self._editor.set_page_count(None)
        self._canvases = []
        self._error = None
        self.setWidget(QWidget())

    def refresh(self) -> None:
        for canvas in self._canvases:
            canvas.update()
