"""PDF rendering helpers using PyMuPDF."""

from __future__ import annotations

from dataclasses import dataclass

import fitz
from PySide6.QtGui import QImage

from formfiller.model.document import PdfDocument

DEFAULT_SCALE = 1.5


class PdfRenderError(RuntimeError):
    """Raised when a page cannot be rendered."""


@dataclass(slots=True)
class RenderedPage:
    index: int
    image: QImage
    width_pt: float
    height_pt: float


def render_page_image(document: fitz.Document, page_index: int, zoom: float = DEFAULT_SCALE) -> QImage:
    if page_index < 0 or page_index >= document.page_count:
        raise PdfRenderError(f"Page index out of range: {page_index}")

    try:
        page = document.load_page(page_index)
        matrix = fitz.Matrix(zoom, zoom)
        pix = page.get_pixmap(matrix=matrix, alpha=False, annots=False)
    except Exception as exc:  # pragma: no cover - defensive for PyMuPDF errors
        raise PdfRenderError(f"Failed to render page {page_index + 1}") from exc

    image = QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format.Format_RGB888)
    return image.copy()


def render_document(document: PdfDocument, scale: float = DEFAULT_SCALE) -> list[RenderedPage]:
    """Render every page; any failure fails the whole document."""
    pages: list[RenderedPage] = []
    for page_index in range(document.page_count):
        image = render_page_image(document.handle, page_index, zoom=scale)
        try:
            width_pt, height_pt = document.page_size(page_index)
        except Exception as exc:  # pragma: no cover - defensive for PyMuPDF errors
            raise PdfRenderError(f"Failed to read size of page {page_index + 1}") from exc
        pages.append(RenderedPage(index=page_index, image=image, width_pt=width_pt, height_pt=height_pt))
    return pages
