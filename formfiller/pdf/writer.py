"""Fill engine: stamp submitted values onto a source PDF with a reportlab overlay + pypdf."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from io import BytesIO
import logging
from pathlib import Path

from pypdf import PdfReader, PdfWriter
from reportlab.lib import colors
from reportlab.pdfgen import canvas

from formfiller.model.coordinates import CoordinateUnit, resolve_draw_point
from formfiller.pdf.loader import DEFAULT_TIMEOUT, PdfParseError, fetch_document_bytes, parse_pdf_bytes

logger = logging.getLogger(__name__)

DEFAULT_FONT = "Helvetica"
DEFAULT_FONT_SIZE = 12.0


class PdfWriteError(RuntimeError):
    """Raised when output generation fails."""


@dataclass(slots=True)
class FillPosition:
    x: float
    y: float
    page: int
    unit: CoordinateUnit = CoordinateUnit.PERCENT


@dataclass(slots=True)
class FillItem:
    field_id: str
    value: str
    position: FillPosition


def fill_pdf(
    document_ref: str | Path,
    items: list[FillItem],
    *,
    font_name: str = DEFAULT_FONT,
    font_size: float = DEFAULT_FONT_SIZE,
    timeout: float = DEFAULT_TIMEOUT,
) -> bytes:
    source = fetch_document_bytes(document_ref, timeout=timeout)
    return fill_pdf_bytes(source, items, font_name=font_name, font_size=font_size)


def fill_pdf_bytes(
    source: bytes,
    items: list[FillItem],
    *,
    font_name: str = DEFAULT_FONT,
    font_size: float = DEFAULT_FONT_SIZE,
) -> bytes:
    reader = parse_pdf_bytes(source)
    writer = PdfWriter()
    try:
        for page in reader.pages:
            writer.add_page(page)
    except Exception as exc:
        raise PdfParseError("Failed to read PDF pages") from exc

    grouped = _group_by_page(items, len(reader.pages))

    try:
        if grouped:
            overlay_pdf = _build_overlay_pdf(reader, grouped, font_name, font_size)
            overlay_reader = PdfReader(overlay_pdf)
            for page_index in grouped:
                writer.pages[page_index].merge_page(overlay_reader.pages[page_index])

        buffer = BytesIO()
        writer.write(buffer)
    except Exception as exc:
        raise PdfWriteError("Failed to write filled PDF") from exc

    return buffer.getvalue()


def _group_by_page(items: list[FillItem], page_count: int) -> dict[int, list[FillItem]]:
    grouped: dict[int, list[FillItem]] = defaultdict(list)
    for item in items:
        page_index = item.position.page
        if page_index < 0 or page_index >= page_count:
            logger.warning(
                "Page %d does not exist for field %s (document has %d pages); skipping",
                page_index,
                item.field_id,
                page_count,
            )
            continue
        grouped[page_index].append(item)
    return dict(grouped)


def _build_overlay_pdf(
    reader: PdfReader,
    grouped: dict[int, list[FillItem]],
    font_name: str,
    font_size: float,
) -> BytesIO:
    buffer = BytesIO()
    report = canvas.Canvas(buffer, invariant=1)

    for page_index, page in enumerate(reader.pages):
        box = page.cropbox
        left = float(box.left)
        bottom = float(box.bottom)
        width = float(box.width)
        height = float(box.height)
        report.setPageSize((left + width, bottom + height))

        for item in grouped.get(page_index, []):
            if not item.value:
                continue
            try:
                x, y = resolve_draw_point(
                    item.position.x,
                    item.position.y,
                    width,
                    height,
                    item.position.unit,
                )
                report.setFont(font_name, font_size)
                report.setFillColor(colors.black)
                report.drawString(left + x, bottom + y, item.value)
            except Exception:
                logger.exception("Error drawing field %s on page %d", item.field_id, page_index)

        report.showPage()

    report.save()
    buffer.seek(0)
    return buffer
