"""Join a submission's values with its frozen positions and render the filled document."""

from __future__ import annotations

from dataclasses import dataclass
import logging

from formfiller.config import Settings
from formfiller.model.template import Submission
from formfiller.pdf.writer import FillItem, FillPosition, fill_pdf

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class FilledDocument:
    file_name: str
    data: bytes


def assemble_fill_items(submission: Submission) -> list[FillItem]:
    """One fill item per (value, position) pair; unplaced fields contribute nothing."""
    positions = submission.template.positions
    items: list[FillItem] = []
    for field_id, value in submission.field_values.items():
        matches = positions.for_field(field_id)
        if not matches:
            logger.debug("Field %s has no placed position", field_id)
            continue
        text = "" if value is None else str(value)
        for position in matches:
            items.append(
                FillItem(
                    field_id=field_id,
                    value=text,
                    position=FillPosition(
                        x=position.x,
                        y=position.y,
                        page=position.page,
                        unit=position.unit,
                    ),
                )
            )
    return items


def regenerate_document(submission: Submission, settings: Settings | None = None) -> FilledDocument:
    settings = settings or Settings()
    items = assemble_fill_items(submission)
    data = fill_pdf(
        submission.template.document_ref,
        items,
        font_name=settings.font_name,
        font_size=settings.font_size,
        timeout=settings.fetch_timeout,
    )
    logger.info("Generated %s with %d stamped values", submission.output_file_name, len(items))
    return FilledDocument(file_name=submission.output_file_name, data=data)
