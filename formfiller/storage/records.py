"""Decode and encode stored template, form and submission records.

Rows arrive either as JSON text or as already-loaded mappings whose nested
columns (``positions``, ``field_values``, ``template_data``, ``form_data``)
may themselves be JSON text. This module is the only place that deals with
that; everything past it works with typed models.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
import json
import logging
from typing import Any
import uuid

from formfiller.model.coordinates import CoordinateUnit
from formfiller.model.field import FieldType, FormField
from formfiller.model.form import FormDefinition
from formfiller.model.position import Position, PositionMap
from formfiller.model.template import FormSnapshot, Submission, Template, TemplateSnapshot

logger = logging.getLogger(__name__)


class RecordDecodeError(RuntimeError):
    """Raised when a stored record cannot be decoded."""


def load_json(raw: str | bytes | Mapping[str, Any] | list[Any] | None, what: str) -> Any:
    if raw is None or isinstance(raw, (Mapping, list)):
        return raw
    try:
        return json.loads(raw)
    except (TypeError, ValueError) as exc:
        raise RecordDecodeError(f"Invalid JSON in {what}") from exc


def _record(raw: str | bytes | Mapping[str, Any], what: str) -> Mapping[str, Any]:
    data = load_json(raw, what)
    if not isinstance(data, Mapping):
        raise RecordDecodeError(f"Expected an object for {what}")
    return data


def _first(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if data.get(key) is not None:
            return data[key]
    return default


def _number(data: Mapping[str, Any], convert: type, *keys: str, default: Any = 0) -> Any:
    raw = _first(data, *keys, default=default)
    try:
        return convert(raw)
    except (TypeError, ValueError) as exc:
        raise RecordDecodeError(f"{keys[0]} must be a number, got {raw!r}") from exc


# Positions


def decode_positions(raw: Any) -> PositionMap:
    """Accept a list of positions or a mapping of field id -> position(s)."""
    data = load_json(raw, "positions")
    if data is None:
        return PositionMap()

    entries: list[tuple[Any, str | None]] = []
    if isinstance(data, list):
        entries = [(entry, None) for entry in data]
    elif isinstance(data, Mapping):
        for field_id, value in data.items():
            values = value if isinstance(value, list) else [value]
            entries.extend((entry, str(field_id)) for entry in values)
    else:
        raise RecordDecodeError("Positions must be a list or an object")

    positions: list[Position] = []
    for entry, field_id in entries:
        position = _decode_position(entry, field_id)
        if position is not None:
            positions.append(position)
    return PositionMap(positions)


def _decode_position(entry: Any, field_id: str | None) -> Position | None:
    if not isinstance(entry, Mapping):
        logger.warning("Skipping position entry that is not an object: %r", entry)
        return None
    field_id = _first(entry, "fieldId", "field_id", default=field_id)
    if field_id is None:
        logger.warning("Skipping position entry without a field id: %r", entry)
        return None
    try:
        raw_unit = entry.get("unit")
        unit = CoordinateUnit(raw_unit) if raw_unit else CoordinateUnit.LEGACY
        return Position(
            id=str(entry.get("id") or uuid.uuid4()),
            field_id=str(field_id),
            page=int(entry["page"]),
            x=float(entry["x"]),
            y=float(entry["y"]),
            page_width=float(_first(entry, "pageWidth", "page_width", default=0.0)),
            page_height=float(_first(entry, "pageHeight", "page_height", default=0.0)),
            unit=unit,
        )
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Skipping malformed position entry %r: %s", entry, exc)
        return None


def encode_position(position: Position) -> dict[str, Any]:
    return {
        "id": position.id,
        "fieldId": position.field_id,
        "page": position.page,
        "x": position.x,
        "y": position.y,
        "pageWidth": position.page_width,
        "pageHeight": position.page_height,
        "unit": position.unit.value,
    }


def encode_positions(positions: Iterable[Position]) -> str:
    return json.dumps([encode_position(position) for position in positions])


# Forms


def decode_form(raw: str | bytes | Mapping[str, Any]) -> FormDefinition:
    data = _record(raw, "form")
    return FormDefinition(
        id=str(_first(data, "id", default="")),
        name=str(_first(data, "name", default="")),
        description=data.get("description"),
        fields=_decode_fields(data),
    )


def _decode_form_snapshot(raw: Any) -> FormSnapshot:
    data = _record(raw or {}, "form_data")
    # Frozen order is kept as stored; only live forms are renumbered.
    return FormSnapshot(
        id=str(_first(data, "id", default="")),
        name=str(_first(data, "name", default="")),
        description=data.get("description"),
        fields=tuple(_decode_fields(data)),
    )


def _decode_fields(data: Mapping[str, Any]) -> list[FormField]:
    fields = data.get("fields") or []
    if not isinstance(fields, list):
        raise RecordDecodeError("Form fields must be a list")
    return [_decode_field(item, index) for index, item in enumerate(fields)]


def _decode_field(data: Any, index: int) -> FormField:
    if not isinstance(data, Mapping):
        raise RecordDecodeError(f"Field {index} is not an object")
    raw_type = str(_first(data, "type", "field_type", default=FieldType.TEXT.value))
    try:
        field_type = FieldType(raw_type)
    except ValueError:
        logger.warning("Unknown field type %r for field %s; using text", raw_type, data.get("id"))
        field_type = FieldType.TEXT
    options = data.get("options")
    if isinstance(options, list):
        options = ",".join(str(option) for option in options)
    return FormField(
        id=str(data.get("id") or uuid.uuid4()),
        name=str(data.get("name") or ""),
        field_type=field_type,
        order_position=_number(data, int, "order_position", default=index),
        required=bool(data.get("required", False)),
        placeholder=data.get("placeholder"),
        options=options,
    )


def encode_field(item: FormField) -> dict[str, Any]:
    return {
        "id": item.id,
        "name": item.name,
        "type": item.field_type.value,
        "required": item.required,
        "placeholder": item.placeholder,
        "options": item.options,
        "order_position": item.order_position,
    }


def encode_form(form: FormDefinition | FormSnapshot) -> dict[str, Any]:
    return {
        "id": form.id,
        "name": form.name,
        "description": form.description,
        "fields": [encode_field(item) for item in form.fields],
    }


# Templates


def decode_template(raw: str | bytes | Mapping[str, Any]) -> Template:
    data = _record(raw, "template")
    document_ref = _first(data, "pdf_url", "document_ref")
    if not document_ref:
        raise RecordDecodeError("Template record has no document reference")
    return Template(
        id=str(_first(data, "id", default="")),
        form_id=str(_first(data, "form_id", default="")),
        document_ref=str(document_ref),
        original_file_name=str(_first(data, "original_pdf_name", "original_file_name", default="")),
        positions=decode_positions(data.get("positions")),
        page_width_pt=_number(data, float, "page_width_pt", "page_width", default=0.0),
        page_height_pt=_number(data, float, "page_height_pt", "page_height", default=0.0),
    )


def encode_template(template: Template) -> dict[str, Any]:
    """Row written when a template and its positions are saved together."""
    return {
        "id": template.id,
        "form_id": template.form_id,
        "pdf_url": template.document_ref,
        "original_pdf_name": template.original_file_name,
        "page_width_pt": template.page_width_pt,
        "page_height_pt": template.page_height_pt,
        "positions": encode_positions(template.positions),
    }


# Submissions


def _decode_values(raw: Any) -> dict[str, str]:
    data = load_json(raw, "field_values") or {}
    if not isinstance(data, Mapping):
        raise RecordDecodeError("Field values must be an object")
    values: dict[str, str] = {}
    for field_id, value in data.items():
        if value is None:
            values[str(field_id)] = ""
        elif isinstance(value, list):
            values[str(field_id)] = ",".join(str(item) for item in value)
        else:
            values[str(field_id)] = str(value)
    return values


def decode_submission(raw: str | bytes | Mapping[str, Any]) -> Submission:
    data = _record(raw, "submission")
    template_data = _record(data.get("template_data") or {}, "template_data")
    form = _decode_form_snapshot(data.get("form_data"))

    document_ref = _first(template_data, "pdf_url", "document_ref")
    if not document_ref:
        raise RecordDecodeError("Submission template snapshot has no document reference")

    return Submission(
        id=str(_first(data, "id", default="")),
        field_values=_decode_values(data.get("field_values")),
        form=form,
        template=TemplateSnapshot(
            id=str(_first(template_data, "id", default="")),
            document_ref=str(document_ref),
            original_file_name=str(
                _first(template_data, "original_pdf_name", "original_file_name", default="")
            ),
            positions=decode_positions(template_data.get("positions")),
        ),
    )


def encode_submission(submission: Submission) -> dict[str, Any]:
    template = submission.template
    return {
        "id": submission.id,
        "template_id": template.id,
        "form_id": submission.form.id,
        "template_data": json.dumps(
            {
                "id": template.id,
                "pdf_url": template.document_ref,
                "original_pdf_name": template.original_file_name,
                "positions": [encode_position(position) for position in template.positions],
            }
        ),
        "form_data": json.dumps(encode_form(submission.form)),
        "field_values": json.dumps(submission.field_values),
    }
