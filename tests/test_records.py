import json

import pytest

from formfiller.model.coordinates import CoordinateUnit
from formfiller.model.field import FieldType
from formfiller.model.template import Submission
from formfiller.storage.records import (
    RecordDecodeError,
    decode_form,
    decode_positions,
    decode_submission,
    decode_template,
    encode_submission,
    encode_template,
)


def test_decode_positions_from_array_text():
    raw = json.dumps([{"id": "p1", "fieldId": "f1", "page": 0, "x": 10, "y": 20, "unit": "percent"}])
    positions = decode_positions(raw)
    [position] = list(positions)
    assert (position.id, position.field_id, position.page, position.x, position.y) == ("p1", "f1", 0, 10, 20)
    assert position.unit is CoordinateUnit.PERCENT


def test_decode_positions_keyed_by_field():
    raw = {
        "f1": {"x": 50, "y": 50, "page": 0},
        "f2": [{"x": 1, "y": 2, "page": 0}, {"x": 3, "y": 4, "page": 1}],
    }
    positions = decode_positions(raw)
    assert len(positions.for_field("f1")) == 1
    assert [p.page for p in positions.for_field("f2")] == [0, 1]


def test_untagged_positions_are_legacy():
    positions = decode_positions([{"fieldId": "f1", "page": 0, "x": 10, "y": 500}])
    assert next(iter(positions)).unit is CoordinateUnit.LEGACY


def test_malformed_position_entries_are_skipped(caplog):
    raw = [
        {"fieldId": "f1", "page": 0, "x": 10, "y": 20},
        {"fieldId": "f2", "page": 0, "x": "left", "y": 20},
        {"page": 0, "x": 1, "y": 1},
        "junk",
    ]
    positions = decode_positions(raw)
    assert [p.field_id for p in positions] == ["f1"]
    assert "Skipping" in caplog.text


def test_decode_positions_rejects_bad_json():
    with pytest.raises(RecordDecodeError):
        decode_positions("{not json")


def test_decode_template_with_encoded_positions():
    row = {
        "id": "t1",
        "form_id": "form-1",
        "pdf_url": "https://files.example.com/t1.pdf",
        "original_pdf_name": "intake.pdf",
        "positions": json.dumps([{"fieldId": "f1", "page": 0, "x": 5, "y": 6}]),
    }
    template = decode_template(json.dumps(row))
    assert template.document_ref == "https://files.example.com/t1.pdf"
    assert template.original_file_name == "intake.pdf"
    assert [p.field_id for p in template.positions] == ["f1"]


def test_decode_template_requires_document():
    with pytest.raises(RecordDecodeError):
        decode_template({"id": "t1", "positions": []})


def test_encode_template_writes_positions_as_json_array(session):
    session.store.add(field_id="f1", page=0, x=10, y=20, page_width=300, page_height=600)
    row = encode_template(session.to_template())
    assert row["pdf_url"] == "template.pdf"
    assert row["form_id"] == "form-1"
    [entry] = json.loads(row["positions"])
    assert entry["fieldId"] == "f1"
    assert entry["unit"] == "percent"

    decoded = decode_template(row)
    assert list(decoded.positions) == list(session.to_template().positions)


def test_decode_form_parses_types_and_order():
    form = decode_form(
        {
            "id": "form-1",
            "name": "Intake",
            "fields": [
                {"id": "b", "name": "Pets", "type": "checkbox", "options": "Cat,Dog", "order_position": 1},
                {"id": "a", "name": "Name", "type": "text", "required": True, "order_position": 0},
                {"id": "c", "name": "Odd", "type": "signature", "order_position": 2},
            ],
        }
    )
    assert [item.id for item in form.fields] == ["a", "b", "c"]
    assert form.fields[1].option_list() == ["Cat", "Dog"]
    assert form.fields[2].field_type is FieldType.TEXT
    assert form.fields[0].required


def test_submission_round_trip_through_row(sample_form, session):
    session.store.add(field_id="f1", page=0, x=50, y=50)
    submission = Submission.capture(session.to_template(), sample_form, {"f1": "Ada", "f3": "Cat,Bird"})

    row = encode_submission(submission)
    assert isinstance(row["field_values"], str)
    decoded = decode_submission(row)

    assert decoded.field_values == {"f1": "Ada", "f3": "Cat,Bird"}
    assert decoded.template.document_ref == "template.pdf"
    assert decoded.form.field_name("f1") == "Full name"
    assert [p.field_id for p in decoded.template.positions] == ["f1"]


def test_decode_submission_normalizes_values():
    row = {
        "id": "s1",
        "field_values": {"f1": None, "f2": ["Cat", "Dog"], "f3": 42},
        "template_data": {"pdf_url": "a.pdf", "positions": {}},
        "form_data": {"id": "form-1", "name": "Intake", "fields": []},
    }
    submission = decode_submission(row)
    assert submission.field_values == {"f1": "", "f2": "Cat,Dog", "f3": "42"}


def test_decode_submission_requires_template_document():
    with pytest.raises(RecordDecodeError):
        decode_submission({"field_values": "{}", "template_data": "{}", "form_data": "{}"})


def test_capture_freezes_template_and_form(sample_form, session):
    position = session.store.add(field_id="f1", page=0, x=50, y=50)
    submission = Submission.capture(session.to_template(), sample_form, {"f1": "Ada"})

    session.store.update(position.id, x=1)
    sample_form.fields[0].name = "Renamed"

    assert submission.template.positions.for_field("f1")[0].x == 50
    assert submission.form.field_name("f1") == "Full name"
    assert submission.output_file_name == "filled_template.pdf"


def test_non_numeric_field_order_is_a_decode_error():
    row = {
        "template_data": {"pdf_url": "a.pdf"},
        "form_data": {"fields": [{"id": "f1", "order_position": "first"}]},
    }
    with pytest.raises(RecordDecodeError, match="order_position"):
        decode_submission(row)


def test_non_numeric_page_size_is_a_decode_error():
    with pytest.raises(RecordDecodeError, match="page_width"):
        decode_template({"pdf_url": "a.pdf", "page_width": "wide"})


def test_template_page_size_in_points(session):
    session.page_width_pt, session.page_height_pt = 612.0, 792.0
    row = encode_template(session.to_template())
    assert (row["page_width_pt"], row["page_height_pt"]) == (612.0, 792.0)

    legacy = decode_template({"pdf_url": "a.pdf", "page_width": 200, "page_height": "400"})
    assert (legacy.page_width_pt, legacy.page_height_pt) == (200.0, 400.0)


def test_submission_form_keeps_stored_field_order():
    row = {
        "template_data": {"pdf_url": "a.pdf"},
        "form_data": {
            "id": "form-1",
            "name": "Intake",
            "fields": [
                {"id": "b", "name": "Pets", "order_position": 4},
                {"id": "a", "name": "Name", "order_position": 1},
            ],
        },
    }
    form = decode_submission(row).form
    assert [(item.id, item.order_position) for item in form.fields] == [("b", 4), ("a", 1)]
    assert form.name == "Intake"
