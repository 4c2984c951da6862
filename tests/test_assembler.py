import pytest

from formfiller.config import Settings
from formfiller.model.coordinates import CoordinateUnit
from formfiller.model.position import Position, PositionMap
from formfiller.model.template import FormSnapshot, Submission, TemplateSnapshot
from formfiller.pdf.assembler import assemble_fill_items, regenerate_document
from formfiller.pdf.loader import PdfFetchError


def _submission(values, positions, document_ref="template.pdf", name="intake.pdf"):
    return Submission(
        id="s1",
        field_values=values,
        form=FormSnapshot(id="form-1", name="Intake"),
        template=TemplateSnapshot(
            id="t1",
            document_ref=str(document_ref),
            original_file_name=name,
            positions=PositionMap(positions),
        ),
    )


def test_field_with_two_positions_yields_two_items():
    positions = [
        Position(id="a", field_id="f1", page=0, x=10, y=10),
        Position(id="b", field_id="f1", page=1, x=20, y=20),
    ]
    items = assemble_fill_items(_submission({"f1": "Ada"}, positions))
    assert len(items) == 2
    assert {item.value for item in items} == {"Ada"}
    assert sorted(item.position.page for item in items) == [0, 1]


def test_unplaced_field_contributes_nothing():
    positions = [Position(id="a", field_id="f1", page=0, x=10, y=10)]
    items = assemble_fill_items(_submission({"f1": "Ada", "f2": "ada@example.com"}, positions))
    assert [item.field_id for item in items] == ["f1"]


def test_position_unit_is_carried_over():
    positions = [Position(id="a", field_id="f1", page=0, x=10, y=300, unit=CoordinateUnit.LEGACY)]
    [item] = assemble_fill_items(_submission({"f1": "Ada"}, positions))
    assert item.position.unit is CoordinateUnit.LEGACY
    assert (item.position.x, item.position.y) == (10, 300)


def test_regenerate_document(make_pdf, extract_words):
    path = make_pdf((200, 400))
    positions = [Position(id="a", field_id="f1", page=0, x=50, y=50)]
    filled = regenerate_document(_submission({"f1": "Hello"}, positions, document_ref=path))

    assert filled.file_name == "filled_intake.pdf"
    [word] = [w for w in extract_words(filled.data) if w[4] == "Hello"]
    assert word[0] == pytest.approx(100, abs=0.5)


def test_regenerate_uses_configured_font(make_pdf, extract_words):
    path = make_pdf((200, 400))
    positions = [Position(id="a", field_id="f1", page=0, x=10, y=50)]
    settings = Settings(font_name="Courier", font_size=20)
    filled = regenerate_document(_submission({"f1": "Mono"}, positions, document_ref=path), settings)

    [word] = [w for w in extract_words(filled.data) if w[4] == "Mono"]
    # four Courier glyphs at 20pt are 0.6em wide each
    assert word[2] - word[0] == pytest.approx(48, abs=1)


def test_regenerate_default_output_name(tmp_path):
    submission = _submission({}, [], document_ref=tmp_path / "missing.pdf", name="")
    assert submission.output_file_name == "filled_document.pdf"
    with pytest.raises(PdfFetchError):
        regenerate_document(submission)
