import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from pathlib import Path

import fitz
import pytest
from reportlab.pdfgen import canvas

from formfiller.model.field import FieldType, FormField
from formfiller.model.form import FormDefinition
from formfiller.state.session import TemplateSession


@pytest.fixture
def make_pdf(tmp_path):
    """Write a blank PDF with the given page sizes and return its path."""

    def _make(*sizes, name="template.pdf") -> Path:
        sizes = sizes or ((200, 400),)
        path = tmp_path / name
        report = canvas.Canvas(str(path), pagesize=sizes[0])
        for size in sizes:
            report.setPageSize(size)
            report.showPage()
        report.save()
        return path

    return _make


@pytest.fixture
def sample_form():
    return FormDefinition(
        id="form-1",
        name="Client Intake",
        fields=[
            FormField(id="f1", name="Full name", field_type=FieldType.TEXT, order_position=0, required=True),
            FormField(id="f2", name="Email", field_type=FieldType.EMAIL, order_position=1),
            FormField(
                id="f3",
                name="Pets",
                field_type=FieldType.CHECKBOX,
                order_position=2,
                options="Cat,Dog, Bird",
            ),
        ],
    )


@pytest.fixture
def session(sample_form):
    return TemplateSession(form=sample_form, document_ref="template.pdf", original_file_name="template.pdf")


def page_words(data: bytes, page_index: int = 0) -> list[tuple]:
    with fitz.open(stream=data, filetype="pdf") as document:
        return document[page_index].get_text("words")


@pytest.fixture
def extract_words():
    return page_words
