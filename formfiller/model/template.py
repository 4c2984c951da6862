"""Template and submission records."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
import uuid

from formfiller.model.field import FormField
from formfiller.model.form import FormDefinition
from formfiller.model.position import PositionMap

DEFAULT_OUTPUT_NAME = "document.pdf"


@dataclass(slots=True)
class Template:
    id: str
    form_id: str
    document_ref: str
    original_file_name: str = ""
    positions: PositionMap = field(default_factory=PositionMap)
    # first page size in PDF points
    page_width_pt: float = 0.0
    page_height_pt: float = 0.0


@dataclass(frozen=True, slots=True)
class FormSnapshot:
    id: str
    name: str
    description: str | None = None
    fields: tuple[FormField, ...] = ()

    def field_name(self, field_id: str) -> str | None:
        for item in self.fields:
            if item.id == field_id:
                return item.name
        return None


@dataclass(frozen=True, slots=True)
class TemplateSnapshot:
    id: str
    document_ref: str
    original_file_name: str = ""
    positions: PositionMap = field(default_factory=PositionMap)


@dataclass(frozen=True, slots=True)
class Submission:
    """A completed form frozen together with the form and template it was made from."""

    id: str
    field_values: dict[str, str]
    form: FormSnapshot
    template: TemplateSnapshot

    @classmethod
    def capture(
        cls,
        template: Template,
        form: FormDefinition,
        values: dict[str, str],
    ) -> Submission:
        form_snapshot = FormSnapshot(
            id=form.id,
            name=form.name,
            description=form.description,
            fields=tuple(deepcopy(item) for item in form.fields),
        )
        template_snapshot = TemplateSnapshot(
            id=template.id,
            document_ref=template.document_ref,
            original_file_name=template.original_file_name,
            positions=PositionMap(deepcopy(position) for position in template.positions),
        )
        return cls(
            id=str(uuid.uuid4()),
            field_values=dict(values),
            form=form_snapshot,
            template=template_snapshot,
        )

    @property
    def output_file_name(self) -> str:
        return f"filled_{self.template.original_file_name or DEFAULT_OUTPUT_NAME}"
