"""Editing session for one template: the form being mapped plus its working positions."""

from __future__ import annotations

from dataclasses import dataclass, field
import uuid

from formfiller.model.field import FormField
from formfiller.model.form import FormDefinition
from formfiller.model.position import Position
from formfiller.model.template import Template
from formfiller.state.positions import PositionStore


@dataclass(slots=True)
class TemplateSession:
    form: FormDefinition
    document_ref: str
    original_file_name: str = ""
    template_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    store: PositionStore = field(default_factory=PositionStore)
    page_width_pt: float = 0.0
    page_height_pt: float = 0.0

    @classmethod
    def from_template(cls, template: Template, form: FormDefinition) -> TemplateSession:
        return cls(
            form=form,
            document_ref=template.document_ref,
            original_file_name=template.original_file_name,
            template_id=template.id,
            store=PositionStore.from_positions(template.positions),
            page_width_pt=template.page_width_pt,
            page_height_pt=template.page_height_pt,
        )

    def delete_field(self, field_id: str) -> FormField:
        removed = self.form.remove_field(field_id)
        self.store.remove_for_field(field_id)
        return removed

    def placements(self, field_id: str) -> int:
        return self.store.count_for_field(field_id)

    def orphaned_positions(self) -> list[Position]:
        known = self.form.field_ids()
        return [position for position in self.store.positions if position.field_id not in known]

    def to_template(self) -> Template:
        return Template(
            id=self.template_id,
            form_id=self.form.id,
            document_ref=self.document_ref,
            original_file_name=self.original_file_name,
            positions=self.store.to_map(),
            page_width_pt=self.page_width_pt,
            page_height_pt=self.page_height_pt,
        )
