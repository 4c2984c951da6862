"""Form definition: the ordered field list a template is mapped against."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
import uuid

from formfiller.model.field import FieldType, FormField
from formfiller.storage.batch import BatchResult, run_batch


@dataclass(slots=True)
class FormDefinition:
    id: str
    name: str
    description: str | None = None
    fields: list[FormField] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fields.sort(key=lambda item: item.order_position)
        self._renumber()

    def get_field(self, field_id: str) -> FormField | None:
        for item in self.fields:
            if item.id == field_id:
                return item
        return None

    def field_ids(self) -> set[str]:
        return {item.id for item in self.fields}

    def add_field(
        self,
        name: str,
        field_type: FieldType = FieldType.TEXT,
        *,
        required: bool = False,
        placeholder: str | None = None,
        options: str | None = None,
    ) -> FormField:
        if options is None and field_type.has_options:
            options = ""
        new_field = FormField(
            id=str(uuid.uuid4()),
            name=name,
            field_type=field_type,
            order_position=len(self.fields),
            required=required,
            placeholder=placeholder,
            options=options,
        )
        self.fields.append(new_field)
        return new_field

    def remove_field(self, field_id: str) -> FormField:
        target = self.get_field(field_id)
        if target is None:
            raise KeyError(field_id)
        if len(self.fields) == 1:
            raise ValueError("A form must keep at least one field")
        self.fields.remove(target)
        self._renumber()
        return target

    def move_up(self, field_id: str) -> bool:
        return self._move(field_id, -1)

    def move_down(self, field_id: str) -> bool:
        return self._move(field_id, 1)

    def missing_required(self, values: dict[str, str]) -> list[FormField]:
        return [
            item
            for item in self.fields
            if item.required and not str(values.get(item.id) or "").strip()
        ]

    def blank_values(self) -> dict[str, str]:
        return {item.id: "" for item in self.fields}

    def save_fields(self, operation: Callable[[FormField], object]) -> BatchResult[FormField]:
        """Persist each field with ``operation``; report which saves failed."""
        return run_batch(self.fields, operation, key=lambda item: item.id)

    def _move(self, field_id: str, step: int) -> bool:
        target = self.get_field(field_id)
        if target is None:
            return False
        index = self.fields.index(target)
        new_index = index + step
        if new_index < 0 or new_index >= len(self.fields):
            return False
        self.fields[index], self.fields[new_index] = self.fields[new_index], self.fields[index]
        self._renumber()
        return True

    def _renumber(self) -> None:
        for index, item in enumerate(self.fields):
            item.order_position = index
