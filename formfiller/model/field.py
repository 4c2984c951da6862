"""Form field model definitions."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"

    @property
    def has_options(self) -> bool:
        return self in (FieldType.DROPDOWN, FieldType.CHECKBOX)


@dataclass(slots=True)
class FormField:
    id: str
    name: str
    field_type: FieldType
    order_position: int = 0
    required: bool = False
    placeholder: str | None = None
    options: str | None = None

    def option_list(self) -> list[str]:
        if not self.field_type.has_options:
            return []
        return parse_options(self.options)

    def change_type(self, field_type: FieldType) -> None:
        self.field_type = field_type
        self.options = "" if field_type.has_options else None


def parse_options(raw: str | None) -> list[str]:
    """Split a comma-delimited option string, trimming blanks and keeping order."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def toggle_checkbox_value(current: str, option: str, checked: bool) -> str:
    """Add or remove ``option`` from a comma-joined checkbox-group value."""
    values = [value for value in current.split(",") if value]
    option = option.strip()
    if checked:
        if option not in values:
            values.append(option)
    else:
        values = [value for value in values if value != option]
    return ",".join(values)
