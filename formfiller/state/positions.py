"""In-memory working set of positions for the template being edited."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
import uuid

from formfiller.model.position import Position, PositionMap

_PATCHABLE = frozenset({"x", "y", "page", "page_width", "page_height"})


@dataclass(slots=True)
class PositionStore:
    positions: list[Position] = field(default_factory=list)

    @classmethod
    def from_positions(cls, positions: Iterable[Position]) -> PositionStore:
        return cls(positions=list(positions))

    def add(
        self,
        field_id: str,
        page: int,
        x: float,
        y: float,
        page_width: float = 0.0,
        page_height: float = 0.0,
    ) -> Position:
        position = Position(
            id=str(uuid.uuid4()),
            field_id=field_id,
            page=page,
            x=x,
            y=y,
            page_width=page_width,
            page_height=page_height,
        )
        self.positions.append(position)
        return position

    def get(self, position_id: str) -> Position | None:
        for position in self.positions:
            if position.id == position_id:
                return position
        return None

    def update(self, position_id: str, **patch: float) -> Position | None:
        unknown = set(patch) - _PATCHABLE
        if unknown:
            raise ValueError(f"Cannot patch position attributes: {sorted(unknown)}")
        position = self.get(position_id)
        if position is None:
            return None
        for name, value in patch.items():
            setattr(position, name, value)
        return position

    def remove(self, position_id: str) -> Position | None:
        position = self.get(position_id)
        if position is not None:
            self.positions.remove(position)
        return position

    def remove_for_field(self, field_id: str) -> int:
        kept = [position for position in self.positions if position.field_id != field_id]
        removed = len(self.positions) - len(kept)
        self.positions[:] = kept
        return removed

    def by_page(self, page_index: int) -> list[Position]:
        return [position for position in self.positions if position.page == page_index]

    def count_for_field(self, field_id: str) -> int:
        return sum(1 for position in self.positions if position.field_id == field_id)

    def pages(self) -> set[int]:
        return {position.page for position in self.positions}

    def to_map(self) -> PositionMap:
        return PositionMap(replace(position) for position in self.positions)
