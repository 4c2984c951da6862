"""Field positions placed on template pages."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from formfiller.model.coordinates import CoordinateUnit


@dataclass(slots=True)
class Position:
    id: str
    field_id: str
    page: int
    x: float
    y: float
    # rendered page size in pixels when the marker was last placed
    page_width: float = 0.0
    page_height: float = 0.0
    unit: CoordinateUnit = CoordinateUnit.PERCENT


class PositionMap:
    """Read-only position collection indexed by field and by page."""

    __slots__ = ("_positions", "_by_field", "_by_page")

    def __init__(self, positions: Iterable[Position] = ()) -> None:
        self._positions: tuple[Position, ...] = tuple(positions)
        self._by_field: dict[str, list[Position]] = defaultdict(list)
        self._by_page: dict[int, list[Position]] = defaultdict(list)
        for position in self._positions:
            self._by_field[position.field_id].append(position)
            self._by_page[position.page].append(position)

    def __iter__(self) -> Iterator[Position]:
        return iter(self._positions)

    def __len__(self) -> int:
        return len(self._positions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PositionMap):
            return NotImplemented
        return self._positions == other._positions

    def __repr__(self) -> str:
        return f"PositionMap({list(self._positions)!r})"

    def for_field(self, field_id: str) -> list[Position]:
        return list(self._by_field.get(field_id, []))

    def on_page(self, page: int) -> list[Position]:
        return list(self._by_page.get(page, []))

    def field_ids(self) -> set[str]:
        return set(self._by_field)
