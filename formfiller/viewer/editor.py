"""Marker placement logic behind the page canvases.

Kept free of Qt so the canvas only translates mouse events into calls here.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from formfiller.model.coordinates import PageBox, pointer_to_percent
from formfiller.model.field import FormField
from formfiller.model.position import Position
from formfiller.state.session import TemplateSession

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DragGesture:
    position_id: str
    page_index: int
    box: PageBox


class MarkerEditor:
    def __init__(self, session: TemplateSession) -> None:
        self._session = session
        self._selected: FormField | None = None
        self._page_count: int | None = None
        self._drag: DragGesture | None = None

    @property
    def session(self) -> TemplateSession:
        return self._session

    @property
    def selected_field(self) -> FormField | None:
        return self._selected

    @property
    def page_count(self) -> int | None:
        return self._page_count

    @property
    def is_ready(self) -> bool:
        return self._page_count is not None

    @property
    def active_drag(self) -> DragGesture | None:
        return self._drag

    def select_field(self, field: FormField | None) -> None:
        self._selected = field

    def set_page_count(self, page_count: int | None) -> None:
        self._page_count = page_count
        self._drag = None
        if page_count is None:
            return
        for position in self._session.store.positions:
            if position.page >= page_count:
                logger.warning(
                    "Position %s for field %s is on page %d but the document has %d pages",
                    position.id,
                    position.field_id,
                    position.page,
                    page_count,
                )

    def click_page(self, page_index: int, box: PageBox, pointer_x: float, pointer_y: float) -> Position | None:
        if self._selected is None or not self._page_in_range(page_index):
            return None
        x, y = pointer_to_percent(pointer_x, pointer_y, box)
        return self._session.store.add(
            field_id=self._selected.id,
            page=page_index,
            x=x,
            y=y,
            page_width=box.width,
            page_height=box.height,
        )

    def begin_drag(self, position_id: str, box: PageBox) -> bool:
        if self._drag is not None or not self.is_ready:
            return False
        position = self._session.store.get(position_id)
        if position is None:
            return False
        self._drag = DragGesture(position_id=position_id, page_index=position.page, box=box)
        return True

    def update_drag(self, pointer_x: float, pointer_y: float) -> Position | None:
        if self._drag is None:
            return None
        box = self._drag.box
        x, y = pointer_to_percent(pointer_x, pointer_y, box)
        return self._session.store.update(
            self._drag.position_id,
            x=x,
            y=y,
            page_width=box.width,
            page_height=box.height,
        )

    def end_drag(self, pointer_x: float, pointer_y: float) -> Position | None:
        if self._drag is None:
            return None
        position = self.update_drag(pointer_x, pointer_y)
        self._drag = None
        return position

    def remove_position(self, position_id: str) -> Position | None:
        if self._drag is not None and self._drag.position_id == position_id:
            self._drag = None
        return self._session.store.remove(position_id)

    def markers_for_page(self, page_index: int) -> list[tuple[Position, FormField]]:
        """Positions on ``page_index`` with their fields; orphaned positions are left out."""
        markers: list[tuple[Position, FormField]] = []
        for position in self._session.store.by_page(page_index):
            field = self._session.form.get_field(position.field_id)
            if field is None:
                continue
            markers.append((position, field))
        return markers

    def _page_in_range(self, page_index: int) -> bool:
        return self._page_count is not None and 0 <= page_index < self._page_count
