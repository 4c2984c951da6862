"""Interactive page canvas for placing, dragging and removing field markers."""

from __future__ import annotations

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QColor, QFontMetricsF, QPainter, QPen, QPixmap
from PySide6.QtWidgets import QWidget

from formfiller.model.coordinates import PageBox, percent_to_offset
from formfiller.model.field import FormField
from formfiller.model.position import Position
from formfiller.viewer.editor import MarkerEditor

MARKER_HEIGHT = 20.0
MARKER_PADDING = 8.0
REMOVE_SIZE = 14.0


class PageCanvas(QWidget):
    markers_changed = Signal()

    def __init__(self, editor: MarkerEditor, page_index: int, pixmap: QPixmap) -> None:
        super().__init__()
        self._editor = editor
        self._page_index = page_index
        self._pixmap = pixmap

        self.setMouseTracking(True)
        self.setFixedSize(pixmap.size())

    @property
    def page_index(self) -> int:
        return self._page_index

    def page_box(self) -> PageBox:
        return PageBox(left=0.0, top=0.0, width=float(self.width()), height=float(self.height()))

    def paintEvent(self, event) -> None:  # type: ignore[override]
        del event
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.drawPixmap(0, 0, self._pixmap)

        drag = self._editor.active_drag
        for position, field in self._editor.markers_for_page(self._page_index):
            body, remove = self._marker_rects(position, field)
            dragging = drag is not None and drag.position_id == position.id
            color = QColor("#3b82f6")
            if dragging:
                color.setAlphaF(0.5)

            painter.setPen(Qt.PenStyle.NoPen)
            painter.setBrush(color)
            painter.drawRoundedRect(body, MARKER_HEIGHT / 2, MARKER_HEIGHT / 2)

            painter.setPen(QPen(QColor("#ffffff")))
            text_rect = QRectF(body.left() + MARKER_PADDING, body.top(), body.width(), body.height())
            painter.drawText(text_rect, Qt.AlignmentFlag.AlignVCenter | Qt.AlignmentFlag.AlignLeft, field.name)
            painter.drawText(remove, Qt.AlignmentFlag.AlignCenter, "×")
        painter.end()

    def mousePressEvent(self, event) -> None:  # type: ignore[override]
        if event.button() != Qt.MouseButton.LeftButton or not self._editor.is_ready:
            return

        pos = event.position()
        hit = self._marker_at(pos)
        if hit is not None:
            position, on_remove = hit
            if on_remove:
                self._editor.remove_position(position.id)
                self._changed()
            else:
                self._editor.begin_drag(position.id, self.page_box())
                self.update()
            event.accept()
            return

        if self._editor.click_page(self._page_index, self.page_box(), pos.x(), pos.y()) is not None:
            self._changed()

    def mouseMoveEvent(self, event) -> None:  # type: ignore[override]
        if not self._owns_drag():
            return
        pos = event.position()
        if self._editor.update_drag(pos.x(), pos.y()) is not None:
            self._changed()

    def mouseReleaseEvent(self, event) -> None:  # type: ignore[override]
        if not self._owns_drag():
            return
        pos = event.position()
        self._editor.end_drag(pos.x(), pos.y())
        self._changed()

    def _owns_drag(self) -> bool:
        drag = self._editor.active_drag
        return drag is not None and drag.page_index == self._page_index

    def _changed(self) -> None:
        self.markers_changed.emit()
        self.update()

    def _marker_at(self, pos: QPointF) -> tuple[Position, bool] | None:
        markers = self._editor.markers_for_page(self._page_index)
        for position, field in reversed(markers):
            body, remove = self._marker_rects(position, field)
            if remove.contains(pos):
                return position, True
            if body.contains(pos):
                return position, False
        return None

    def _marker_rects(self, position: Position, field: FormField) -> tuple[QRectF, QRectF]:
        center_x, center_y = percent_to_offset(position.x, position.y, self.width(), self.height())
        text_width = QFontMetricsF(self.font()).horizontalAdvance(field.name)
        width = MARKER_PADDING * 2 + text_width + REMOVE_SIZE
        body = QRectF(center_x - width / 2, center_y - MARKER_HEIGHT / 2, width, MARKER_HEIGHT)
        remove = QRectF(
            body.right() - MARKER_PADDING / 2 - REMOVE_SIZE,
            body.top() + (MARKER_HEIGHT - REMOVE_SIZE) / 2,
            REMOVE_SIZE,
            REMOVE_SIZE,
        )
        return body, remove
