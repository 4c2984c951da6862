"""Conversion between page-relative percentages and absolute PDF coordinates.

Stored positions use a top-left origin expressed as percentages of the page
box. PDF drawing uses a bottom-left origin in absolute units, so the vertical
axis is flipped on the way out.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


PERCENT_MAX = 100.0


class CoordinateUnit(str, Enum):
    PERCENT = "percent"
    ABSOLUTE = "absolute"
    # Untagged records written before units were stored.
    LEGACY = "legacy"


@dataclass(slots=True)
class PageBox:
    """On-screen bounding box of a rendered page."""

    left: float
    top: float
    width: float
    height: float


def clamp_percent(value: float) -> float:
    return max(0.0, min(PERCENT_MAX, value))


def to_absolute(
    percent_x: float,
    percent_y: float,
    page_width: float,
    page_height: float,
) -> tuple[float, float]:
    abs_x = percent_x / PERCENT_MAX * page_width
    abs_y = page_height - (percent_y / PERCENT_MAX * page_height)
    return abs_x, abs_y


def to_percent(
    abs_x: float,
    abs_y: float,
    page_width: float,
    page_height: float,
) -> tuple[float, float]:
    percent_x = abs_x / page_width * PERCENT_MAX
    percent_y = (page_height - abs_y) / page_height * PERCENT_MAX
    return percent_x, percent_y


def pointer_to_percent(pointer_x: float, pointer_y: float, box: PageBox) -> tuple[float, float]:
    """Map a pointer location to clamped percentages of ``box``."""
    if box.width <= 0 or box.height <= 0:
        return 0.0, 0.0
    x = (pointer_x - box.left) / box.width * PERCENT_MAX
    y = (pointer_y - box.top) / box.height * PERCENT_MAX
    return clamp_percent(x), clamp_percent(y)


def percent_to_offset(percent_x: float, percent_y: float, width: float, height: float) -> tuple[float, float]:
    """Pixel offset of a stored percentage inside a rendered page of ``width`` x ``height``."""
    return percent_x / PERCENT_MAX * width, percent_y / PERCENT_MAX * height


def resolve_draw_point(
    x: float,
    y: float,
    page_width: float,
    page_height: float,
    unit: CoordinateUnit = CoordinateUnit.PERCENT,
) -> tuple[float, float]:
    """Absolute bottom-left point for a stored coordinate.

    ``LEGACY`` values are guessed per axis: anything above 100 is taken to be
    an absolute value already in bottom-left space.
    """
    if unit is CoordinateUnit.ABSOLUTE:
        return x, y
    if unit is CoordinateUnit.PERCENT:
        return to_absolute(x, y, page_width, page_height)

    abs_x = x if x > PERCENT_MAX else x / PERCENT_MAX * page_width
    abs_y = y if y > PERCENT_MAX else page_height - (y / PERCENT_MAX * page_height)
    return abs_x, abs_y
