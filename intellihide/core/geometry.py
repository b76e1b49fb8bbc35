"""Rectangles and the strict overlap test used by intellihide.

Two shapes meet here:

    Rect -- what the window system reports for a window: the outer frame
            (decorations included) as origin plus size.
    Box  -- what the panel exposes as its static region: two corners.

            x1                x2
        y1  ┌─────────────────┐
            │      Box        │
        y2  └─────────────────┘

Overlap is strict on every side. A window whose right edge sits exactly
on the panel's left edge (rect.x + rect.width == box.x1) shares a border
but not a single pixel, so it does not count.
"""

from __future__ import annotations

from typing import NamedTuple


class Rect(NamedTuple):
    """Window outer rectangle in screen coordinates."""

    x: int
    y: int
    width: int
    height: int


class Box(NamedTuple):
    """Corner-based rectangle (x2/y2 exclusive), the panel's static box."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_rect(cls, rect: Rect) -> Box:
        return cls(rect.x, rect.y, rect.x + rect.width, rect.y + rect.height)

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1


def overlaps(a: Box, b: Box) -> bool:
    """True when the two boxes share at least one pixel."""
    return a.x1 < b.x2 and a.x2 > b.x1 and a.y1 < b.y2 and a.y2 > b.y1


def rect_overlaps(rect: Rect, box: Box) -> bool:
    """True when a window rectangle intersects the target box."""
    return (
        rect.x < box.x2
        and rect.x + rect.width > box.x1
        and rect.y < box.y2
        and rect.y + rect.height > box.y1
    )
