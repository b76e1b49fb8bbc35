"""Panel position types and helpers."""

from __future__ import annotations

import enum

from intellihide.core.geometry import Box, Rect


class Position(str, enum.Enum):
    """Screen edge where the panel is anchored.

    Coordinate convention:
      main axis  -- along the panel (horizontal for BOTTOM/TOP, vertical for LEFT/RIGHT)
      cross axis -- perpendicular to the panel (toward/away from screen edge)
    """

    BOTTOM = "bottom"
    TOP = "top"
    LEFT = "left"
    RIGHT = "right"


def is_horizontal(pos: Position) -> bool:
    """True for bottom/top (panel laid out left-to-right)."""
    return pos in (Position.BOTTOM, Position.TOP)


def edge_box(
    position: Position,
    monitor: Rect,
    thickness: int,
    length: int | None = None,
) -> Box:
    """Static box of a panel anchored to one edge of a monitor.

    `length` is the main-axis size; None (or anything longer than the
    edge) spans the whole edge, shorter panels are centered on it.
    """
    edge = monitor.width if is_horizontal(position) else monitor.height
    main = edge if not length or length > edge else length
    offset = (edge - main) // 2
    cross = min(thickness, monitor.height if is_horizontal(position) else monitor.width)

    if position == Position.BOTTOM:
        x1 = monitor.x + offset
        y1 = monitor.y + monitor.height - cross
        return Box(x1, y1, x1 + main, y1 + cross)
    elif position == Position.TOP:
        x1 = monitor.x + offset
        return Box(x1, monitor.y, x1 + main, monitor.y + cross)
    elif position == Position.LEFT:
        y1 = monitor.y + offset
        return Box(monitor.x, y1, monitor.x + cross, y1 + main)
    else:
        x1 = monitor.x + monitor.width - cross
        y1 = monitor.y + offset
        return Box(x1, y1, x1 + cross, y1 + main)
