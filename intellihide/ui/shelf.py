"""Panel background drawing -- rounded rectangle with a gradient fill."""

from __future__ import annotations

import math

import cairo

from intellihide.core.position import Position, is_horizontal

FILL_START = (0.16, 0.16, 0.18, 0.85)
FILL_END = (0.08, 0.08, 0.09, 0.92)
STROKE = (1.0, 1.0, 1.0, 0.15)
STROKE_WIDTH = 1.0


def rounded_rect(
    cr: cairo.Context,
    x: float,
    y: float,
    width: float,
    height: float,
    radius: float,
) -> None:
    """Add a closed rounded rectangle path; radius is clamped to fit."""
    radius = max(0.0, min(radius, width / 2, height / 2))
    cr.new_sub_path()
    cr.arc(x + width - radius, y + radius, radius, -math.pi / 2, 0)
    cr.arc(x + width - radius, y + height - radius, radius, 0, math.pi / 2)
    cr.arc(x + radius, y + height - radius, radius, math.pi / 2, math.pi)
    cr.arc(x + radius, y + radius, radius, math.pi, 3 * math.pi / 2)
    cr.close_path()


def slide_translation(
    position: Position, width: float, height: float, hide_offset: float
) -> tuple[float, float]:
    """(dx, dy) pushing the panel toward its screen edge by hide_offset."""
    if position == Position.BOTTOM:
        return 0.0, height * hide_offset
    elif position == Position.TOP:
        return 0.0, -height * hide_offset
    elif position == Position.LEFT:
        return -width * hide_offset, 0.0
    return width * hide_offset, 0.0


def draw_panel(
    cr: cairo.Context,
    width: float,
    height: float,
    position: Position,
    hide_offset: float,
    radius: float = 6.0,
) -> None:
    """Clear the surface and draw the panel slid out by hide_offset."""
    cr.save()
    cr.set_operator(cairo.OPERATOR_SOURCE)
    cr.set_source_rgba(0, 0, 0, 0)
    cr.paint()
    cr.set_operator(cairo.OPERATOR_OVER)

    if hide_offset >= 1.0:
        cr.restore()
        return

    dx, dy = slide_translation(position, width, height, hide_offset)
    cr.translate(dx, dy)

    inset = STROKE_WIDTH / 2
    rounded_rect(cr, inset, inset, width - 2 * inset, height - 2 * inset, radius)

    if is_horizontal(position):
        pat = cairo.LinearGradient(0, 0, 0, height)
    else:
        pat = cairo.LinearGradient(0, 0, width, 0)
    pat.add_color_stop_rgba(0, *FILL_START)
    pat.add_color_stop_rgba(1, *FILL_END)
    cr.set_source(pat)
    cr.fill_preserve()

    cr.set_source_rgba(*STROKE)
    cr.set_line_width(STROKE_WIDTH)
    cr.stroke()
    cr.restore()
