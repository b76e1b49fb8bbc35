"""Panel window -- GTK window with X11 dock hints that intellihide slides away."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import cairo
import gi

gi.require_version("Gtk", "3.0")
gi.require_version("Gdk", "3.0")
from gi.repository import Gdk, GObject, Gtk  # noqa: E402

from intellihide.core.geometry import Box, Rect  # noqa: E402
from intellihide.core.position import edge_box  # noqa: E402
from intellihide.log import get_logger  # noqa: E402
from intellihide.ui.shelf import draw_panel  # noqa: E402
from intellihide.ui.slide import SlideState  # noqa: E402

_log = get_logger("panel_window")

if TYPE_CHECKING:
    from intellihide.core.config import Config
    from intellihide.platform.overview import Overview
    from intellihide.ui.slide import SlideController

# X11 mouse button code
MOUSE_MIDDLE = 2


def monitor_rect(display: Gdk.Display) -> Rect:
    """Geometry of the primary monitor (first one when none is primary)."""
    monitor = display.get_primary_monitor() or display.get_monitor(0)
    geom = monitor.get_geometry()
    return Rect(geom.x, geom.y, geom.width, geom.height)


def compute_input_rect(
    width: int, height: int, slide_state: SlideState | None
) -> Rect | None:
    """Return the input shape rect, or None when the panel takes no input.

    Input goes away as soon as the panel starts hiding: the window that
    triggered the hide sits under the panel and must get those clicks.
    Showing and visible panels (or no slide controller) take the whole window.
    """
    if slide_state in (SlideState.HIDING, SlideState.HIDDEN):
        return None
    return Rect(0, 0, max(width, 1), max(height, 1))


class PanelWindow(Gtk.Window):
    """Panel anchored to a screen edge; its static box is the intellihide target."""

    __gsignals__ = {
        "box-changed": (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    def __init__(self, config: Config) -> None:
        super().__init__(type=Gtk.WindowType.TOPLEVEL)
        self.config = config
        self.slide: SlideController | None = None
        self._overview: Overview | None = None
        self._box = Box(0, 0, 0, 0)
        # Zero-sized, so never produced by compute_input_rect
        self._last_input_rect: Rect | None = Rect(0, 0, 0, 0)

        self._setup_window()
        self._setup_drawing_area()
        self.reposition()

    @property
    def static_box(self) -> Box:
        """Screen region the panel owns, whether it is slid in or out."""
        return self._box

    def set_slide_controller(self, slide: SlideController) -> None:
        self.slide = slide

    def set_overview(self, overview: Overview) -> None:
        self._overview = overview

    def queue_redraw(self) -> None:
        self.drawing_area.queue_draw()

    def reposition(self) -> None:
        """Move and size the window onto its edge; emits box-changed on change."""
        box = edge_box(
            position=self.config.pos,
            monitor=monitor_rect(self.get_display()),
            thickness=self.config.panel_thickness,
            length=self.config.panel_length or None,
        )
        self.set_size_request(box.width, box.height)
        self.resize(box.width, box.height)
        self.move(box.x1, box.y1)
        if box != self._box:
            self._box = box
            _log.debug("static box now %s", box)
            self.emit("box-changed")
        self.update_input_region()

    def update_input_region(self) -> None:
        """Limit pointer input to the panel while it is slid in.

        A hidden panel is only transparent; without an empty input shape
        the keep-above window would still eat clicks along the edge.
        """
        gdk_window = self.get_window()
        if not gdk_window:
            return

        state = self.slide.state if self.slide else None
        new_rect = compute_input_rect(self._box.width, self._box.height, state)
        if new_rect == self._last_input_rect:
            return
        self._last_input_rect = new_rect
        if new_rect is None:
            region = cairo.Region()
        else:
            region = cairo.Region(
                cairo.RectangleInt(new_rect.x, new_rect.y, new_rect.width, new_rect.height)
            )
        gdk_window.input_shape_combine_region(region, 0, 0)

    def _setup_window(self) -> None:
        """Configure GTK window as an X11 dock.

        DOCK type hint keeps the panel out of the window list (and out of
        its own overlap test); RGBA visual gives transparent corners.
        """
        self.set_title("Intellihide")
        self.set_decorated(False)
        self.set_skip_taskbar_hint(True)
        self.set_skip_pager_hint(True)
        self.stick()
        self.set_keep_above(True)
        self.set_type_hint(Gdk.WindowTypeHint.DOCK)
        self.set_app_paintable(True)
        self.set_resizable(False)

        screen = self.get_screen()
        visual = screen.get_rgba_visual() or screen.get_system_visual()
        self.set_visual(visual)

        screen.connect("monitors-changed", self._on_monitors_changed)
        self.connect("realize", self._on_realize)
        self.connect("destroy", Gtk.main_quit)

    def _setup_drawing_area(self) -> None:
        self.drawing_area = Gtk.DrawingArea()
        self.drawing_area.set_events(Gdk.EventMask.BUTTON_PRESS_MASK)
        self.drawing_area.connect("draw", self._on_draw)
        self.drawing_area.connect("button-press-event", self._on_button_press)
        self.add(self.drawing_area)

    def _on_draw(self, widget: Gtk.DrawingArea, cr: cairo.Context) -> bool:
        alloc = widget.get_allocation()
        offset = self.slide.hide_offset if self.slide else 0.0
        draw_panel(
            cr,
            width=alloc.width,
            height=alloc.height,
            position=self.config.pos,
            hide_offset=offset,
        )
        return True

    def _on_button_press(self, _widget: Gtk.DrawingArea, event: Any) -> bool:
        # Middle click toggles the overview, which pins the panel
        if event.button == MOUSE_MIDDLE and self._overview is not None:
            self._overview.toggle()
            return True
        return False

    def _on_monitors_changed(self, _screen: Gdk.Screen) -> None:
        self.reposition()

    def _on_realize(self, _widget: Gtk.Widget) -> None:
        # No GdkWindow to shape before realize
        self.update_input_region()
