"""Window environment via libwnck -- window list, workspaces and change signals.

libwnck reports what X11 tells it: stacking changes, workspace switches,
window state and geometry. It has no notion of a grab operation, so a
burst of geometry-changed notifications from one window is treated as a
drag/resize in progress: the first one emits grab-op-begin, and
grab-op-end follows once the window has been still for grab_settle_ms.
"""

from __future__ import annotations

from typing import Any

import gi

gi.require_version("Wnck", "3.0")
gi.require_version("Gdk", "3.0")
from gi.repository import Gdk, GObject, Wnck  # noqa: E402

from intellihide.core.geometry import Rect  # noqa: E402
from intellihide.core.signals import SignalGroup  # noqa: E402
from intellihide.core.timers import QuietPeriod  # noqa: E402
from intellihide.log import get_logger  # noqa: E402
from intellihide.platform.model import WindowType  # noqa: E402

log = get_logger(name="environment")

GRAB_SETTLE_MS = 250

# Desktops and docks (the panel itself included) never start a grab
IGNORED_TYPES = (WindowType.DESKTOP, WindowType.DOCK)


class TrackedWindow:
    """Read-only view of a live Wnck window."""

    def __init__(self, environment: WnckEnvironment, window: Wnck.Window) -> None:
        self._environment = environment
        self._window = window

    def __repr__(self) -> str:
        return f"TrackedWindow(xid={self._window.get_xid()})"

    @property
    def xid(self) -> int:
        return self._window.get_xid()

    def get_geometry(self) -> Rect:
        """Outer rectangle, window frame included."""
        x, y, width, height = self._window.get_geometry()
        return Rect(x, y, width, height)

    def get_window_type(self) -> WindowType:
        return WindowType.from_nick(self._window.get_window_type().value_nick)

    def get_workspace_index(self) -> int | None:
        """Index of the window's workspace; sticky windows are on the active one."""
        if self._window.is_pinned():
            return self._environment.get_active_workspace_index()
        workspace = self._window.get_workspace()
        return workspace.get_number() if workspace else None

    def is_showing_on_workspace(self) -> bool:
        """Mapped on its own workspace: not minimized, not hidden."""
        if self._window.is_minimized():
            return False
        workspace = self._window.get_workspace() or self._environment.active_workspace
        return workspace is not None and self._window.is_visible_on_workspace(workspace)

    def is_maximized_horizontally(self) -> bool:
        return self._window.is_maximized_horizontally()

    def is_maximized_vertically(self) -> bool:
        return self._window.is_maximized_vertically()

    def get_class_group_name(self) -> str | None:
        return self._window.get_class_group_name()

    def get_class_instance_name(self) -> str | None:
        return self._window.get_class_instance_name()


class WindowHandle:
    """Stable reference to a window that may disappear between lookups."""

    def __init__(self, environment: WnckEnvironment, xid: int) -> None:
        self._environment = environment
        self.xid = xid

    def get_window(self) -> TrackedWindow | None:
        """The live window, or None once it has been closed."""
        return self._environment.lookup(self.xid)


class WnckEnvironment(GObject.Object):
    """Window list and change notifications for the intellihide policy."""

    __gsignals__ = {
        "grab-op-begin": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "grab-op-end": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "maximize": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "unmaximize": (GObject.SignalFlags.RUN_FIRST, None, ()),
        # (previous workspace index, new workspace index)
        "switch-workspace": (GObject.SignalFlags.RUN_FIRST, None, (int, int)),
        "restacked": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "monitors-changed": (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    def __init__(
        self,
        screen: Wnck.Screen | None = None,
        gdk_screen: Gdk.Screen | None = None,
        grab_settle_ms: int = GRAB_SETTLE_MS,
    ) -> None:
        super().__init__()
        self._screen = screen or Wnck.Screen.get_default()
        self._gdk_screen = gdk_screen or Gdk.Screen.get_default()
        self._windows: dict[int, Wnck.Window] = {}
        self._window_signals: dict[int, SignalGroup] = {}
        self._signals = SignalGroup()
        self._grab = QuietPeriod(
            quiet_ms=grab_settle_ms,
            on_begin=lambda: self.emit("grab-op-begin"),
            on_end=lambda: self.emit("grab-op-end"),
        )

        self._screen.force_update()
        self._signals.push(
            (self._screen, "window-stacking-changed", self._on_stacking_changed),
            (self._screen, "active-workspace-changed", self._on_workspace_changed),
            (self._screen, "window-opened", self._on_window_opened),
            (self._screen, "window-closed", self._on_window_closed),
        )
        if self._gdk_screen is not None:
            self._signals.push(
                (self._gdk_screen, "monitors-changed", self._on_monitors_changed),
            )

        for window in self._screen.get_windows():
            self._watch(window)

    @property
    def active_workspace(self) -> Wnck.Workspace | None:
        return self._screen.get_active_workspace()

    def get_windows(self) -> list[WindowHandle]:
        """All windows, bottom to top in the current stacking order."""
        return [
            WindowHandle(self, window.get_xid())
            for window in self._screen.get_windows_stacked()
        ]

    def get_active_workspace_index(self) -> int:
        workspace = self._screen.get_active_workspace()
        return workspace.get_number() if workspace else -1

    def get_active_window(self) -> TrackedWindow | None:
        window = self._screen.get_active_window()
        return self.lookup(window.get_xid()) if window else None

    def lookup(self, xid: int) -> TrackedWindow | None:
        window = self._windows.get(xid)
        return TrackedWindow(self, window) if window is not None else None

    def destroy(self) -> None:
        """Disconnect from libwnck/GDK and drop any pending grab end."""
        self._grab.cancel()
        self._signals.disconnect()
        for group in self._window_signals.values():
            group.disconnect()
        self._window_signals.clear()
        self._windows.clear()

    def _watch(self, window: Wnck.Window) -> None:
        xid = window.get_xid()
        if xid in self._windows:
            return
        self._windows[xid] = window
        group = SignalGroup()
        group.push(
            (window, "state-changed", self._on_state_changed),
            (window, "geometry-changed", self._on_geometry_changed),
        )
        self._window_signals[xid] = group

    def _on_window_opened(self, _screen: Wnck.Screen, window: Wnck.Window) -> None:
        self._watch(window)

    def _on_window_closed(self, _screen: Wnck.Screen, window: Wnck.Window) -> None:
        xid = window.get_xid()
        self._windows.pop(xid, None)
        group = self._window_signals.pop(xid, None)
        if group is not None:
            group.disconnect()

    def _on_stacking_changed(self, _screen: Wnck.Screen) -> None:
        self.emit("restacked")

    def _on_workspace_changed(
        self, screen: Wnck.Screen, previous: Wnck.Workspace | None
    ) -> None:
        current = screen.get_active_workspace()
        from_index = previous.get_number() if previous else -1
        to_index = current.get_number() if current else -1
        log.debug("workspace %d -> %d", from_index, to_index)
        self.emit("switch-workspace", from_index, to_index)

    def _on_monitors_changed(self, _gdk_screen: Any) -> None:
        self.emit("monitors-changed")

    def _on_state_changed(
        self,
        window: Wnck.Window,
        changed_mask: Wnck.WindowState,
        new_state: Wnck.WindowState,
    ) -> None:
        maximized = (
            Wnck.WindowState.MAXIMIZED_HORIZONTALLY
            | Wnck.WindowState.MAXIMIZED_VERTICALLY
        )
        if not changed_mask & maximized:
            return
        if new_state & maximized:
            self.emit("maximize")
        else:
            self.emit("unmaximize")

    def _on_geometry_changed(self, window: Wnck.Window) -> None:
        tracked = self.lookup(window.get_xid())
        if tracked is None or tracked.get_window_type() in IGNORED_TYPES:
            return
        self._grab.poke()
