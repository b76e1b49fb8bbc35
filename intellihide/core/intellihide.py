"""Intellihide policy -- show the panel unless an interesting window overlaps it.

The policy never draws anything. It watches the window environment,
decides "shown" or "hidden" and calls one of two injected callbacks
when that decision changes.

    window event ──> recompute() ──> overlap? ──yes──> hide()
                         ^                   └──no───> show()
                         │
    grab-op-begin ──> poll every 100ms ──┘   (until grab-op-end)

Triggers:
  grab-op-begin            start polling (windows move without events)
  grab-op-end              stop polling, recompute once
  maximize / unmaximize    recompute
  switch-workspace         recompute
  restacked                recompute (open, close, raise)
  monitors-changed         recompute
  overview showing         suspend, the overview owns the panel
  overview hiding          resume, forget status, forced recompute

The target's box is read fresh on every recompute, but a change of the
target alone does not trigger one; the next window event picks it up.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any, Callable

import gi

gi.require_version("GLib", "2.0")
from gi.repository import GLib  # noqa: E402

from intellihide.core.geometry import rect_overlaps  # noqa: E402
from intellihide.core.signals import SignalGroup  # noqa: E402
from intellihide.core.timers import NO_SOURCE, clear_source  # noqa: E402
from intellihide.log import get_logger  # noqa: E402
from intellihide.platform.model import WindowType  # noqa: E402

if TYPE_CHECKING:
    from intellihide.platform.app_tracker import ApplicationTracker
    from intellihide.platform.environment import TrackedWindow, WnckEnvironment
    from intellihide.platform.overview import Overview

log = get_logger(name="intellihide")

# Delay before the first real decision; the window list is not settled
# while the panel is still being created.
SETTLE_DELAY_MS = 200
# Recompute interval while a window is being dragged or resized.
GRAB_POLL_INTERVAL_MS = 100

HANDLED_WINDOW_TYPES = frozenset(
    {
        WindowType.NORMAL,
        WindowType.DIALOG,
        WindowType.MODAL_DIALOG,
        WindowType.TOOLBAR,
        WindowType.MENU,
        WindowType.UTILITY,
        WindowType.SPLASHSCREEN,
    }
)

# The drop-down terminal announces itself as a popup menu, so it is
# matched by WM_CLASS instead of type.
DROPDOWN_TERMINAL_WM_CLASS = "DropDownTerminalWindow"


class VisibilityStatus(enum.Enum):
    SHOWN = "shown"
    HIDDEN = "hidden"
    UNKNOWN = "unknown"


def is_handled_window(window: TrackedWindow) -> bool:
    """Whether the window's type can hide the panel at all.

    Desktops and other docks never do.
    """
    if window.get_class_group_name() == DROPDOWN_TERMINAL_WM_CLASS:
        return True
    return window.get_window_type() in HANDLED_WINDOW_TYPES


class IntellihidePolicy:
    """Calls show()/hide() based on window overlap with target.static_box."""

    def __init__(
        self,
        show: Callable[[], Any],
        hide: Callable[[], Any],
        target: Any,
        *,
        environment: WnckEnvironment,
        tracker: ApplicationTracker,
        overview: Overview,
        settle_delay_ms: int = SETTLE_DELAY_MS,
        poll_interval_ms: int = GRAB_POLL_INTERVAL_MS,
    ) -> None:
        self._show_function = show
        self._hide_function = hide
        self._target = target
        self._environment = environment
        self._tracker = tracker
        self._poll_interval_ms = poll_interval_ms

        self.status = VisibilityStatus.UNKNOWN
        self.suspended = False
        self.focus_app: str | None = None
        self._active_window_only = False

        self._poll_timer_id: int = NO_SOURCE
        self._settle_timer_id: int = NO_SOURCE

        self._signals = SignalGroup()
        self._signals.push(
            (environment, "grab-op-begin", self._on_grab_op_begin),
            (environment, "grab-op-end", self._on_grab_op_end),
            # Keyboard/double-click maximize is not a grab
            (environment, "maximize", self._on_window_event),
            (environment, "unmaximize", self._on_window_event),
            (environment, "switch-workspace", self._on_switch_workspace),
            (environment, "restacked", self._on_window_event),
            (environment, "monitors-changed", self._on_window_event),
            (overview, "showing", self._on_overview_showing),
            (overview, "hiding", self._on_overview_hiding),
        )

        self._show(force=True)
        self._settle_timer_id = GLib.timeout_add(settle_delay_ms, self._on_settled)

    @property
    def active_window_only(self) -> bool:
        return self._active_window_only

    @property
    def polling(self) -> bool:
        return self._poll_timer_id != NO_SOURCE

    def only_active_window(self, active: bool) -> None:
        """Consider only windows of the focused application."""
        self._active_window_only = bool(active)

    def destroy(self) -> None:
        """Disconnect every handler and cancel pending timers."""
        self._signals.disconnect()
        if self._poll_timer_id != NO_SOURCE:
            self._poll_timer_id = clear_source(source_id=self._poll_timer_id)
        if self._settle_timer_id != NO_SOURCE:
            self._settle_timer_id = clear_source(source_id=self._settle_timer_id)

    # -- decision -------------------------------------------------------

    def recompute(self, force: bool = False) -> None:
        """Scan windows and show or hide the panel."""
        if self.suspended:
            return

        if self._any_overlap():
            self._hide(force=force)
        else:
            self._show(force=force)

    def _any_overlap(self) -> bool:
        handles = self._environment.get_windows()
        if not handles:
            return False

        # Without a focused app, the app owning the topmost window stands in
        top_window = handles[-1].get_window()
        self.focus_app = self._tracker.get_focus_app() or (
            self._tracker.get_window_app(top_window) if top_window else None
        )

        workspace_index = self._environment.get_active_workspace_index()
        box = self._target.static_box
        for handle in handles:
            window = handle.get_window()
            if window is None:
                continue
            if not self._is_interesting(window, workspace_index):
                continue
            if rect_overlaps(window.get_geometry(), box):
                log.debug("overlap with %s", window.get_class_group_name())
                return True
        return False

    def _is_interesting(self, window: TrackedWindow, workspace_index: int) -> bool:
        """Whether a window takes part in the overlap test."""
        if not is_handled_window(window):
            return False

        if self._active_window_only:
            if self.focus_app is None:
                return False
            return self._tracker.get_window_app(window) == self.focus_app

        return (
            window.get_workspace_index() == workspace_index
            and window.is_showing_on_workspace()
        )

    def _show(self, force: bool = False) -> None:
        if self.status != VisibilityStatus.SHOWN or force:
            log.debug("show (was %s, force=%s)", self.status.value, force)
            self.status = VisibilityStatus.SHOWN
            self._show_function()

    def _hide(self, force: bool = False) -> None:
        if self.status != VisibilityStatus.HIDDEN or force:
            log.debug("hide (was %s, force=%s)", self.status.value, force)
            self.status = VisibilityStatus.HIDDEN
            self._hide_function()

    # -- event handlers -------------------------------------------------

    def _on_settled(self) -> bool:
        self._settle_timer_id = NO_SOURCE
        self.recompute()
        return False

    def _on_window_event(self, *_args: Any) -> None:
        self.recompute()

    def _on_switch_workspace(self, _source: Any, *_args: Any) -> None:
        # Showing-on-workspace depends on the active workspace
        self.recompute()

    def _on_grab_op_begin(self, *_args: Any) -> None:
        if self._poll_timer_id != NO_SOURCE:
            self._poll_timer_id = clear_source(source_id=self._poll_timer_id)
        log.debug("grab began, polling every %d ms", self._poll_interval_ms)
        self._poll_timer_id = GLib.timeout_add(self._poll_interval_ms, self._on_poll)

    def _on_grab_op_end(self, *_args: Any) -> None:
        if self._poll_timer_id != NO_SOURCE:
            self._poll_timer_id = clear_source(source_id=self._poll_timer_id)
        log.debug("grab ended")
        self.recompute()

    def _on_poll(self) -> bool:
        self.recompute()
        return True

    def _on_overview_showing(self, *_args: Any) -> None:
        log.debug("overview showing, suspended")
        self.suspended = True

    def _on_overview_hiding(self, *_args: Any) -> None:
        # The panel may have been moved while the overview owned it
        self.status = VisibilityStatus.UNKNOWN
        self.suspended = False
        log.debug("overview hidden, resuming")
        self.recompute(force=True)
