"""Slide controller -- animates the panel in and out with cubic easing.

show() and hide() are the presentation callbacks handed to the
intellihide policy. Either can arrive mid-animation; the new animation
then starts from the current offset instead of jumping.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from intellihide.core.timers import NO_SOURCE, clear_source
from intellihide.log import get_logger

log = get_logger(name="slide")

import gi  # noqa: E402

gi.require_version("GLib", "2.0")
from gi.repository import GLib  # noqa: E402

if TYPE_CHECKING:
    from intellihide.core.config import Config
    from intellihide.ui.panel_window import PanelWindow

FRAME_INTERVAL_MS = 16  # ~60fps


class SlideState(enum.Enum):
    VISIBLE = "visible"
    HIDING = "hiding"
    HIDDEN = "hidden"
    SHOWING = "showing"


def ease_in_cubic(t: float) -> float:
    """Cubic ease-in: slow start, accelerating."""
    return t * t * t


def ease_out_cubic(t: float) -> float:
    """Cubic ease-out: fast start, decelerating."""
    return 1.0 - (1.0 - t) ** 3


class SlideController:
    """Drives hide_offset between 0.0 (shown) and 1.0 (hidden)."""

    def __init__(self, window: PanelWindow, config: Config) -> None:
        self._window = window
        self._config = config
        self.state = SlideState.VISIBLE
        self.hide_offset: float = 0.0  # 0.0 = fully visible, 1.0 = fully hidden

        self._anim_timer_id: int = NO_SOURCE
        self._anim_progress: float = 0.0

    def show(self) -> None:
        """Slide the panel in."""
        if self.state in (SlideState.VISIBLE, SlideState.SHOWING):
            return
        log.debug("show: state=%s offset=%.2f", self.state.value, self.hide_offset)
        self._set_state(SlideState.SHOWING)
        # Inverse of ease_out: hide_offset = (1 - p)^3
        self._anim_progress = 1.0 - self.hide_offset ** (1.0 / 3.0)
        self._start_animation()

    def hide(self) -> None:
        """Slide the panel out."""
        if self.state in (SlideState.HIDDEN, SlideState.HIDING):
            return
        log.debug("hide: state=%s offset=%.2f", self.state.value, self.hide_offset)
        self._set_state(SlideState.HIDING)
        # Inverse of ease_in: hide_offset = p^3
        self._anim_progress = self.hide_offset ** (1.0 / 3.0)
        self._start_animation()

    def reset(self) -> None:
        """Snap to fully visible without animating."""
        if self._anim_timer_id:
            self._anim_timer_id = clear_source(source_id=self._anim_timer_id)
        self._set_state(SlideState.VISIBLE)
        self.hide_offset = 0.0
        self._window.queue_redraw()

    def _set_state(self, state: SlideState) -> None:
        # Input follows the state so a hidden panel never swallows clicks
        self.state = state
        self._window.update_input_region()

    def _start_animation(self) -> None:
        """Start the animation tick loop."""
        if self._anim_timer_id:
            self._anim_timer_id = clear_source(source_id=self._anim_timer_id)
        self._anim_timer_id = GLib.timeout_add(FRAME_INTERVAL_MS, self._animation_tick)

    # Each frame advances _anim_progress by FRAME_INTERVAL_MS / hide_time_ms,
    # so a full slide takes hide_time_ms however many frames render.
    #
    #   ┌─────────┐  hide()  ┌────────┐  done  ┌────────┐
    #   │ VISIBLE │─────────>│ HIDING │───────>│ HIDDEN │
    #   └─────────┘          └────────┘        └────────┘
    #        ^           show() │  ^ hide()        │
    #        │  done     ┌──────v──┴┐   show()     │
    #        └───────────│ SHOWING  │<─────────────┘
    #                    └──────────┘

    def _animation_tick(self) -> bool:
        """Single animation frame."""
        duration = self._config.hide_time_ms
        step = FRAME_INTERVAL_MS / duration if duration > 0 else 1.0
        self._anim_progress = min(1.0, self._anim_progress + step)

        if self.state == SlideState.HIDING:
            self.hide_offset = ease_in_cubic(t=self._anim_progress)
            if self._anim_progress >= 1.0:
                self._set_state(SlideState.HIDDEN)
                self.hide_offset = 1.0
                self._anim_timer_id = NO_SOURCE
                self._window.queue_redraw()
                return False

        elif self.state == SlideState.SHOWING:
            self.hide_offset = 1.0 - ease_out_cubic(t=self._anim_progress)
            if self._anim_progress >= 1.0:
                self._set_state(SlideState.VISIBLE)
                self.hide_offset = 0.0
                self._anim_timer_id = NO_SOURCE
                self._window.queue_redraw()
                return False

        else:
            self._anim_timer_id = NO_SOURCE
            return False

        self._window.queue_redraw()
        return True
