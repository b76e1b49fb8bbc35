"""GLib timeout helpers shared by the policy and the window environment."""

from __future__ import annotations

from typing import Callable

import gi

gi.require_version("GLib", "2.0")
from gi.repository import GLib  # noqa: E402

from intellihide.log import get_logger  # noqa: E402

log = get_logger(name="timers")

# Source ids handed out by GLib are always positive.
NO_SOURCE = 0


def source_exists(source_id: int) -> bool:
    """Return True when a GLib source id is still active."""
    if source_id <= NO_SOURCE:
        return False
    try:
        ctx = GLib.MainContext.default()
        return bool(ctx and ctx.find_source_by_id(source_id))
    except Exception as exc:
        log.debug("Could not query GLib source id %s: %s", source_id, exc)
        # If runtime doesn't expose the check, fall back to best effort.
        return True


def clear_source(source_id: int) -> int:
    """Safely remove a GLib source if it still exists and return NO_SOURCE."""
    if source_exists(source_id=source_id):
        GLib.source_remove(source_id)
    return NO_SOURCE


class QuietPeriod:
    """Turns a burst of pokes into one begin/end pair.

    The first poke() calls on_begin. Every poke re-arms a one-shot timer;
    when quiet_ms pass without a poke, on_end runs once and the next poke
    starts a new burst.
    """

    def __init__(
        self,
        quiet_ms: int,
        on_begin: Callable[[], None],
        on_end: Callable[[], None],
    ) -> None:
        self._quiet_ms = quiet_ms
        self._on_begin = on_begin
        self._on_end = on_end
        self._timer_id: int = NO_SOURCE

    @property
    def active(self) -> bool:
        return self._timer_id != NO_SOURCE

    def poke(self) -> None:
        if self._timer_id == NO_SOURCE:
            self._on_begin()
        else:
            self._timer_id = clear_source(source_id=self._timer_id)
        self._timer_id = GLib.timeout_add(self._quiet_ms, self._expire)

    def cancel(self) -> None:
        """Drop a pending end without reporting it."""
        if self._timer_id != NO_SOURCE:
            self._timer_id = clear_source(source_id=self._timer_id)

    def _expire(self) -> bool:
        self._timer_id = NO_SOURCE
        self._on_end()
        return False
