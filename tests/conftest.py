"""Shared test setup: optional PyGObject and a deterministic GLib timer loop."""

from __future__ import annotations

import sys
from types import SimpleNamespace
from typing import Callable
from unittest.mock import MagicMock

import pytest

# Use the real bindings when PyGObject and the Wnck/Gtk typelibs are all
# present; otherwise replace gi wholesale so pure-logic modules still import.
try:
    import gi

    gi.require_version("Gtk", "3.0")
    gi.require_version("Gdk", "3.0")
    gi.require_version("Wnck", "3.0")
    from gi.repository import Gdk, GObject, Gtk, Wnck  # noqa: F401
except (ImportError, ValueError):
    gi_mock = MagicMock()
    gi_mock.require_version = MagicMock()
    sys.modules["gi"] = gi_mock
    sys.modules["gi.repository"] = gi_mock.repository


class FakeGLib:
    """Stand-in for GLib timeouts driven by an explicit clock.

    timeout_add/source_remove behave like GLib's: callbacks returning a
    truthy value are re-armed, falsy ones are dropped.
    """

    def __init__(self) -> None:
        self.now = 0
        self._next_id = 1
        self.sources: dict[int, tuple[int, int, Callable[[], bool]]] = {}
        self.removed: list[int] = []
        self.MainContext = SimpleNamespace(default=lambda: self)

    # GLib API -------------------------------------------------------------

    def timeout_add(self, interval: int, callback: Callable[[], bool]) -> int:
        source_id = self._next_id
        self._next_id += 1
        self.sources[source_id] = (self.now + interval, interval, callback)
        return source_id

    def source_remove(self, source_id: int) -> bool:
        if source_id not in self.sources:
            raise AssertionError(f"source {source_id} removed twice")
        del self.sources[source_id]
        self.removed.append(source_id)
        return True

    def find_source_by_id(self, source_id: int) -> object | None:
        return self.sources.get(source_id)

    # Test driving ---------------------------------------------------------

    def advance(self, ms: int) -> None:
        """Move the clock forward, firing due callbacks in deadline order."""
        target = self.now + ms
        while True:
            due = [
                (deadline, source_id)
                for source_id, (deadline, _i, _cb) in self.sources.items()
                if deadline <= target
            ]
            if not due:
                break
            deadline, source_id = min(due)
            self.now = deadline
            _deadline, interval, callback = self.sources[source_id]
            keep = callback()
            if source_id not in self.sources:
                continue
            if keep:
                self.sources[source_id] = (self.now + interval, interval, callback)
            else:
                del self.sources[source_id]
        self.now = target


@pytest.fixture
def fake_glib(monkeypatch) -> FakeGLib:
    """Patch every module that schedules GLib timeouts with one fake loop."""
    import intellihide.core.intellihide as intellihide_mod
    import intellihide.core.timers as timers_mod
    import intellihide.ui.slide as slide_mod

    glib = FakeGLib()
    for module in (timers_mod, intellihide_mod, slide_mod):
        monkeypatch.setattr(module, "GLib", glib)
    return glib
