"""Bulk signal registration -- connect many handlers, disconnect them at once."""

from __future__ import annotations

from typing import Any, Callable

from intellihide.log import get_logger

log = get_logger(name="signals")

SignalEntry = tuple[Any, str, Callable[..., Any]]


class SignalGroup:
    """Owns (source, signal, handler id) triples for GObject-style sources.

    A source is anything with connect(name, callback) -> id and
    disconnect(id), which covers GObject, Gtk and Wnck objects.
    """

    def __init__(self) -> None:
        self._handlers: list[tuple[Any, str, int]] = []

    def __len__(self) -> int:
        return len(self._handlers)

    def push(self, *entries: SignalEntry) -> None:
        """Connect each (source, signal_name, callback) and remember it."""
        for source, name, callback in entries:
            handler_id = source.connect(name, callback)
            self._handlers.append((source, name, handler_id))
            log.debug("connected %s to %r (id=%s)", name, source, handler_id)

    def disconnect(self) -> None:
        """Disconnect every registration; calling again does nothing."""
        handlers, self._handlers = self._handlers, []
        for source, name, handler_id in handlers:
            source.disconnect(handler_id)
            log.debug("disconnected %s from %r (id=%s)", name, source, handler_id)
