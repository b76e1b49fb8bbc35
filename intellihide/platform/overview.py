"""Overview -- an exclusive mode that takes the panel away from intellihide."""

from __future__ import annotations

import gi

gi.require_version("GObject", "2.0")
from gi.repository import GObject  # noqa: E402

from intellihide.log import get_logger  # noqa: E402

log = get_logger(name="overview")


class Overview(GObject.Object):
    """Emits 'showing' on enter and 'hiding' on exit, once per change."""

    __gsignals__ = {
        "showing": (GObject.SignalFlags.RUN_FIRST, None, ()),
        "hiding": (GObject.SignalFlags.RUN_FIRST, None, ()),
    }

    def __init__(self) -> None:
        super().__init__()
        self._visible = False

    @property
    def visible(self) -> bool:
        return self._visible

    def show(self) -> None:
        if self._visible:
            return
        self._visible = True
        log.debug("overview showing")
        self.emit("showing")

    def hide(self) -> None:
        if not self._visible:
            return
        self._visible = False
        log.debug("overview hiding")
        self.emit("hiding")

    def toggle(self) -> None:
        if self._visible:
            self.hide()
        else:
            self.show()
