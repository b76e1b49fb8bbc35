"""Application identity -- maps windows to the application owning them.

An application is identified by its desktop id when one can be resolved
from the window's WM_CLASS, otherwise by the lower-cased class name, so
two windows of the same unlisted program still compare equal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from intellihide.log import get_logger
from intellihide.platform.launcher import DESKTOP_SUFFIX, GNOME_APP_PREFIX

if TYPE_CHECKING:
    from intellihide.platform.environment import TrackedWindow, WnckEnvironment
    from intellihide.platform.launcher import Launcher

log = get_logger(name="app_tracker")


def _wm_class_desktop_candidates(class_lower: str) -> list[str]:
    """Generate desktop ID candidates from a lowercased WM_CLASS.

    Handles apps whose WM_CLASS contains spaces (e.g. "mongodb compass",
    "aws vpn client") by trying hyphenated and no-space variants.
    Returns a deduplicated list of candidates to try.
    """
    candidates = [class_lower]
    if " " in class_lower:
        candidates.append(class_lower.replace(" ", "-"))
        candidates.append(class_lower.replace(" ", ""))
    seen: set[str] = set()
    return [c for c in candidates if not (c in seen or seen.add(c))]


class ApplicationTracker:
    """Resolves the focused application and the owner of any window."""

    def __init__(self, environment: WnckEnvironment, launcher: Launcher) -> None:
        self._environment = environment
        self._launcher = launcher
        self._wm_class_to_app: dict[str, str] = {}

    def get_focus_app(self) -> str | None:
        """Application of the active window, None when nothing has focus."""
        return self.get_window_app(self._environment.get_active_window())

    def get_window_app(self, window: TrackedWindow | None) -> str | None:
        """Application owning a window, None for missing or unclassed windows."""
        if window is None:
            return None
        class_group = window.get_class_group_name()
        if not class_group:
            return None

        class_lower = class_group.lower()
        if class_lower in self._wm_class_to_app:
            return self._wm_class_to_app[class_lower]

        app_id = self._resolve(class_group, window.get_class_instance_name())
        self._wm_class_to_app[class_lower] = app_id
        log.debug("window class %r -> %s", class_group, app_id)
        return app_id

    def _resolve(self, class_group: str, class_instance: str | None) -> str:
        """Match a WM_CLASS to a desktop_id, or fall back to the class itself."""
        class_lower = class_group.lower()

        # Try to resolve via Gio: exact, hyphenated, no-spaces variants
        names = _wm_class_desktop_candidates(class_lower)
        if class_instance and class_instance.lower() not in names:
            names.append(class_instance.lower())
        for candidate in names:
            info = self._launcher.resolve(f"{candidate}{DESKTOP_SUFFIX}")
            if info:
                return info.desktop_id

        # Try with org.gnome prefix
        info = self._launcher.resolve(f"{GNOME_APP_PREFIX}{class_group}{DESKTOP_SUFFIX}")
        if info:
            return info.desktop_id

        return class_lower
