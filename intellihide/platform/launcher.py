"""Desktop file resolution via XDG and Gio."""

from __future__ import annotations

import os
from pathlib import Path
from typing import NamedTuple

import gi

gi.require_version("Gio", "2.0")
from gi.repository import Gio, GLib  # noqa: E402

DESKTOP_SUFFIX = ".desktop"
DEFAULT_XDG_DATA_DIRS = "/usr/local/share:/usr/share"
GNOME_APP_PREFIX = "org.gnome."


class DesktopInfo(NamedTuple):
    """Resolved information from a .desktop file."""

    desktop_id: str
    name: str
    wm_class: str


class Launcher:
    """Resolves .desktop files via Gio, falling back to XDG_DATA_DIRS."""

    def __init__(self) -> None:
        self._desktop_dirs = self._get_desktop_dirs()

    def resolve(self, desktop_id: str) -> DesktopInfo | None:
        """Resolve a desktop ID (e.g. 'firefox.desktop') to its info."""
        try:
            app_info = Gio.DesktopAppInfo.new(desktop_id)
        except (TypeError, GLib.Error):
            app_info = None
        if app_info is None:
            # Try searching by filename in XDG dirs
            for d in self._desktop_dirs:
                path = d / desktop_id
                if path.exists():
                    try:
                        app_info = Gio.DesktopAppInfo.new_from_filename(str(path))
                    except (TypeError, GLib.Error):
                        continue
                    break
        if app_info is None:
            return None

        wm_class = app_info.get_startup_wm_class() or ""
        if not wm_class:
            # Fallback: derive from executable name
            commandline = app_info.get_commandline() or ""
            exe = commandline.split()[0] if commandline else ""
            wm_class = (
                Path(exe).name if exe else desktop_id.removesuffix(DESKTOP_SUFFIX)
            )

        return DesktopInfo(
            desktop_id=desktop_id,
            name=app_info.get_display_name() or desktop_id,
            wm_class=wm_class,
        )

    @staticmethod
    def _get_desktop_dirs() -> list[Path]:
        """Get application .desktop file directories from XDG_DATA_DIRS."""
        xdg = os.environ.get("XDG_DATA_DIRS", DEFAULT_XDG_DATA_DIRS)
        dirs = []
        for d in xdg.split(":"):
            p = Path(d) / "applications"
            if p.is_dir():
                dirs.append(p)
        # Also check user-local
        local = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
        user_apps = local / "applications"
        if user_apps.is_dir():
            dirs.insert(0, user_apps)
        return dirs
