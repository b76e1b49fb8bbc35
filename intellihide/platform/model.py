"""Window vocabulary shared by the environment and the policy."""

from __future__ import annotations

import enum


class WindowType(enum.IntEnum):
    """Window types in the compositor's ordinal order (_NET_WM_WINDOW_TYPE)."""

    NORMAL = 0
    DESKTOP = 1
    DOCK = 2
    DIALOG = 3
    MODAL_DIALOG = 4
    TOOLBAR = 5
    MENU = 6
    UTILITY = 7
    SPLASHSCREEN = 8
    DROPDOWN_MENU = 9
    POPUP_MENU = 10
    TOOLTIP = 11
    NOTIFICATION = 12
    COMBO = 13
    DND = 14
    OVERRIDE_OTHER = 15

    @classmethod
    def from_nick(cls, nick: str) -> WindowType:
        """Map a libwnck/GDK enum nick ("normal", "modal-dialog", ...) to a member.

        Unknown nicks become OVERRIDE_OTHER, which no filter ever handles.
        """
        key = nick.replace("-", "_").upper()
        # GDK spells it "splashscreen", older libwnck "splash-screen"
        if key == "SPLASH_SCREEN":
            key = "SPLASHSCREEN"
        try:
            return cls[key]
        except KeyError:
            return cls.OVERRIDE_OTHER
