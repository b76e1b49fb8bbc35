"""Configuration loading and defaults for the intellihide panel."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from intellihide.core.position import Position
from intellihide.log import get_logger

log = get_logger(name="config")

DEFAULT_CONFIG_DIR = (
    Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "intellihide"
)
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "intellihide.json"

# Fields that must be JSON booleans; "false" as a string would be truthy
_BOOL_FIELDS = ("intellihide", "only_active_window")
# Fields that must stay positive; zero or negative means "use default"
_POSITIVE_INT_FIELDS = (
    "panel_thickness",
    "settle_delay_ms",
    "grab_poll_interval_ms",
    "grab_settle_ms",
    "hide_time_ms",
)
# 0 is meaningful here (span the whole edge)
_NON_NEGATIVE_INT_FIELDS = ("panel_length",)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Config:
    """Panel configuration with sensible defaults."""

    # Whether overlapping windows hide the panel at all
    intellihide: bool = True
    # Only windows of the focused application can hide the panel
    only_active_window: bool = False
    # Screen edge where the panel is placed
    position: str = "bottom"
    # Cross-axis size of the panel in pixels
    panel_thickness: int = 48
    # Main-axis size in pixels; 0 spans the whole edge
    panel_length: int = 0
    # Delay before the first decision after startup
    settle_delay_ms: int = 200
    # Recompute interval while a window is dragged or resized
    grab_poll_interval_ms: int = 100
    # Quiet time after the last geometry change that ends a drag/resize
    grab_settle_ms: int = 250
    # Duration of the hide/show slide animation in ms
    hide_time_ms: int = 250

    @property
    def pos(self) -> Position:
        """Position as enum."""
        return Position(self.position)

    @classmethod
    def load(cls, path: Path | str | None = None) -> Config:
        """Load config from JSON file, falling back to defaults for missing keys.

        The file is only read; a missing or unreadable file yields defaults.
        """
        path = Path(path) if path else DEFAULT_CONFIG_FILE
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data: dict[str, Any] = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            log.warning("Ignoring unreadable config %s: %s", path, exc)
            return cls()
        if not isinstance(data, dict):
            log.warning("Ignoring config %s: expected a JSON object", path)
            return cls()

        valid_fields = {f.name for f in fields(cls)}
        filtered = {k: v for k, v in data.items() if k in valid_fields}
        config = cls(**filtered)
        # Validate position (fallback to default if unknown)
        try:
            Position(config.position)
        except ValueError:
            config.position = Position.BOTTOM.value
        defaults = cls()
        for name in _BOOL_FIELDS:
            if not isinstance(getattr(config, name), bool):
                log.warning("Config %s must be true or false, using default", name)
                setattr(config, name, getattr(defaults, name))
        for name in _POSITIVE_INT_FIELDS:
            value = getattr(config, name)
            if not _is_int(value) or value <= 0:
                setattr(config, name, getattr(defaults, name))
        for name in _NON_NEGATIVE_INT_FIELDS:
            value = getattr(config, name)
            if not _is_int(value) or value < 0:
                setattr(config, name, getattr(defaults, name))
        return config
