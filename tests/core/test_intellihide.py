"""Tests for the intellihide visibility policy."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Callable
from unittest.mock import MagicMock

import pytest

from intellihide.core.geometry import Box, Rect
from intellihide.core.intellihide import (
    DROPDOWN_TERMINAL_WM_CLASS,
    GRAB_POLL_INTERVAL_MS,
    SETTLE_DELAY_MS,
    IntellihidePolicy,
    VisibilityStatus,
    is_handled_window,
)
from intellihide.platform.model import WindowType

ACTIVE_WORKSPACE = 0


class FakeSource:
    """GObject-style signal source: connect/disconnect/emit."""

    def __init__(self) -> None:
        self._next_id = 1
        self.handlers: dict[int, tuple[str, Callable[..., Any]]] = {}

    def connect(self, name: str, callback: Callable[..., Any]) -> int:
        handler_id = self._next_id
        self._next_id += 1
        self.handlers[handler_id] = (name, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        del self.handlers[handler_id]

    def emit(self, name: str, *args: Any) -> None:
        for signal_name, callback in list(self.handlers.values()):
            if signal_name == name:
                callback(self, *args)


class FakeWindow:
    def __init__(
        self,
        rect: Rect,
        window_type: WindowType = WindowType.NORMAL,
        workspace: int | None = ACTIVE_WORKSPACE,
        showing: bool = True,
        wm_class: str = "App",
        app: str | None = "app.desktop",
    ) -> None:
        self.rect = rect
        self.window_type = window_type
        self.workspace = workspace
        self.showing = showing
        self.wm_class = wm_class
        self.app = app

    def get_geometry(self) -> Rect:
        return self.rect

    def get_window_type(self) -> WindowType:
        return self.window_type

    def get_workspace_index(self) -> int | None:
        return self.workspace

    def is_showing_on_workspace(self) -> bool:
        return self.showing

    def get_class_group_name(self) -> str:
        return self.wm_class


class FakeHandle:
    def __init__(self, window: FakeWindow | None) -> None:
        self.window = window

    def get_window(self) -> FakeWindow | None:
        return self.window


class FakeEnvironment(FakeSource):
    def __init__(self) -> None:
        super().__init__()
        self.handles: list[FakeHandle] = []
        self.active_workspace = ACTIVE_WORKSPACE

    def add(self, window: FakeWindow | None) -> FakeWindow | None:
        self.handles.append(FakeHandle(window))
        return window

    def get_windows(self) -> list[FakeHandle]:
        return list(self.handles)

    def get_active_workspace_index(self) -> int:
        return self.active_workspace


class FakeTracker:
    def __init__(self, focus_app: str | None = None) -> None:
        self.focus_app = focus_app

    def get_focus_app(self) -> str | None:
        return self.focus_app

    def get_window_app(self, window: FakeWindow | None) -> str | None:
        return window.app if window is not None else None


OVERLAPPING = Rect(10, 10, 20, 20)
ELSEWHERE = Rect(200, 200, 20, 20)


@pytest.fixture
def env():
    return FakeEnvironment()


@pytest.fixture
def overview():
    return FakeSource()


@pytest.fixture
def make_policy(fake_glib, env, overview):
    """Build a policy against the fakes; settle=True runs the startup timer."""

    def _make(tracker=None, settle=True, active_only=False):
        show = MagicMock(name="show")
        hide = MagicMock(name="hide")
        target = SimpleNamespace(static_box=Box(0, 0, 100, 50))
        policy = IntellihidePolicy(
            show,
            hide,
            target,
            environment=env,
            tracker=tracker or FakeTracker(),
            overview=overview,
        )
        policy.only_active_window(active_only)
        if settle:
            fake_glib.advance(SETTLE_DELAY_MS)
        return policy, show, hide, target

    return _make


class TestConstruction:
    def test_forces_show_immediately(self, make_policy):
        # Given / When
        policy, show, hide, _target = make_policy(settle=False)
        # Then
        show.assert_called_once()
        hide.assert_not_called()
        assert policy.status == VisibilityStatus.SHOWN

    def test_schedules_one_settle_recompute(self, make_policy, fake_glib, env):
        # Given
        env.add(FakeWindow(OVERLAPPING))
        policy, show, hide, _target = make_policy(settle=False)
        assert len(fake_glib.sources) == 1
        # When
        fake_glib.advance(SETTLE_DELAY_MS - 1)
        # Then -- not yet
        hide.assert_not_called()
        # When
        fake_glib.advance(1)
        # Then -- one-shot, fired once, not re-armed
        hide.assert_called_once()
        assert policy.status == VisibilityStatus.HIDDEN
        assert fake_glib.sources == {}

    def test_subscribes_to_all_sources(self, make_policy, env, overview):
        # Given / When
        make_policy()
        # Then
        env_signals = sorted(name for name, _cb in env.handlers.values())
        assert env_signals == sorted(
            [
                "grab-op-begin",
                "grab-op-end",
                "maximize",
                "unmaximize",
                "switch-workspace",
                "restacked",
                "monitors-changed",
            ]
        )
        assert sorted(name for name, _cb in overview.handlers.values()) == [
            "hiding",
            "showing",
        ]


class TestOverlapDecision:
    def test_no_windows_shows(self, make_policy):
        # Given / When
        policy, show, hide, _target = make_policy()
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        hide.assert_not_called()

    def test_overlapping_window_hides_then_moving_away_shows(self, make_policy, env):
        # Given
        window = env.add(FakeWindow(OVERLAPPING))
        policy, show, hide, _target = make_policy()
        assert policy.status == VisibilityStatus.HIDDEN
        # When
        window.rect = ELSEWHERE
        env.emit("restacked")
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        assert show.call_count == 2  # forced at start + transition
        hide.assert_called_once()

    def test_touching_edge_does_not_hide(self, make_policy, env):
        # Given -- window top edge sits exactly on the target's bottom edge
        env.add(FakeWindow(Rect(0, 50, 100, 100)))
        # When
        policy, _show, hide, _target = make_policy()
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        hide.assert_not_called()

    def test_uninteresting_overlap_does_not_matter(self, make_policy, env):
        # Given -- one interesting and one DOCK window, both overlapping
        env.add(FakeWindow(OVERLAPPING, window_type=WindowType.DOCK))
        normal = env.add(FakeWindow(OVERLAPPING))
        policy, _show, _hide, _target = make_policy()
        assert policy.status == VisibilityStatus.HIDDEN
        # When -- the interesting one closes
        env.handles = [h for h in env.handles if h.window is not normal]
        env.emit("restacked")
        # Then
        assert policy.status == VisibilityStatus.SHOWN

    def test_unresolved_handles_are_skipped(self, make_policy, env):
        # Given
        env.add(None)
        env.add(FakeWindow(ELSEWHERE))
        # When
        policy, _show, hide, _target = make_policy()
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        hide.assert_not_called()

    def test_window_on_other_workspace_is_ignored(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING, workspace=1))
        # When
        policy, _show, _hide, _target = make_policy()
        # Then
        assert policy.status == VisibilityStatus.SHOWN

    def test_minimized_window_is_ignored(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING, showing=False))
        # When
        policy, _show, _hide, _target = make_policy()
        # Then
        assert policy.status == VisibilityStatus.SHOWN

    def test_workspace_switch_reevaluates(self, make_policy, env):
        # Given -- overlapping window lives on workspace 1
        env.add(FakeWindow(OVERLAPPING, workspace=1))
        policy, _show, hide, _target = make_policy()
        assert policy.status == VisibilityStatus.SHOWN
        # When
        env.active_workspace = 1
        env.emit("switch-workspace", 0, 1)
        # Then
        assert policy.status == VisibilityStatus.HIDDEN
        hide.assert_called_once()

    def test_target_box_is_read_on_every_recompute(self, make_policy, env):
        # Given
        env.add(FakeWindow(ELSEWHERE))
        policy, _show, _hide, target = make_policy()
        # When -- the target moves under the window, nothing fires yet
        target.static_box = Box(190, 190, 300, 300)
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        # When -- the next window event picks the new box up
        env.emit("monitors-changed")
        # Then
        assert policy.status == VisibilityStatus.HIDDEN

    @pytest.mark.parametrize(
        "signal_name", ["maximize", "unmaximize", "restacked", "monitors-changed"]
    )
    def test_window_events_recompute(self, make_policy, env, signal_name):
        # Given
        policy, _show, _hide, _target = make_policy()
        env.add(FakeWindow(OVERLAPPING))
        # When
        env.emit(signal_name)
        # Then
        assert policy.status == VisibilityStatus.HIDDEN


class TestEdgeTriggering:
    def test_repeated_show_decisions_fire_once(self, make_policy, env):
        # Given
        env.add(FakeWindow(ELSEWHERE))
        policy, show, _hide, _target = make_policy()
        show.reset_mock()
        # When
        env.emit("restacked")
        env.emit("maximize")
        policy.recompute()
        # Then
        show.assert_not_called()

    def test_repeated_hide_decisions_fire_once(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING))
        _policy, _show, hide, _target = make_policy()
        # When
        env.emit("restacked")
        env.emit("unmaximize")
        # Then
        hide.assert_called_once()

    def test_forced_recompute_fires_even_when_unchanged(self, make_policy):
        # Given
        policy, show, _hide, _target = make_policy()
        show.reset_mock()
        # When
        policy.recompute(force=True)
        # Then
        show.assert_called_once()
        assert policy.status == VisibilityStatus.SHOWN


class TestWindowClassification:
    @pytest.mark.parametrize("window_type", [WindowType.DOCK, WindowType.DESKTOP])
    def test_dock_and_desktop_never_interesting(self, make_policy, env, window_type):
        # Given
        env.add(FakeWindow(OVERLAPPING, window_type=window_type))
        # When
        policy, _show, hide, _target = make_policy()
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        hide.assert_not_called()

    @pytest.mark.parametrize(
        "window_type",
        [
            WindowType.NORMAL,
            WindowType.DIALOG,
            WindowType.MODAL_DIALOG,
            WindowType.TOOLBAR,
            WindowType.MENU,
            WindowType.UTILITY,
            WindowType.SPLASHSCREEN,
        ],
    )
    def test_handled_types(self, window_type):
        # Given
        window = FakeWindow(OVERLAPPING, window_type=window_type)
        # When / Then
        assert is_handled_window(window) is True

    @pytest.mark.parametrize(
        "window_type",
        [
            WindowType.DESKTOP,
            WindowType.DOCK,
            WindowType.POPUP_MENU,
            WindowType.TOOLTIP,
            WindowType.NOTIFICATION,
            WindowType.DND,
        ],
    )
    def test_unhandled_types(self, window_type):
        # Given
        window = FakeWindow(OVERLAPPING, window_type=window_type)
        # When / Then
        assert is_handled_window(window) is False

    def test_dropdown_terminal_is_always_handled(self, make_policy, env):
        # Given -- the drop-down terminal reports itself as a popup menu
        window = FakeWindow(
            OVERLAPPING,
            window_type=WindowType.POPUP_MENU,
            wm_class=DROPDOWN_TERMINAL_WM_CLASS,
        )
        env.add(window)
        # When
        policy, _show, _hide, _target = make_policy()
        # Then
        assert is_handled_window(window) is True
        assert policy.status == VisibilityStatus.HIDDEN


class TestActiveWindowOnly:
    def test_other_app_window_is_ignored(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING, app="firefox.desktop"))
        tracker = FakeTracker(focus_app="code.desktop")
        # When
        policy, _show, hide, _target = make_policy(tracker=tracker, active_only=True)
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        hide.assert_not_called()

    def test_focused_app_window_hides(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING, app="code.desktop"))
        tracker = FakeTracker(focus_app="code.desktop")
        # When
        policy, _show, _hide, _target = make_policy(tracker=tracker, active_only=True)
        # Then
        assert policy.status == VisibilityStatus.HIDDEN
        assert policy.focus_app == "code.desktop"

    def test_workspace_is_not_checked_in_active_mode(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING, workspace=3, showing=False, app="code.desktop"))
        tracker = FakeTracker(focus_app="code.desktop")
        # When
        policy, _show, _hide, _target = make_policy(tracker=tracker, active_only=True)
        # Then
        assert policy.status == VisibilityStatus.HIDDEN

    def test_falls_back_to_topmost_window_app(self, make_policy, env):
        # Given -- nothing focused; the top window belongs to "term"
        env.add(FakeWindow(OVERLAPPING, app="editor.desktop"))
        env.add(FakeWindow(ELSEWHERE, app="term.desktop"))
        # When
        policy, _show, _hide, _target = make_policy(
            tracker=FakeTracker(), active_only=True
        )
        # Then
        assert policy.focus_app == "term.desktop"
        assert policy.status == VisibilityStatus.SHOWN

    def test_no_focus_and_no_topmost_excludes_everything(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING, app=None))
        env.add(None)
        # When
        policy, _show, hide, _target = make_policy(
            tracker=FakeTracker(), active_only=True
        )
        # Then
        assert policy.focus_app is None
        assert policy.status == VisibilityStatus.SHOWN
        hide.assert_not_called()

    def test_toggle_at_runtime(self, make_policy, env):
        # Given
        env.add(FakeWindow(OVERLAPPING, app="firefox.desktop"))
        policy, _show, _hide, _target = make_policy(
            tracker=FakeTracker(focus_app="code.desktop")
        )
        assert policy.status == VisibilityStatus.HIDDEN
        # When
        policy.only_active_window(True)
        env.emit("restacked")
        # Then
        assert policy.active_window_only is True
        assert policy.status == VisibilityStatus.SHOWN


class TestOverviewSuspension:
    def test_events_while_suspended_fire_nothing(self, make_policy, env, overview):
        # Given
        policy, show, hide, _target = make_policy()
        show.reset_mock()
        env.add(FakeWindow(OVERLAPPING))
        # When
        overview.emit("showing")
        for name in ("restacked", "maximize", "monitors-changed", "grab-op-end"):
            env.emit(name)
        policy.recompute(force=True)
        # Then
        assert policy.suspended is True
        show.assert_not_called()
        hide.assert_not_called()

    def test_exit_forces_callback_even_when_unchanged(self, make_policy, overview):
        # Given -- shown before, still shown after
        policy, show, _hide, _target = make_policy()
        overview.emit("showing")
        show.reset_mock()
        # When
        overview.emit("hiding")
        # Then
        assert policy.suspended is False
        show.assert_called_once()
        assert policy.status == VisibilityStatus.SHOWN

    def test_exit_hides_when_window_overlaps(self, make_policy, env, overview):
        # Given
        env.add(FakeWindow(OVERLAPPING))
        policy, _show, hide, _target = make_policy()
        overview.emit("showing")
        hide.reset_mock()
        # When
        overview.emit("hiding")
        # Then
        hide.assert_called_once()
        assert policy.status == VisibilityStatus.HIDDEN


class TestGrabPolling:
    def test_begin_starts_polling_without_recompute(
        self, make_policy, env, fake_glib, monkeypatch
    ):
        # Given
        policy, _show, _hide, _target = make_policy()
        recompute = MagicMock()
        monkeypatch.setattr(policy, "recompute", recompute)
        # When
        env.emit("grab-op-begin")
        # Then
        recompute.assert_not_called()
        assert policy.polling is True
        assert len(fake_glib.sources) == 1

    def test_poll_tracks_window_during_drag(self, make_policy, env, fake_glib):
        # Given
        window = env.add(FakeWindow(ELSEWHERE))
        policy, _show, hide, _target = make_policy()
        env.emit("grab-op-begin")
        # When -- the window is dragged over the panel, no discrete event
        window.rect = OVERLAPPING
        fake_glib.advance(GRAB_POLL_INTERVAL_MS)
        # Then
        hide.assert_called_once()
        # When -- and away again on a later tick
        window.rect = ELSEWHERE
        fake_glib.advance(GRAB_POLL_INTERVAL_MS)
        # Then
        assert policy.status == VisibilityStatus.SHOWN
        assert policy.polling is True

    def test_second_begin_replaces_timer(self, make_policy, env, fake_glib):
        # Given
        make_policy()
        env.emit("grab-op-begin")
        (first_id,) = fake_glib.sources
        # When
        env.emit("grab-op-begin")
        # Then
        assert len(fake_glib.sources) == 1
        assert first_id in fake_glib.removed
        assert first_id not in fake_glib.sources

    def test_end_stops_polling_and_recomputes_once(
        self, make_policy, env, fake_glib, monkeypatch
    ):
        # Given
        policy, _show, _hide, _target = make_policy()
        env.emit("grab-op-begin")
        recompute = MagicMock()
        monkeypatch.setattr(policy, "recompute", recompute)
        # When
        env.emit("grab-op-end")
        fake_glib.advance(10 * GRAB_POLL_INTERVAL_MS)
        # Then
        recompute.assert_called_once_with()
        assert fake_glib.sources == {}
        assert policy.polling is False

    def test_end_without_begin_is_safe(self, make_policy, env, fake_glib):
        # Given
        env.add(FakeWindow(OVERLAPPING))
        policy, _show, _hide, _target = make_policy()
        # When
        env.emit("grab-op-end")
        env.emit("grab-op-end")
        # Then
        assert fake_glib.removed == []
        assert policy.status == VisibilityStatus.HIDDEN


class TestDestroy:
    def test_disconnects_everything(self, make_policy, env, overview):
        # Given
        policy, show, hide, _target = make_policy()
        # When
        policy.destroy()
        # Then
        assert env.handlers == {}
        assert overview.handlers == {}

    def test_cancels_poll_timer(self, make_policy, env, fake_glib):
        # Given
        policy, _show, _hide, _target = make_policy()
        env.emit("grab-op-begin")
        # When
        policy.destroy()
        # Then
        assert fake_glib.sources == {}
        assert policy.polling is False

    def test_cancels_pending_settle_timer(self, make_policy, fake_glib):
        # Given
        policy, _show, hide, _target = make_policy(settle=False)
        # When
        policy.destroy()
        fake_glib.advance(SETTLE_DELAY_MS)
        # Then
        assert fake_glib.sources == {}
        hide.assert_not_called()

    def test_destroy_twice_is_safe(self, make_policy, env, fake_glib):
        # Given
        policy, _show, _hide, _target = make_policy()
        env.emit("grab-op-begin")
        policy.destroy()
        # When
        policy.destroy()
        # Then
        assert len(fake_glib.removed) == 1
