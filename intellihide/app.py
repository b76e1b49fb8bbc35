"""Application entry point -- bootstraps the panel and runs the GTK main loop."""

from __future__ import annotations

import faulthandler
import signal

# Print Python traceback on SIGSEGV/SIGABRT/SIGFPE to stderr.
# Also dumps on SIGUSR1 for on-demand debugging (kill -USR1 <pid>).
faulthandler.enable()
faulthandler.register(signal.SIGUSR1)

import gi  # noqa: E402

gi.require_version("Gtk", "3.0")
from gi.repository import GLib, Gtk  # noqa: E402

from intellihide.core.config import Config  # noqa: E402
from intellihide.core.intellihide import IntellihidePolicy  # noqa: E402
from intellihide.log import get_logger  # noqa: E402
from intellihide.platform.app_tracker import ApplicationTracker  # noqa: E402
from intellihide.platform.environment import WnckEnvironment  # noqa: E402
from intellihide.platform.launcher import Launcher  # noqa: E402
from intellihide.platform.overview import Overview  # noqa: E402
from intellihide.ui.panel_window import PanelWindow  # noqa: E402
from intellihide.ui.slide import SlideController  # noqa: E402

log = get_logger(name="app")


def main() -> None:
    """Entry point for the intellihide panel."""
    config = Config.load()
    window = PanelWindow(config)
    slide = SlideController(window, config)
    window.set_slide_controller(slide)

    overview = Overview()
    window.set_overview(overview)
    # The policy is suspended while the overview is up; the panel stays out
    overview.connect("showing", lambda _overview: slide.show())

    environment = WnckEnvironment(grab_settle_ms=config.grab_settle_ms)
    tracker = ApplicationTracker(environment, Launcher())

    policy: IntellihidePolicy | None = None
    if config.intellihide:
        policy = IntellihidePolicy(
            slide.show,
            slide.hide,
            window,
            environment=environment,
            tracker=tracker,
            overview=overview,
            settle_delay_ms=config.settle_delay_ms,
            poll_interval_ms=config.grab_poll_interval_ms,
        )
        policy.only_active_window(config.only_active_window)
    else:
        log.info("intellihide disabled, panel stays visible")

    # Graceful shutdown on SIGINT/SIGTERM
    GLib.unix_signal_add(GLib.PRIORITY_HIGH, signal.SIGINT, _quit)
    GLib.unix_signal_add(GLib.PRIORITY_HIGH, signal.SIGTERM, _quit)

    window.show_all()
    Gtk.main()

    if policy is not None:
        policy.destroy()
    environment.destroy()


def _quit() -> bool:
    Gtk.main_quit()
    return False
