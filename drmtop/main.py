#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
# drmtop - per-process GPU usage for Linux

"""Main application module for drmtop."""

from __future__ import annotations

import signal
import sys
from typing import List, Optional

import gi

gi.require_version('Gio', '2.0')

from gi.repository import Gio, GLib

from .constants import APP_ID, MIN_REFRESH_INTERVAL
from .settings import Settings
from .stats.drm import DRMStats
from .stats.drm.detector import VendorCache
from .utils import format_rows


class DrmTopApplication(Gio.Application):
    """Headless application printing GPU usage on a GLib timer."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        super().__init__(
            application_id=APP_ID,
            flags=Gio.ApplicationFlags.NON_UNIQUE
        )

        self.settings = settings if settings is not None else Settings()
        self.stats: Optional[DRMStats] = None
        self.vendors = VendorCache()
        self.interval: int = self.settings.get("refresh_interval")
        self.once = False
        self.refresh_timeout_id: Optional[int] = None

        self._add_options()

    def _add_options(self) -> None:
        """Register command line options."""
        self.add_main_option(
            "interval", ord("d"), GLib.OptionFlags.NONE, GLib.OptionArg.INT,
            "Refresh interval in milliseconds", "MS"
        )
        self.add_main_option(
            "formula", ord("f"), GLib.OptionFlags.NONE, GLib.OptionArg.STRING,
            "Rate formula: divide or multiply", "NAME"
        )
        self.add_main_option(
            "once", ord("1"), GLib.OptionFlags.NONE, GLib.OptionArg.NONE,
            "Print a single sample and exit", None
        )
        self.add_main_option(
            "save", ord("s"), GLib.OptionFlags.NONE, GLib.OptionArg.NONE,
            "Store the given interval and formula as defaults", None
        )

    def do_handle_local_options(self, options: GLib.VariantDict) -> int:
        """Apply command line options before activation.

        Returns:
            -1 to continue startup, or an exit code.
        """
        interval = options.lookup_value("interval", GLib.VariantType.new("i"))
        if interval is not None:
            self.interval = interval.unpack()
        self.interval = max(MIN_REFRESH_INTERVAL, int(self.interval))

        self.once = options.contains("once")

        formula = options.lookup_value("formula", GLib.VariantType.new("s"))
        formula_name = formula.unpack() if formula is not None else None

        try:
            self.stats = DRMStats.from_settings(self.settings, rate_formula=formula_name)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        if options.contains("save"):
            self.settings.set("refresh_interval", self.interval)
            self.settings.set("rate_formula", self.stats.table.rate_formula)
        return -1

    def do_startup(self) -> None:
        Gio.Application.do_startup(self)
        for signum in (signal.SIGINT, signal.SIGTERM):
            GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signum, self._on_signal)

    def do_activate(self) -> None:
        """Take the baseline sample and start the refresh timer."""
        if self.refresh_timeout_id is not None:
            return

        self.hold()
        # First sample only records baselines, rates need two
        self.stats.sample()
        self.refresh_timeout_id = GLib.timeout_add(self.interval, self.on_refresh_timeout)

    def on_refresh_timeout(self) -> bool:
        """Handle refresh timer."""
        rows = self.stats.sample()
        self.print_rows(format_rows(
            rows,
            vendor=self.vendors.get,
            show_idle=self.settings.get("show_idle"),
        ))

        if self.once:
            self.refresh_timeout_id = None
            self.release()
            return False  # Don't repeat
        return True  # Continue timer

    def print_rows(self, lines: List[str]) -> None:
        print('\n'.join(lines), flush=True)
        if not self.once:
            print(flush=True)

    def _on_signal(self) -> bool:
        if self.refresh_timeout_id is not None:
            GLib.source_remove(self.refresh_timeout_id)
            self.refresh_timeout_id = None
        self.quit()
        return False


def main() -> int:
    """Main entry point for the application.

    Returns:
        Exit code from the application.
    """
    app = DrmTopApplication()
    return app.run(sys.argv)


if __name__ == "__main__":
    sys.exit(main())
