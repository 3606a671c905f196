#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
nightlight-toggle (GUI) - Night Light Toggle

Provides quick access to GNOME's built-in Night Light feature from the panel.
Runs as a background application with a system tray status icon: click the
icon to toggle Night Light on/off instantly, right-click for preferences.
"""

import logging
import signal
import subprocess
import sys
from pathlib import Path

# --- Gtk and Core Library Imports ---
try:
    import gi
    gi.require_version("Gtk", "3.0")
    gi.require_version("GdkPixbuf", "2.0")
    from gi.repository import GdkPixbuf, GLib, Gtk
except (ImportError, ValueError):
    print("FATAL: Gtk3 bindings are not installed or configured correctly.", file=sys.stderr)
    print("On Debian/Ubuntu, try: sudo apt install python3-gi gir1.2-gtk-3.0", file=sys.stderr)
    sys.exit(1)

try:
    import nightlight_toggle_core as core
    from nightlight_toggle_core import exceptions as core_exc
    from nightlight_toggle_core.gio_settings import GioSettingsStore, watch_file
    from nightlight_toggle_core.shell_eval import ShellEvalHost
except ImportError as e:
    print(f"FATAL: nightlight_toggle_core library not found: {e}", file=sys.stderr)
    print("Please ensure nightlight_toggle_core is installed or available in your Python path.", file=sys.stderr)
    sys.exit(1)

log = logging.getLogger("nightlight_toggle_gui")

# --- Constants ---
PREFS_SCRIPT_PATH = Path(__file__).resolve().parent / "nightlight_toggle_prefs.py"
ICON_SIZE_PX = 22


def _with_opacity(pixbuf, opacity):
    """Returns a copy of `pixbuf` composited onto transparency at `opacity` (0-255)."""
    if opacity >= 255:
        return pixbuf
    width, height = pixbuf.get_width(), pixbuf.get_height()
    faded = GdkPixbuf.Pixbuf.new(GdkPixbuf.Colorspace.RGB, True, 8, width, height)
    faded.fill(0x00000000)
    pixbuf.composite(faded, 0, 0, width, height, 0, 0, 1.0, 1.0, GdkPixbuf.InterpType.BILINEAR, opacity)
    return faded


class StatusIconView(core.IndicatorView):
    """Draws the indicator as a Gtk.StatusIcon."""

    def __init__(self, name, on_activate, on_popup_menu):
        self.status_icon = Gtk.StatusIcon()
        self.status_icon.set_name(name)
        self.status_icon.set_title(core.INDICATOR_NAME)
        self.handler_ids = [
            self.status_icon.connect("activate", lambda _icon: on_activate()),
            self.status_icon.connect("popup-menu", on_popup_menu),
        ]
        try:
            self.base_pixbuf = Gtk.IconTheme.get_default().load_icon(
                core.ICON_NAME, ICON_SIZE_PX, Gtk.IconLookupFlags.FORCE_SIZE
            )
        except GLib.Error as e:
            log.warning(f"Icon '{core.ICON_NAME}' not found in the icon theme ({e.message}); opacity will not be shown.")
            self.base_pixbuf = None
            self.status_icon.set_from_icon_name(core.ICON_NAME)

    def set_opacity(self, opacity):
        if self.base_pixbuf is not None:
            self.status_icon.set_from_pixbuf(_with_opacity(self.base_pixbuf, opacity))
        enabled = opacity == core.OPACITY_ENABLED
        self.status_icon.set_tooltip_text("Night Light On" if enabled else "Night Light Off")

    def set_visible(self, visible):
        self.status_icon.set_visible(visible)

    def destroy(self):
        for handler_id in self.handler_ids:
            self.status_icon.disconnect(handler_id)
        self.handler_ids = []
        self.status_icon.set_visible(False)


class TrayStatusArea(core.StatusArea):
    """Status area made of tray icons, one per registered indicator."""

    def __init__(self, app):
        self.app = app
        self.views = {}

    def add(self, uuid, indicator):
        if uuid in self.views:
            raise ValueError(f"An indicator is already registered as '{uuid}'.")
        view = StatusIconView(uuid, indicator.activate, self.app.on_icon_right_click)
        indicator.attach_view(view)
        self.views[uuid] = view
        log.debug(f"Registered tray indicator '{uuid}'")

    def remove(self, uuid):
        if self.views.pop(uuid, None) is None:
            log.warning(f"No tray indicator registered as '{uuid}'.")


class Application:
    """The main application class, handles lifecycle and status icon."""

    def __init__(self):
        self.right_click_menu = None
        self.config_monitor = None
        self.status_area = TrayStatusArea(self)

        color_settings = GioSettingsStore(core.COLOR_SCHEMA)
        self.extension_settings = core.IniSettingsStore()
        self.extension = core.NightLightExtension(
            color_settings,
            self.extension_settings,
            self.status_area,
            shell_host=ShellEvalHost(),
        )

    def _build_right_click_menu(self):
        menu = Gtk.Menu()

        prefs_item = Gtk.MenuItem(label="Preferences")
        prefs_item.connect("activate", self.on_menu_prefs_clicked)
        menu.append(prefs_item)

        # --- Separator and Quit ---
        menu.append(Gtk.SeparatorMenuItem())
        quit_item = Gtk.MenuItem(label="Exit")
        quit_item.connect("activate", self.on_quit_activate)
        menu.append(quit_item)

        menu.show_all()
        return menu

    def on_icon_right_click(self, icon, button, activate_time):
        if not self.right_click_menu:
            self.right_click_menu = self._build_right_click_menu()
        self.right_click_menu.popup(None, None, Gtk.StatusIcon.position_menu, icon, button, activate_time)

    def on_menu_prefs_clicked(self, widget):
        try:
            subprocess.Popen([sys.executable, str(PREFS_SCRIPT_PATH)])
        except (FileNotFoundError, OSError) as e:
            log.error(f"Could not open preferences: {e}")

    def on_quit_activate(self, widget):
        self.quit()

    def _on_config_file_changed(self):
        try:
            self.extension_settings.reload()
        except core_exc.ConfigError as e:
            log.error(f"Ignoring unreadable config.ini: {e}")

    def _on_unix_signal(self):
        log.info("Termination signal received.")
        self.quit()
        return GLib.SOURCE_REMOVE

    def run(self):
        self.extension.activate()
        self.config_monitor = watch_file(self.extension_settings.config_file, self._on_config_file_changed)
        for signum in (signal.SIGINT, signal.SIGTERM):
            GLib.unix_signal_add(GLib.PRIORITY_DEFAULT, signum, self._on_unix_signal)
        Gtk.main()

    def quit(self):
        self.extension.deactivate()
        if self.config_monitor:
            self.config_monitor.cancel()
            self.config_monitor = None
        Gtk.main_quit()


def show_error_dialog(title, message):
    dialog = Gtk.MessageDialog(transient_for=None, flags=0, message_type=Gtk.MessageType.ERROR, buttons=Gtk.ButtonsType.OK, text=title)
    dialog.format_secondary_text(str(message))
    dialog.run()
    dialog.destroy()


def main():
    try:
        log_level = core.get_log_level(core.ConfigManager().load_config())
    except core_exc.ConfigError as e:
        print(f"WARNING: {e}", file=sys.stderr)
        log_level = logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(name)s: %(message)s")

    try:
        app = Application()
        app.run()
    except core_exc.NightLightToggleError as e:
        log.error(f"Cannot start Night Light Toggle: {e}")
        show_error_dialog("Initialization Error", f"Could not start Night Light Toggle.\n\nDetails: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
