#!/usr/bin/env python3

"""
nightlight-toggle-prefs - Night Light Toggle Preferences

A small GTK3 window for the Night Light color temperature and the
extension's own settings. Every control is bound live to its settings key,
so changes made elsewhere (the tray icon, GNOME Settings) show up here.
"""

import logging
import sys

# --- GTK and Core Library Imports ---
try:
    import gi
    gi.require_version("Gtk", "3.0")
    from gi.repository import Gtk
except (ImportError, ValueError) as e:
    print("FATAL: GTK3 bindings are not installed or configured correctly.", file=sys.stderr)
    print("On Debian/Ubuntu, try: sudo apt install python3-gi gir1.2-gtk-3.0", file=sys.stderr)
    print(f"Error details: {e}", file=sys.stderr)
    sys.exit(1)

try:
    import nightlight_toggle_core as core
    from nightlight_toggle_core import exceptions as core_exc
    from nightlight_toggle_core.gio_settings import GioSettingsStore, watch_file
except ImportError as e:
    dialog = Gtk.MessageDialog(
        transient_for=None,
        flags=0,
        message_type=Gtk.MessageType.ERROR,
        buttons=Gtk.ButtonsType.OK,
        text="Fatal Error: nightlight_toggle_core library not found",
    )
    dialog.format_secondary_text(
        f"Could not import the core library: {e}.\n\n"
        "Please ensure nightlight_toggle_core is installed or available in your Python path."
    )
    dialog.run()
    dialog.destroy()
    sys.exit(1)

log = logging.getLogger("nightlight_toggle_prefs")


class SwitchControl(core.BindableControl):
    """Binds the `active` property of a Gtk.Switch."""

    def __init__(self, switch):
        self.switch = switch

    def get_value(self):
        return self.switch.get_active()

    def set_value(self, value):
        self.switch.set_active(bool(value))

    def connect_changed(self, callback):
        return self.switch.connect("notify::active", lambda _switch, _pspec: callback())

    def disconnect(self, handler_id):
        self.switch.disconnect(handler_id)


class AdjustmentControl(core.BindableControl):
    """Binds the value of a Gtk.Adjustment."""

    def __init__(self, adjustment):
        self.adjustment = adjustment

    def get_value(self):
        return self.adjustment.get_value()

    def set_value(self, value):
        self.adjustment.set_value(value)

    def connect_changed(self, callback):
        return self.adjustment.connect("value-changed", lambda _adjustment: callback())

    def disconnect(self, handler_id):
        self.adjustment.disconnect(handler_id)


# --- Main Window Class ---
class PrefsWindow(Gtk.Window):
    def __init__(self, color_settings, extension_settings):
        super().__init__(title="Night Light Toggle")
        self.set_border_width(24)
        self.set_position(Gtk.WindowPosition.CENTER)
        self.set_resizable(False)
        self.connect("destroy", self.on_destroy)

        self.color_settings = color_settings
        self.extension_settings = extension_settings
        self.night_light = core.NightLightController(color_settings)
        self.bindings = []
        self.config_monitor = watch_file(extension_settings.config_file, self._on_config_file_changed)

        self._build_ui()
        self.show_all()

    def _build_ui(self):
        """Constructs the UI layout and widgets."""
        main_vbox = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=24)
        self.add(main_vbox)

        main_vbox.pack_start(self._build_night_light_frame(), False, True, 0)
        main_vbox.pack_start(self._build_extension_frame(), False, True, 0)
        main_vbox.pack_start(self._build_about_frame(), False, True, 0)

    def _frame(self, title, orientation=Gtk.Orientation.VERTICAL):
        frame = Gtk.Frame(label=f"<b>{title}</b>")
        frame.get_label_widget().set_use_markup(True)
        box = Gtk.Box(orientation=orientation, spacing=12, margin=12)
        frame.add(box)
        return frame, box

    def _switch_row(self, label, store, key):
        row = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=12)
        row.pack_start(Gtk.Label(label=label, halign=Gtk.Align.START, hexpand=True), True, True, 0)
        switch = Gtk.Switch(halign=Gtk.Align.END, valign=Gtk.Align.CENTER)
        row.pack_end(switch, False, False, 0)
        self.bindings.append(core.SettingBinding(store, key, SwitchControl(switch)))
        return row

    def _build_night_light_frame(self):
        frame, box = self._frame("Night Light")

        box.pack_start(self._switch_row("Enable Night Light", self.color_settings, core.NIGHT_LIGHT_ENABLED_KEY), False, True, 0)

        temp_box = Gtk.Box(orientation=Gtk.Orientation.VERTICAL, spacing=6)
        temp_box.pack_start(Gtk.Label(label="Color Temperature", halign=Gtk.Align.START), False, True, 0)
        box.pack_start(temp_box, False, True, 0)

        slider_box = Gtk.Box(orientation=Gtk.Orientation.HORIZONTAL, spacing=12)
        temp_box.pack_start(slider_box, False, True, 0)

        less_warm = Gtk.Label(label="Less Warm")
        less_warm.get_style_context().add_class("dim-label")
        slider_box.pack_start(less_warm, False, False, 0)

        # Inverted: higher temperature = less warm, so "More Warm" sits on the right.
        adjustment = Gtk.Adjustment(value=core.TEMP_MIN, lower=core.TEMP_MIN, upper=core.TEMP_MAX, step_increment=100, page_increment=500)
        scale = Gtk.Scale(orientation=Gtk.Orientation.HORIZONTAL, adjustment=adjustment, draw_value=False, hexpand=True)
        scale.set_inverted(True)
        scale.set_size_request(200, -1)
        slider_box.pack_start(scale, True, True, 0)

        more_warm = Gtk.Label(label="More Warm")
        more_warm.get_style_context().add_class("dim-label")
        slider_box.pack_start(more_warm, False, False, 0)

        self.bindings.append(core.SettingBinding(
            self.color_settings,
            core.NIGHT_LIGHT_TEMPERATURE_KEY,
            AdjustmentControl(adjustment),
            to_setting=lambda value: int(round(value)),
            to_control=float,
            write=self.night_light.set_temperature,
        ))
        return frame

    def _build_extension_frame(self):
        frame, box = self._frame("Extension")
        box.pack_start(self._switch_row("Restore previous state on disable", self.extension_settings, core.RESTORE_STATE_KEY), False, True, 0)
        box.pack_start(self._switch_row("Show indicator in top bar", self.extension_settings, core.SHOW_INDICATOR_KEY), False, True, 0)
        return frame

    def _build_about_frame(self):
        frame, box = self._frame("About", Gtk.Orientation.HORIZONTAL)
        about = Gtk.Label(
            label="Night Light Toggle\nQuick access to GNOME's Night Light from the top panel",
            halign=Gtk.Align.START,
            hexpand=True,
        )
        box.pack_start(about, True, True, 0)
        version = Gtk.Label(label=f"v{core.__version__}", halign=Gtk.Align.END, valign=Gtk.Align.CENTER)
        version.get_style_context().add_class("dim-label")
        box.pack_end(version, False, False, 0)
        return frame

    # --- Signal Handlers ---
    def _on_config_file_changed(self):
        try:
            self.extension_settings.reload()
        except core_exc.ConfigError as e:
            log.error(f"Ignoring unreadable config.ini: {e}")

    def on_destroy(self, widget):
        for binding in self.bindings:
            binding.unbind()
        self.bindings = []
        if self.config_monitor:
            self.config_monitor.cancel()
            self.config_monitor = None
        Gtk.main_quit()


def show_error_dialog(title, message):
    dialog = Gtk.MessageDialog(
        transient_for=None,
        flags=0,
        message_type=Gtk.MessageType.ERROR,
        buttons=Gtk.ButtonsType.OK,
        text=title,
    )
    dialog.format_secondary_text(str(message))
    dialog.run()
    dialog.destroy()


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(name)s: %(message)s")
    try:
        config_manager = core.ConfigManager()
        logging.getLogger().setLevel(core.get_log_level(config_manager.load_config()))
        color_settings = GioSettingsStore(core.COLOR_SCHEMA)
        extension_settings = core.IniSettingsStore(config_manager)
    except core_exc.NightLightToggleError as e:
        log.error(f"Cannot open preferences: {e}")
        show_error_dialog("Initialization Error", f"Could not open Night Light preferences.\n\nDetails: {e}")
        sys.exit(1)

    PrefsWindow(color_settings, extension_settings)
    Gtk.main()


if __name__ == "__main__":
    main()
