# nightlight_toggle_core/indicator.py
"""
Display-free model of the Night Light status icon.

`NightLightIndicator` keeps a view in sync with the host's
`night-light-enabled` key and the extension's `show-indicator` flag, and
toggles Night Light when the view reports a click.
"""
import logging
from typing import Optional

from .night_light import NightLightController
from .settings import NIGHT_LIGHT_ENABLED_KEY, SHOW_INDICATOR_KEY, SettingsStore

log = logging.getLogger(__name__)

INDICATOR_NAME = "Night Light Toggle"
ICON_NAME = "night-light-symbolic"
OPACITY_ENABLED = 255
OPACITY_DISABLED = 140


class IndicatorView:
    """Interface for whatever draws the indicator (a tray icon, a test fake)."""

    def set_opacity(self, opacity: int) -> None:
        raise NotImplementedError

    def set_visible(self, visible: bool) -> None:
        raise NotImplementedError

    def destroy(self) -> None:
        raise NotImplementedError


class NightLightIndicator:
    """Click to toggle Night Light on/off."""

    def __init__(self, color_settings: SettingsStore, extension_settings: SettingsStore, view: Optional[IndicatorView] = None):
        self._color_settings = color_settings
        self._settings = extension_settings
        self._night_light = NightLightController(color_settings)
        self._view = view
        self.opacity = OPACITY_DISABLED
        self.visible = True

        self._update_icon()
        self._on_show_indicator_changed()

        self._settings_signal = self._settings.connect(SHOW_INDICATOR_KEY, lambda _key: self._on_show_indicator_changed())
        self._color_signal = self._color_settings.connect(NIGHT_LIGHT_ENABLED_KEY, lambda _key: self._update_icon())

    @property
    def destroyed(self) -> bool:
        return self._color_settings is None

    def attach_view(self, view: IndicatorView):
        """Hands the indicator a view and renders the current state into it."""
        self._view = view
        view.set_opacity(self.opacity)
        view.set_visible(self.visible)

    def activate(self) -> bool:
        """Primary click or touch. Returns the new Night Light state."""
        if self.destroyed:
            log.warning("Ignoring activation of a destroyed indicator.")
            return False
        return self._night_light.toggle()

    def _update_icon(self):
        self.opacity = OPACITY_ENABLED if self._night_light.is_enabled() else OPACITY_DISABLED
        if self._view:
            self._view.set_opacity(self.opacity)

    def _on_show_indicator_changed(self):
        self.visible = bool(self._settings.get(SHOW_INDICATOR_KEY))
        log.debug(f"Indicator visible: {self.visible}")
        if self._view:
            self._view.set_visible(self.visible)

    def destroy(self):
        if self._settings_signal:
            self._settings.disconnect(self._settings_signal)
            self._settings_signal = None
        if self._color_signal:
            self._color_settings.disconnect(self._color_signal)
            self._color_signal = None
        self._settings = None
        self._color_settings = None
        if self._view:
            self._view.destroy()
            self._view = None
