# nightlight_toggle_core/extension.py
"""
Lifecycle of the Night Light toggle.

`NightLightExtension` is what the tray application (or a test) activates
and deactivates. It owns the indicator, its status-area registration and the
suppression of the shell's built-in indicator, so separate instances never
share state.
"""
import logging
from typing import Any, Optional

from .exceptions import NightLightToggleError
from .indicator import NightLightIndicator
from .night_light import NightLightController
from .settings import RESTORE_STATE_KEY, SettingsStore
from .suppression import BuiltinIndicatorSuppressor, ShellHost

log = logging.getLogger(__name__)

EXTENSION_UUID = "nightlight-toggle@nightlight-toggle.github.io"


class StatusArea:
    """Where indicators are shown. Keyed by a unique identifier."""

    def add(self, uuid: str, indicator: NightLightIndicator) -> None:
        raise NotImplementedError

    def remove(self, uuid: str) -> None:
        raise NotImplementedError


class NightLightExtension:
    def __init__(
        self,
        color_settings: SettingsStore,
        extension_settings: SettingsStore,
        status_area: StatusArea,
        shell_host: Optional[ShellHost] = None,
        uuid: str = EXTENSION_UUID,
    ):
        self.uuid = uuid
        self._color_settings = color_settings
        self._settings = extension_settings
        self._status_area = status_area
        self._night_light = NightLightController(color_settings)
        self._suppressor = BuiltinIndicatorSuppressor(shell_host)
        self._indicator: Optional[NightLightIndicator] = None
        self._snapshot: Optional[dict[str, Any]] = None

    @property
    def active(self) -> bool:
        return self._indicator is not None

    @property
    def indicator(self) -> Optional[NightLightIndicator]:
        return self._indicator

    @property
    def builtin_suppressed(self) -> bool:
        return self._suppressor.patched

    def activate(self):
        """
        Registers the indicator and hides the built-in one.

        Settings errors (e.g. a missing schema) propagate; nothing is left
        registered or patched when they do.
        """
        if self.active:
            log.debug("Extension already active.")
            return

        snapshot = self._night_light.snapshot()
        indicator = NightLightIndicator(self._color_settings, self._settings)
        try:
            self._status_area.add(self.uuid, indicator)
        except Exception:
            indicator.destroy()
            raise

        self._indicator = indicator
        self._snapshot = snapshot
        self._suppressor.suppress()
        log.info(f"{self.uuid} activated.")

    def deactivate(self):
        if not self.active:
            log.debug("Extension not active; nothing to deactivate.")
            return

        # The built-in indicator gets its routine back before our resources go.
        self._suppressor.restore()

        indicator, self._indicator = self._indicator, None
        try:
            self._status_area.remove(self.uuid)
        finally:
            indicator.destroy()

        snapshot, self._snapshot = self._snapshot, None
        try:
            if snapshot and self._settings.get(RESTORE_STATE_KEY):
                log.info("Restoring Night Light state from before activation.")
                self._night_light.restore(snapshot)
        except NightLightToggleError as e:
            log.error(f"Could not restore previous Night Light state: {e}")
        log.info(f"{self.uuid} deactivated.")
