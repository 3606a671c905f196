# nightlight_toggle_core/night_light.py
"""
Night Light operations on top of the host color settings.

The host's color daemon does all the actual work; this module only reads and
writes its GSettings keys.
"""
import logging
from typing import Any

from .exceptions import ValidationError
from .settings import (
    NIGHT_LIGHT_ENABLED_KEY,
    NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY,
    NIGHT_LIGHT_SCHEDULE_FROM_KEY,
    NIGHT_LIGHT_SCHEDULE_TO_KEY,
    NIGHT_LIGHT_TEMPERATURE_KEY,
    SettingsStore,
)

log = logging.getLogger(__name__)

# Night Light typically uses 1700K (most warm) to 4700K (closer to daylight).
TEMP_MIN = 1700
TEMP_MAX = 4700

# Manual schedule covering the whole day, i.e. "always on".
ALWAYS_ON_FROM = 0.0
ALWAYS_ON_TO = 24.0

SNAPSHOT_KEYS = (
    NIGHT_LIGHT_ENABLED_KEY,
    NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY,
    NIGHT_LIGHT_SCHEDULE_FROM_KEY,
    NIGHT_LIGHT_SCHEDULE_TO_KEY,
)


class NightLightController:
    """Reads and writes the Night Light keys of a color settings store."""

    def __init__(self, color_settings: SettingsStore):
        self.color_settings = color_settings

    def is_enabled(self) -> bool:
        return bool(self.color_settings.get(NIGHT_LIGHT_ENABLED_KEY))

    def set_enabled(self, enabled: bool) -> None:
        """
        Turns Night Light on or off.

        Turning it on forces manual mode 00:00 -> 24:00 first so the screen
        warms up immediately regardless of time of day. Turning it off leaves
        the schedule alone.
        """
        if enabled:
            log.info("Turning Night Light on (manual schedule, always on)")
            self.color_settings.set(NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY, False)
            self.color_settings.set(NIGHT_LIGHT_SCHEDULE_FROM_KEY, ALWAYS_ON_FROM)
            self.color_settings.set(NIGHT_LIGHT_SCHEDULE_TO_KEY, ALWAYS_ON_TO)
        else:
            log.info("Turning Night Light off")
        self.color_settings.set(NIGHT_LIGHT_ENABLED_KEY, enabled)

    def toggle(self) -> bool:
        new_state = not self.is_enabled()
        self.set_enabled(new_state)
        return new_state

    def set_temperature(self, kelvin: int) -> None:
        if not (TEMP_MIN <= kelvin <= TEMP_MAX):
            raise ValidationError(f"Temperature value {kelvin}K is outside the Night Light range ({TEMP_MIN}-{TEMP_MAX}).")
        self.color_settings.set(NIGHT_LIGHT_TEMPERATURE_KEY, int(kelvin))

    def snapshot(self) -> dict[str, Any]:
        """Captures the keys `set_enabled` may overwrite."""
        return {key: self.color_settings.get(key) for key in SNAPSHOT_KEYS}

    def restore(self, snapshot: dict[str, Any]) -> None:
        # Schedule first, then the master switch, same order as set_enabled.
        for key in SNAPSHOT_KEYS[1:] + SNAPSHOT_KEYS[:1]:
            if key not in snapshot:
                continue
            if self.color_settings.get(key) != snapshot[key]:
                log.debug(f"Restoring {key} to {snapshot[key]!r}")
                self.color_settings.set(key, snapshot[key])
