# nightlight_toggle_core/settings.py
"""
Settings stores used by the indicator and the preferences window.

A store is a small typed key-value interface with per-key change
notification. The host's Night Light keys are served by `GioSettingsStore`
(see `gio_settings.py`); the extension's own flags live in config.ini and are
served by `IniSettingsStore`.
"""
import configparser
import itertools
import logging
from typing import Any, Callable, Optional

from .config import EXTENSION_SECTION, ConfigManager
from .exceptions import SettingsError

log = logging.getLogger(__name__)

# --- Host schema (gnome-settings-daemon color plugin) ---
COLOR_SCHEMA = "org.gnome.settings-daemon.plugins.color"
NIGHT_LIGHT_ENABLED_KEY = "night-light-enabled"
NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY = "night-light-schedule-automatic"
NIGHT_LIGHT_SCHEDULE_FROM_KEY = "night-light-schedule-from"
NIGHT_LIGHT_SCHEDULE_TO_KEY = "night-light-schedule-to"
NIGHT_LIGHT_TEMPERATURE_KEY = "night-light-temperature"

# --- Extension-local keys ---
SHOW_INDICATOR_KEY = "show-indicator"
RESTORE_STATE_KEY = "restore-state"

ChangeCallback = Callable[[str], None]


class SettingsStore:
    """
    Defines the interface shared by every settings backend.

    Callbacks passed to `connect` receive the changed key name. A handler id
    returned by `connect` is only valid for the store that issued it.
    """

    def get(self, key: str) -> Any:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def connect(self, key: str, callback: ChangeCallback) -> int:
        raise NotImplementedError

    def disconnect(self, handler_id: int) -> None:
        raise NotImplementedError


class IniSettingsStore(SettingsStore):
    """Extension-local boolean flags persisted in config.ini."""

    KEYS = (SHOW_INDICATOR_KEY, RESTORE_STATE_KEY)

    def __init__(self, config_manager: Optional[ConfigManager] = None):
        self._cfg_mgr = config_manager or ConfigManager()
        self._config = self._cfg_mgr.load_config()
        self._handlers: dict[int, tuple[str, ChangeCallback]] = {}
        self._handler_ids = itertools.count(1)

    @property
    def config_file(self):
        return self._cfg_mgr.config_file

    def _check_key(self, key: str):
        if key not in self.KEYS:
            raise SettingsError(f"Unknown extension setting '{key}'.")

    def _read(self, config: configparser.ConfigParser, key: str) -> bool:
        try:
            return config.getboolean(EXTENSION_SECTION, key)
        except ValueError:
            log.warning(f"Invalid boolean for '{key}' in config.ini, falling back to default.")
            return self._cfg_mgr.load_defaults().getboolean(EXTENSION_SECTION, key)

    def get(self, key: str) -> bool:
        self._check_key(key)
        return self._read(self._config, key)

    def set(self, key: str, value: bool) -> None:
        self._check_key(key)
        if not isinstance(value, bool):
            raise SettingsError(f"Setting '{key}' expects a boolean, got {type(value).__name__}.")
        if self._read(self._config, key) == value:
            log.debug(f"'{key}' already {value}; not rewriting config.ini.")
            return
        # Commit to self._config only once the file is written.
        new_config = configparser.ConfigParser()
        new_config.read_dict(self._config)
        self._cfg_mgr.set_setting(new_config, EXTENSION_SECTION, key, "true" if value else "false")
        self._cfg_mgr.save_config(new_config)
        self._config = new_config
        self._emit(key)

    def reload(self) -> list[str]:
        """
        Re-reads config.ini after an external edit and notifies observers of
        every key whose value actually changed. Returns the changed keys.
        """
        new_config = self._cfg_mgr.load_config()
        changed = [key for key in self.KEYS if self._read(new_config, key) != self._read(self._config, key)]
        self._config = new_config
        if changed:
            log.info(f"config.ini changed on disk: {', '.join(changed)}")
        for key in changed:
            self._emit(key)
        return changed

    def connect(self, key: str, callback: ChangeCallback) -> int:
        self._check_key(key)
        handler_id = next(self._handler_ids)
        self._handlers[handler_id] = (key, callback)
        return handler_id

    def disconnect(self, handler_id: int) -> None:
        if self._handlers.pop(handler_id, None) is None:
            log.warning(f"Tried to disconnect unknown handler {handler_id}.")

    def _emit(self, key: str):
        # Copy: a callback may disconnect itself or others.
        for handler_id, (connected_key, callback) in list(self._handlers.items()):
            if connected_key == key and handler_id in self._handlers:
                callback(key)

    @property
    def handler_count(self) -> int:
        return len(self._handlers)
