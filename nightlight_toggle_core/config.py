# nightlight_toggle_core/config.py
"""
Configuration management for nightlight-toggle.

This module handles the loading, saving, and default value application
for the extension-local configuration file (`config.ini`). The host's own
Night Light keys live in GSettings and are never stored here.
"""

import configparser
import logging
import os
import pathlib
from typing import Optional

from .exceptions import ConfigError

log = logging.getLogger(__name__)

# --- Constants ---
APP_NAME = "nightlight-toggle"
CONFIG_DIR = pathlib.Path.home() / ".config" / APP_NAME
CONFIG_FILE = CONFIG_DIR / "config.ini"
DEBUG_ENV_VAR = "NIGHTLIGHT_TOGGLE_DEBUG"

EXTENSION_SECTION = "Extension"

DEFAULT_CONFIG: dict[str, dict[str, str]] = {
    EXTENSION_SECTION: {
        "show-indicator": "true",
        "restore-state": "false",
    },
    "Logging": {
        "level": "INFO",
    },
}


class ConfigManager:
    """Handles reading/writing config.ini."""

    def __init__(self, config_file: Optional[pathlib.Path] = None):
        self.config_file = pathlib.Path(config_file) if config_file else CONFIG_FILE
        config_dir = self.config_file.parent
        try:
            config_dir.mkdir(parents=True, exist_ok=True)
            log.debug(f"Configuration directory ensured: {config_dir}")
        except OSError as e:
            raise ConfigError(f"Failed to create configuration directory {config_dir}: {e}") from e

    def _load_ini(self, file_path: pathlib.Path) -> configparser.ConfigParser:
        parser = configparser.ConfigParser()
        if file_path.exists():
            try:
                if file_path.stat().st_size > 0:
                    parser.read(file_path, encoding="utf-8")
                else:
                    log.warning(f"Config file {file_path} is empty.")
            except configparser.Error as e:
                raise ConfigError(f"Could not parse config file {file_path}: {e}") from e
            except OSError as e:
                raise ConfigError(f"Could not read config file {file_path}: {e}") from e
        return parser

    def _save_ini(self, parser: configparser.ConfigParser, file_path: pathlib.Path) -> bool:
        try:
            with file_path.open("w", encoding="utf-8") as f:
                parser.write(f)
            log.debug(f"Saved configuration to {file_path}")
            return True
        except OSError as e:
            raise ConfigError(f"Failed to write configuration to {file_path}: {e}") from e

    def load_config(self) -> configparser.ConfigParser:
        parser = self._load_ini(self.config_file)
        made_changes = False
        for section, defaults in DEFAULT_CONFIG.items():
            if not parser.has_section(section):
                parser.add_section(section)
                made_changes = True
            for key, value in defaults.items():
                if not parser.has_option(section, key):
                    parser.set(section, key, value)
                    made_changes = True
        if made_changes:
            log.debug("Default values applied in memory to the loaded configuration.")
        return parser

    def load_defaults(self) -> configparser.ConfigParser:
        parser = configparser.ConfigParser()
        parser.read_dict(DEFAULT_CONFIG)
        return parser

    def save_config(self, config: configparser.ConfigParser) -> bool:
        log.info(f"Saving configuration to {self.config_file}")
        return self._save_ini(config, self.config_file)

    def set_setting(self, config: configparser.ConfigParser, section: str, key: str, value: str):
        if not config.has_section(section):
            config.add_section(section)
        config.set(section, key, value)


def get_log_level(config: configparser.ConfigParser) -> int:
    """
    Resolves the logging level for the GUI scripts.

    The environment variable wins over the [Logging] section so a user can
    debug without editing config.ini.
    """
    if os.environ.get(DEBUG_ENV_VAR, "").strip() not in ("", "0"):
        return logging.DEBUG
    level_name = config.get("Logging", "level", fallback="INFO").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        log.warning(f"Unknown log level '{level_name}' in config.ini, using INFO.")
        return logging.INFO
    return level
