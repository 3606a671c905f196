# nightlight_toggle_core/__init__.py

__version__ = "1.2.0"

# Make exceptions available directly
from .exceptions import (
    ConfigError,
    NightLightToggleError,
    SchemaError,
    SettingsError,
    SuppressionError,
    ValidationError,
)

# --- Core classes ---
# gio_settings and shell_eval need GObject introspection and are imported
# explicitly by the GUI scripts.
from .binding import BindableControl, SettingBinding
from .config import CONFIG_DIR, CONFIG_FILE, DEFAULT_CONFIG, ConfigManager, get_log_level
from .extension import EXTENSION_UUID, NightLightExtension, StatusArea
from .indicator import ICON_NAME, INDICATOR_NAME, OPACITY_DISABLED, OPACITY_ENABLED, IndicatorView, NightLightIndicator
from .night_light import TEMP_MAX, TEMP_MIN, NightLightController
from .settings import (
    COLOR_SCHEMA,
    NIGHT_LIGHT_ENABLED_KEY,
    NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY,
    NIGHT_LIGHT_SCHEDULE_FROM_KEY,
    NIGHT_LIGHT_SCHEDULE_TO_KEY,
    NIGHT_LIGHT_TEMPERATURE_KEY,
    RESTORE_STATE_KEY,
    SHOW_INDICATOR_KEY,
    IniSettingsStore,
    SettingsStore,
)
from .suppression import LOOKUP_STRATEGIES, BuiltinIndicatorSuppressor, ShellHost

__all__ = [
    "__version__",
    # Constants
    "COLOR_SCHEMA",
    "CONFIG_DIR",
    "CONFIG_FILE",
    "DEFAULT_CONFIG",
    "EXTENSION_UUID",
    "ICON_NAME",
    "INDICATOR_NAME",
    "LOOKUP_STRATEGIES",
    "NIGHT_LIGHT_ENABLED_KEY",
    "NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY",
    "NIGHT_LIGHT_SCHEDULE_FROM_KEY",
    "NIGHT_LIGHT_SCHEDULE_TO_KEY",
    "NIGHT_LIGHT_TEMPERATURE_KEY",
    "OPACITY_DISABLED",
    "OPACITY_ENABLED",
    "RESTORE_STATE_KEY",
    "SHOW_INDICATOR_KEY",
    "TEMP_MAX",
    "TEMP_MIN",
    # Exceptions
    "ConfigError",
    "NightLightToggleError",
    "SchemaError",
    "SettingsError",
    "SuppressionError",
    "ValidationError",
    # Classes
    "BindableControl",
    "BuiltinIndicatorSuppressor",
    "ConfigManager",
    "IndicatorView",
    "IniSettingsStore",
    "NightLightController",
    "NightLightExtension",
    "NightLightIndicator",
    "SettingBinding",
    "SettingsStore",
    "ShellHost",
    "StatusArea",
    # Helper Functions
    "get_log_level",
]
