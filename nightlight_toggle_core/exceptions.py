# nightlight_toggle_core/exceptions.py
"""
Custom exception classes for the nightlight-toggle core library.

These exceptions provide more specific error information than built-in
exceptions, allowing for more targeted error handling by callers.
All custom exceptions inherit from the base `NightLightToggleError`.
"""
class NightLightToggleError(Exception):
    """Base exception for nightlight-toggle core errors."""

    pass


class ConfigError(NightLightToggleError):
    """Errors related to configuration loading, saving, or validation."""

    pass


class SchemaError(NightLightToggleError):
    """A required GSettings schema is not installed."""

    pass


class SettingsError(NightLightToggleError):
    """Errors reading or writing a key in a settings store."""

    pass


class SuppressionError(NightLightToggleError):
    """The shell refused to patch or restore its built-in indicator."""

    pass


class ValidationError(NightLightToggleError):
    """Errors for invalid user input or data formats."""

    pass
