# nightlight_toggle_core/gio_settings.py
"""
GSettings and file-monitor glue built on PyGObject's Gio bindings.

Kept apart from `settings.py` so the rest of the core library (and its
tests) can be imported without GObject introspection being available.
"""
import logging
import pathlib
from typing import Any, Callable, Optional

from gi.repository import Gio, GLib

from .exceptions import SchemaError, SettingsError
from .settings import ChangeCallback, SettingsStore

log = logging.getLogger(__name__)


class GioSettingsStore(SettingsStore):
    """
    A `SettingsStore` backed by a host-installed GSettings schema.

    `schema_source` and `backend` default to the system ones; passing a
    `Gio.SettingsSchemaSource` and a memory backend keeps tests off dconf.
    """

    def __init__(self, schema_id: str, schema_source: Optional[Gio.SettingsSchemaSource] = None, backend=None):
        source = schema_source or Gio.SettingsSchemaSource.get_default()
        schema = source.lookup(schema_id, True) if source else None
        if schema is None:
            raise SchemaError(
                f"GSettings schema '{schema_id}' is not installed. "
                "Is gnome-settings-daemon present on this system?"
            )
        self.schema_id = schema_id
        self._schema = schema
        self._settings = Gio.Settings.new_full(schema, backend, None)
        log.debug(f"Opened GSettings schema {schema_id}")

    def _check_key(self, key: str):
        if not self._schema.has_key(key):
            raise SettingsError(f"Key '{key}' does not exist in schema {self.schema_id}.")

    def get(self, key: str) -> Any:
        self._check_key(key)
        return self._settings.get_value(key).unpack()

    def set(self, key: str, value: Any) -> None:
        self._check_key(key)
        type_string = self._schema.get_key(key).get_value_type().dup_string()
        if type_string == "d":
            value = float(value)
        try:
            variant = GLib.Variant(type_string, value)
        except (TypeError, ValueError, OverflowError) as e:
            raise SettingsError(f"Value {value!r} is not valid for '{key}' ({type_string}): {e}") from e
        log.debug(f"gsettings set {self.schema_id} {key} {value!r}")
        if not self._settings.set_value(key, variant):
            raise SettingsError(f"Key '{key}' in {self.schema_id} is not writable.")

    def connect(self, key: str, callback: ChangeCallback) -> int:
        self._check_key(key)
        return self._settings.connect(f"changed::{key}", lambda _settings, changed_key: callback(changed_key))

    def disconnect(self, handler_id: int) -> None:
        self._settings.disconnect(handler_id)


def watch_file(path: pathlib.Path, callback: Callable[[], None]) -> Gio.FileMonitor:
    """
    Calls `callback` whenever `path` is rewritten by another process.

    The caller must keep a reference to the returned monitor and cancel it
    when done; GLib drops the watch once the monitor is garbage collected.
    """
    gfile = Gio.File.new_for_path(str(path))
    monitor = gfile.monitor_file(Gio.FileMonitorFlags.NONE, None)

    def on_changed(_monitor, _file, _other_file, event_type):
        if event_type in (Gio.FileMonitorEvent.CHANGES_DONE_HINT, Gio.FileMonitorEvent.CREATED):
            log.debug(f"File monitor event {event_type.value_nick} for {path}")
            callback()

    monitor.connect("changed", on_changed)
    return monitor
