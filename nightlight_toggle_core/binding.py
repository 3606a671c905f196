# nightlight_toggle_core/binding.py
"""
Two-way binding between a preferences control and a settings key.

Both directions compare before assigning, so a write never bounces back as
a second write, whether the store reports our own change synchronously or
later from the main loop.
"""
import logging
from typing import Any, Callable, Optional

from .exceptions import NightLightToggleError
from .settings import SettingsStore

log = logging.getLogger(__name__)


class BindableControl:
    """Adapter interface around a widget property (a switch, an adjustment)."""

    def get_value(self) -> Any:
        raise NotImplementedError

    def set_value(self, value: Any) -> None:
        raise NotImplementedError

    def connect_changed(self, callback: Callable[[], None]) -> int:
        raise NotImplementedError

    def disconnect(self, handler_id: int) -> None:
        raise NotImplementedError


def _identity(value):
    return value


class SettingBinding:
    """
    Keeps `control` and `store[key]` equal until `unbind()` is called.

    `write` replaces the plain `store.set(key, value)` for control edits, e.g.
    a controller method that validates first. If it raises one of our errors
    the control snaps back to the stored value.
    """

    def __init__(
        self,
        store: SettingsStore,
        key: str,
        control: BindableControl,
        to_setting: Optional[Callable[[Any], Any]] = None,
        to_control: Optional[Callable[[Any], Any]] = None,
        write: Optional[Callable[[Any], None]] = None,
    ):
        self.store = store
        self.key = key
        self.control = control
        self._to_setting = to_setting or _identity
        self._to_control = to_control or _identity
        self._write = write or (lambda value: store.set(key, value))

        self._on_setting_changed(key)
        self._control_handler = control.connect_changed(self._on_control_changed)
        self._store_handler = store.connect(key, self._on_setting_changed)

    @property
    def bound(self) -> bool:
        return self._store_handler is not None

    def _on_control_changed(self):
        value = self._to_setting(self.control.get_value())
        if self.store.get(self.key) == value:
            return
        log.debug(f"Control changed: writing {self.key} = {value!r}")
        try:
            self._write(value)
        except NightLightToggleError as e:
            log.warning(f"Rejected {self.key} = {value!r}: {e}")
            self._on_setting_changed(self.key)

    def _on_setting_changed(self, _key: str):
        value = self._to_control(self.store.get(self.key))
        if self.control.get_value() == value:
            return
        log.debug(f"{self.key} changed externally: updating control to {value!r}")
        self.control.set_value(value)

    def unbind(self):
        if self._control_handler is not None:
            self.control.disconnect(self._control_handler)
            self._control_handler = None
        if self._store_handler is not None:
            self.store.disconnect(self._store_handler)
            self._store_handler = None
