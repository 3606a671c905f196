"""Shared fakes: in-memory settings stores, views, status area and shell host."""

import itertools

import pytest

from nightlight_toggle_core import (
    NIGHT_LIGHT_ENABLED_KEY,
    NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY,
    NIGHT_LIGHT_SCHEDULE_FROM_KEY,
    NIGHT_LIGHT_SCHEDULE_TO_KEY,
    NIGHT_LIGHT_TEMPERATURE_KEY,
    RESTORE_STATE_KEY,
    SHOW_INDICATOR_KEY,
    IndicatorView,
    SettingsError,
    SettingsStore,
    ShellHost,
    StatusArea,
    SuppressionError,
)


class FakeSettingsStore(SettingsStore):
    """
    Dict-backed store that, like GSettings, notifies on every write,
    including writes made by the observer itself.

    With `deliver_async=True` notifications queue until `flush()`, the way
    a main loop would deliver them.
    """

    def __init__(self, values, deliver_async=False):
        self.values = dict(values)
        self.writes = []
        self.deliver_async = deliver_async
        self.pending = []
        self.handlers = {}
        self._ids = itertools.count(1)

    def get(self, key):
        if key not in self.values:
            raise SettingsError(f"unknown key {key}")
        return self.values[key]

    def set(self, key, value):
        if key not in self.values:
            raise SettingsError(f"unknown key {key}")
        self.values[key] = value
        self.writes.append((key, value))
        if self.deliver_async:
            self.pending.append(key)
        else:
            self._emit(key)

    def set_externally(self, key, value):
        """A write from another process: not recorded in `writes`."""
        self.values[key] = value
        self._emit(key)

    def flush(self):
        while self.pending:
            self._emit(self.pending.pop(0))

    def connect(self, key, callback):
        handler_id = next(self._ids)
        self.handlers[handler_id] = (key, callback)
        return handler_id

    def disconnect(self, handler_id):
        del self.handlers[handler_id]

    def _emit(self, key):
        for handler_id, (connected_key, callback) in list(self.handlers.items()):
            if connected_key == key and handler_id in self.handlers:
                callback(key)


class FakeView(IndicatorView):
    def __init__(self):
        self.opacity = None
        self.visible = None
        self.destroyed = False

    def set_opacity(self, opacity):
        self.opacity = opacity

    def set_visible(self, visible):
        self.visible = visible

    def destroy(self):
        self.destroyed = True


class FakeStatusArea(StatusArea):
    def __init__(self):
        self.indicators = {}
        self.views = {}

    def add(self, uuid, indicator):
        assert uuid not in self.indicators
        view = FakeView()
        indicator.attach_view(view)
        self.indicators[uuid] = indicator
        self.views[uuid] = view

    def remove(self, uuid):
        del self.indicators[uuid]
        del self.views[uuid]


class FakeIndicatorWidget:
    def __init__(self):
        self.visible = True


class FakeBuiltinElement:
    """Stands in for the shell's own Night Light indicator object."""

    def __init__(self):
        self._indicator = FakeIndicatorWidget()
        self.sync_calls = 0

    def _sync(self):
        self.sync_calls += 1
        self._indicator.visible = True


class FakeShellHost(ShellHost):
    def __init__(self, elements=None, fail_on=()):
        self.elements = dict(elements or {})
        self.fail_on = set(fail_on)
        self.calls = []

    def _maybe_fail(self, operation):
        self.calls.append(operation)
        if operation in self.fail_on:
            raise SuppressionError(f"{operation} refused")

    def has_element(self, location):
        self._maybe_fail("has_element")
        return location in self.elements

    def patch_sync(self, location):
        self._maybe_fail("patch_sync")
        element = self.elements[location]
        if "_original_sync" not in vars(element):
            element._original_sync = element._sync

            def hidden_sync():
                element._indicator.visible = False

            element._sync = hidden_sync
        element._indicator.visible = False

    def unpatch_sync(self, location):
        self._maybe_fail("unpatch_sync")
        element = self.elements.get(location)
        if element is None or "_original_sync" not in vars(element):
            return
        del element._sync
        del element._original_sync
        element._sync()


COLOR_DEFAULTS = {
    NIGHT_LIGHT_ENABLED_KEY: False,
    NIGHT_LIGHT_SCHEDULE_AUTOMATIC_KEY: True,
    NIGHT_LIGHT_SCHEDULE_FROM_KEY: 20.0,
    NIGHT_LIGHT_SCHEDULE_TO_KEY: 6.0,
    NIGHT_LIGHT_TEMPERATURE_KEY: 2700,
}


@pytest.fixture
def color_settings():
    return FakeSettingsStore(COLOR_DEFAULTS)


@pytest.fixture
def extension_settings():
    return FakeSettingsStore({SHOW_INDICATOR_KEY: True, RESTORE_STATE_KEY: False})


@pytest.fixture
def status_area():
    return FakeStatusArea()


@pytest.fixture
def config_file(tmp_path):
    return tmp_path / "nightlight-toggle" / "config.ini"
