"""Tests for the two-way preferences bindings and their loop guard."""

import itertools

import pytest

from nightlight_toggle_core import (
    NIGHT_LIGHT_ENABLED_KEY,
    NIGHT_LIGHT_TEMPERATURE_KEY,
    TEMP_MAX,
    TEMP_MIN,
    BindableControl,
    NightLightController,
    SettingBinding,
)

from conftest import COLOR_DEFAULTS, FakeSettingsStore


class FakeControl(BindableControl):
    """Emits `changed` only when the value actually changes, like Gtk.Adjustment."""

    def __init__(self, value):
        self.value = value
        self.handlers = {}
        self._ids = itertools.count(1)

    def get_value(self):
        return self.value

    def set_value(self, value):
        if value == self.value:
            return
        self.value = value
        for callback in list(self.handlers.values()):
            callback()

    def connect_changed(self, callback):
        handler_id = next(self._ids)
        self.handlers[handler_id] = callback
        return handler_id

    def disconnect(self, handler_id):
        del self.handlers[handler_id]


def bind_temperature(store, control):
    # Same wiring as the preferences window.
    return SettingBinding(
        store,
        NIGHT_LIGHT_TEMPERATURE_KEY,
        control,
        to_setting=lambda value: int(round(value)),
        to_control=float,
        write=NightLightController(store).set_temperature,
    )


def test_control_starts_at_stored_value(color_settings):
    control = FakeControl(float(TEMP_MIN))
    bind_temperature(color_settings, control)

    assert control.value == 2700.0
    assert color_settings.writes == []


@pytest.mark.parametrize("kelvin", [TEMP_MIN, 3500, TEMP_MAX])
def test_control_edit_writes_store(color_settings, kelvin):
    control = FakeControl(float(TEMP_MIN))
    bind_temperature(color_settings, control)

    control.set_value(float(kelvin))

    assert color_settings.values[NIGHT_LIGHT_TEMPERATURE_KEY] == kelvin
    assert color_settings.writes == [(NIGHT_LIGHT_TEMPERATURE_KEY, kelvin)]


@pytest.mark.parametrize("kelvin", [TEMP_MIN, 4200, TEMP_MAX])
def test_external_write_updates_control(color_settings, kelvin):
    control = FakeControl(float(TEMP_MIN))
    bind_temperature(color_settings, control)

    color_settings.set_externally(NIGHT_LIGHT_TEMPERATURE_KEY, kelvin)

    assert control.value == float(kelvin)
    assert color_settings.writes == []


def test_fractional_slider_positions_are_rounded(color_settings):
    control = FakeControl(float(TEMP_MIN))
    bind_temperature(color_settings, control)

    control.set_value(3149.6)

    assert color_settings.values[NIGHT_LIGHT_TEMPERATURE_KEY] == 3150


@pytest.mark.parametrize("kelvin", [TEMP_MIN - 200, TEMP_MAX + 300])
def test_out_of_range_edit_is_rejected_and_control_reset(color_settings, kelvin):
    control = FakeControl(float(TEMP_MIN))
    bind_temperature(color_settings, control)

    control.set_value(float(kelvin))

    assert control.value == 2700.0
    assert color_settings.values[NIGHT_LIGHT_TEMPERATURE_KEY] == 2700
    assert color_settings.writes == []


def test_other_errors_from_writer_propagate(color_settings):
    def broken_write(value):
        raise RuntimeError("backend exploded")

    control = FakeControl(False)
    SettingBinding(color_settings, NIGHT_LIGHT_ENABLED_KEY, control, write=broken_write)

    with pytest.raises(RuntimeError):
        control.set_value(True)


def test_setting_current_value_does_not_write(color_settings):
    control = FakeControl(float(TEMP_MIN))
    bind_temperature(color_settings, control)

    control.set_value(2700.0)
    # Even a spurious change signal must not produce a write.
    for callback in list(control.handlers.values()):
        callback()

    assert color_settings.writes == []


def test_own_write_delivered_later_does_not_echo():
    store = FakeSettingsStore(COLOR_DEFAULTS, deliver_async=True)
    control = FakeControl(float(TEMP_MIN))
    bind_temperature(store, control)

    control.set_value(4000.0)
    store.flush()

    assert store.writes == [(NIGHT_LIGHT_TEMPERATURE_KEY, 4000)]
    assert control.value == 4000.0


def test_boolean_binding_both_ways(color_settings):
    switch = FakeControl(False)
    SettingBinding(color_settings, NIGHT_LIGHT_ENABLED_KEY, switch)

    switch.set_value(True)
    assert color_settings.values[NIGHT_LIGHT_ENABLED_KEY] is True

    color_settings.set_externally(NIGHT_LIGHT_ENABLED_KEY, False)
    assert switch.value is False
    assert color_settings.writes == [(NIGHT_LIGHT_ENABLED_KEY, True)]


def test_unbind_releases_both_sides(color_settings):
    control = FakeControl(float(TEMP_MIN))
    binding = bind_temperature(color_settings, control)

    binding.unbind()
    binding.unbind()

    assert not binding.bound
    assert control.handlers == {}
    assert color_settings.handlers == {}
    color_settings.set_externally(NIGHT_LIGHT_TEMPERATURE_KEY, 4700)
    assert control.value == 2700.0
