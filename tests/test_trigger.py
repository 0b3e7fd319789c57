"""Behaviour of the humidity threshold trigger against fake sources."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import pytest
import voluptuous as vol

from hsc_testing import load_modules

MODS = load_modules()
models = MODS.models
HumidityThresholdTrigger = MODS.trigger.HumidityThresholdTrigger


@dataclass(frozen=True)
class _Switch:
    name: str
    minimum: float = 0.0
    maximum: float = 100.0
    step_size: float = 1.0


class _FakeWeather:
    def __init__(self, connected=True, humidity=60.0):
        self.connected = connected
        self.humidity = humidity

    def get_info(self):
        return models.WeatherInfo(connected=self.connected, humidity=self.humidity)


class _FakeSwitches:
    def __init__(self, connected=True, switches=()):
        self.connected = connected
        self.switches = list(switches)

    def get_info(self):
        return models.SwitchInfo(connected=self.connected, writable_switches=tuple(self.switches))


class _FakeNotifier:
    def __init__(self):
        self.messages = []

    def show_success(self, message):
        self.messages.append(message)


def _real_switches(count=5, **kwargs):
    return [_Switch(f"Dew heater {i}", **kwargs) for i in range(count)]


def _make(weather=None, switches=None, notifier=None):
    weather = weather or _FakeWeather()
    switches = switches or _FakeSwitches(switches=_real_switches())
    notifier = notifier or _FakeNotifier()
    return HumidityThresholdTrigger(weather, switches, notifier), weather, switches, notifier


def test_defaults_start_on_placeholder_list():
    trigger, *_ = _make()
    assert trigger.switch_index == 0
    assert trigger.desired_value == 0
    assert trigger.humidity_threshold == 50
    assert trigger.switches.placeholder
    assert len(trigger.switches) == 20
    assert trigger.selected_switch == trigger.switches[0]
    assert [s.id for s in trigger.switches] == list(range(1, 21))


@pytest.mark.parametrize(
    "raw",
    [-10, -0.1, 0, 2.4, 2.5, 7.5, 12.5, 13, 47.6, 97.4, 99, 101, 1000, float("inf"), float("-inf")],
)
def test_desired_value_is_clamped_multiple_of_five(raw):
    trigger, *_ = _make()
    trigger.desired_value = raw
    expected = float(round(min(100, max(0, raw)) / 5) * 5)
    assert trigger.desired_value == expected
    assert trigger.desired_value % 5 == 0
    assert 0 <= trigger.desired_value <= 100


@pytest.mark.parametrize(
    "raw, expected",
    [(-5, 0), (0, 0), (49.9, 49), (73, 73), (100, 100), (150, 100), (float("inf"), 100), (float("-inf"), 0)],
)
def test_humidity_threshold_is_clamped_integer(raw, expected):
    trigger, *_ = _make()
    trigger.humidity_threshold = raw
    assert trigger.humidity_threshold == expected
    assert isinstance(trigger.humidity_threshold, int)


def test_nan_is_ignored_by_numeric_setters():
    trigger, *_ = _make()
    trigger.desired_value = 25
    trigger.humidity_threshold = 70
    events = []
    trigger.add_listener(events.append)
    trigger.desired_value = float("nan")
    trigger.humidity_threshold = float("nan")
    assert trigger.desired_value == 25
    assert trigger.humidity_threshold == 70
    assert events == []


def test_setters_only_signal_real_changes():
    trigger, *_ = _make()
    events = []
    trigger.add_listener(events.append)
    trigger.desired_value = 1  # rounds to the current 0
    trigger.humidity_threshold = 50
    assert events == []
    trigger.desired_value = 20
    trigger.humidity_threshold = 65
    assert events == ["desired_value", "humidity_threshold"]


@pytest.mark.parametrize("index", [-1, -2, -100])
def test_negative_switch_index_is_ignored(index):
    trigger, *_ = _make()
    trigger.switch_index = 3
    trigger.switch_index = index
    assert trigger.switch_index == 3


def test_increase_and_decrease_value_stay_in_range():
    trigger, *_ = _make()
    trigger.decrease_value()
    assert trigger.desired_value == 0
    trigger.increase_value()
    assert trigger.desired_value == 5
    trigger.desired_value = 100
    trigger.increase_value()
    assert trigger.desired_value == 100
    trigger.decrease_value()
    assert trigger.desired_value == 95


def test_weather_disconnected_blocks_validation():
    trigger, weather, *_ = _make(weather=_FakeWeather(connected=False))
    assert trigger.validate() is False
    assert trigger.issues[0] == "Weather Not Connected"


@pytest.mark.parametrize("humidity", [0, 0.0, -3, 100.5, None, float("nan")])
def test_invalid_humidity_is_reported(humidity):
    trigger, *_ = _make(weather=_FakeWeather(humidity=humidity))
    assert trigger.validate() is False
    assert "No Humidity Data" in trigger.issues


def test_full_humidity_is_accepted():
    trigger, *_ = _make(weather=_FakeWeather(humidity=100))
    assert trigger.validate() is True
    assert trigger.current_humidity == 100
    assert trigger.is_switch_on


def test_humidity_above_threshold_triggers():
    trigger, *_ = _make(weather=_FakeWeather(humidity=60))
    trigger.humidity_threshold = 50
    assert trigger.validate() is True
    assert trigger.should_trigger(None, None) is True


def test_humidity_at_threshold_does_not_trigger():
    trigger, weather, *_ = _make(weather=_FakeWeather(humidity=50))
    trigger.validate()
    assert trigger.should_trigger() is False


def test_should_trigger_uses_last_observed_humidity_without_hysteresis():
    trigger, weather, *_ = _make(weather=_FakeWeather(humidity=51))
    trigger.validate()
    weather.connected = False
    assert trigger.should_trigger() is True
    assert trigger.should_trigger() is True
    trigger.humidity_threshold = 60
    assert trigger.should_trigger() is False


def test_validate_is_idempotent():
    trigger, *_ = _make(weather=_FakeWeather(connected=False), switches=_FakeSwitches(connected=False))
    events = []
    trigger.add_listener(events.append)
    trigger.validate()
    first = trigger.issues
    assert "issues" in events

    events.clear()
    trigger.validate()
    assert trigger.issues == first
    assert "issues" not in events


def test_switch_disconnect_swaps_in_placeholder_list():
    switches = _FakeSwitches(switches=_real_switches(3))
    trigger, *_ = _make(switches=switches)
    trigger.validate()
    assert not trigger.switches.placeholder

    switches.connected = False
    trigger.validate()
    assert trigger.switches.placeholder
    assert len(trigger.switches) == 20
    assert "Switch Not Connected" in trigger.issues


def test_switch_reconnect_restores_configured_index():
    switches = _FakeSwitches(connected=False)
    trigger, *_ = _make(switches=switches)
    trigger.switch_index = 2
    trigger.validate()
    assert trigger.switches.placeholder

    real = _real_switches(5)
    switches.connected = True
    switches.switches = real
    trigger.validate()
    assert trigger.selected_switch == real[2]
    assert trigger.switch_index == 2
    assert "No Writable Switch" not in trigger.issues
    assert trigger.issues == []


def test_out_of_range_index_clears_selection():
    trigger, *_ = _make(switches=_FakeSwitches(switches=_real_switches(2)))
    trigger.switch_index = 7
    assert trigger.validate() is False
    assert trigger.selected_switch is None
    assert trigger.issues == ["No Switch Selected"]
    assert trigger.switch_index == 7


def test_empty_switch_list_is_reported_and_index_kept():
    trigger, *_ = _make(switches=_FakeSwitches(switches=[]))
    trigger.switch_index = 1
    assert trigger.validate() is False
    assert trigger.issues == ["No Writable Switch", "No Switch Selected"]
    assert trigger.selected_switch is None
    assert trigger.switch_index == 1


def test_live_list_refreshes_when_devices_change():
    switches = _FakeSwitches(switches=_real_switches(2))
    trigger, *_ = _make(switches=switches)
    trigger.switch_index = 1
    trigger.validate()
    replacement = [_Switch("Fan"), _Switch("Heater", maximum=40)]
    switches.switches = replacement
    trigger.validate()
    assert trigger.selected_switch == replacement[1]


def test_desired_value_outside_switch_range():
    switch = _Switch("Dew heater", minimum=0, maximum=50, step_size=1)
    trigger, *_ = _make(switches=_FakeSwitches(switches=[switch]))
    trigger.desired_value = 75
    assert trigger.validate() is False
    assert trigger.issues == ["Invalid Switch Value. Expected range 0 to 50 with step 1."]


def test_fractional_switch_range_in_issue():
    switch = _Switch("Dimmer", minimum=0.5, maximum=2.5, step_size=0.5)
    trigger, *_ = _make(switches=_FakeSwitches(switches=[switch]))
    trigger.desired_value = 10
    trigger.validate()
    assert trigger.issues == ["Invalid Switch Value. Expected range 0.5 to 2.5 with step 0.5."]


def test_issue_order_for_everything_missing():
    trigger, *_ = _make(weather=_FakeWeather(connected=False), switches=_FakeSwitches(connected=False))
    trigger.validate()
    # Placeholder switches accept the default value, so nothing else is reported.
    assert trigger.issues == ["Weather Not Connected", "Switch Not Connected"]


def test_execute_posts_success_notification():
    trigger, _, _, notifier = _make()
    asyncio.run(trigger.async_execute(None, None))
    assert notifier.messages == ["Trigger was fired"]


def test_clone_copies_configuration_but_not_caches():
    trigger, weather, switches, notifier = _make(weather=_FakeWeather(humidity=80))
    trigger.name = "Dew control"
    trigger.switch_index = 3
    trigger.desired_value = 40
    trigger.humidity_threshold = 70
    trigger.validate()
    assert trigger.current_humidity == 80

    clone = trigger.clone()
    assert clone is not trigger
    assert clone.name == "Dew control"
    assert clone.category == trigger.category
    assert clone.switch_index == 3
    assert clone.desired_value == 40
    assert clone.humidity_threshold == 70
    assert clone.current_humidity == 0.0
    assert clone.issues == []
    assert clone.switches.placeholder

    assert clone.validate() is True
    assert clone.selected_switch == switches.switches[3]


def test_clone_does_not_share_listeners():
    trigger, *_ = _make()
    events = []
    trigger.add_listener(events.append)
    clone = trigger.clone()
    clone.desired_value = 50
    assert events == []


def test_persisted_fields_round_trip():
    trigger, weather, switches, notifier = _make()
    trigger.desired_value = 35
    trigger.humidity_threshold = 80
    trigger.switch_index = 4
    persisted = trigger.to_persisted()
    assert persisted == {"value": 35.0, "humidityThreshold": 80, "switchIndex": 4}

    restored = HumidityThresholdTrigger.from_persisted(weather, switches, notifier, persisted)
    assert restored.to_persisted() == persisted


def test_persisted_fields_are_clamped_and_defaulted():
    trigger, weather, switches, notifier = _make()
    restored = HumidityThresholdTrigger.from_persisted(
        weather, switches, notifier, {"value": "118", "humidityThreshold": -4, "extra": True}
    )
    assert restored.to_persisted() == {"value": 100.0, "humidityThreshold": 0, "switchIndex": 0}


def test_persisted_fields_reject_garbage():
    trigger, *_ = _make()
    with pytest.raises(vol.Invalid):
        trigger.apply_persisted({"value": "lots"})


def test_listener_can_unsubscribe_and_failures_are_contained():
    trigger, *_ = _make()
    events = []

    def _broken(field_name):
        raise RuntimeError("boom")

    trigger.add_listener(_broken)
    remove = trigger.add_listener(events.append)
    trigger.humidity_threshold = 10
    assert events == ["humidity_threshold"]
    remove()
    trigger.humidity_threshold = 20
    assert events == ["humidity_threshold"]


def test_string_form_names_category_and_item():
    trigger, *_ = _make()
    assert str(trigger) == "Category: Switch, Item: HumidityThresholdTrigger"
