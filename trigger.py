"""Humidity threshold trigger.

The trigger reads humidity from a weather source, compares it with a
configured threshold and validates the target switch before the host is
allowed to run it. It does not know about Home Assistant; the host passes
in the weather source, switch source and notifier.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, List, Mapping, Optional

from .const import (
    CONF_HUMIDITY_THRESHOLD,
    CONF_SWITCH_INDEX,
    CONF_VALUE,
    DEFAULT_HUMIDITY_THRESHOLD,
    DEFAULT_SWITCH_INDEX,
    DEFAULT_VALUE,
    HUMIDITY_THRESHOLD_MAX,
    HUMIDITY_THRESHOLD_MIN,
    ISSUE_INVALID_SWITCH_VALUE,
    ISSUE_NO_HUMIDITY_DATA,
    ISSUE_NO_SWITCH_SELECTED,
    ISSUE_NO_WRITABLE_SWITCH,
    ISSUE_SWITCH_NOT_CONNECTED,
    ISSUE_WEATHER_NOT_CONNECTED,
    TRIGGER_CATEGORY,
    TRIGGER_DESCRIPTION,
    TRIGGER_FIRED_MESSAGE,
    TRIGGER_ICON,
    TRIGGER_NAME,
    VALUE_MAX,
    VALUE_MIN,
    VALUE_STEP,
)
from .helpers.validators import PERSISTED_SCHEMA
from .models import Notifier, SwitchList, SwitchSource, WeatherSource, WritableSwitch

_LOGGER = logging.getLogger(__name__)

_VALUE_EPSILON = 1e-9

Listener = Callable[[str], None]


def quantize_value(value: float) -> float:
    """Clamp to the allowed range and round to the nearest value step."""
    clamped = max(VALUE_MIN, min(VALUE_MAX, float(value)))
    return float(round(clamped / VALUE_STEP) * VALUE_STEP)


def clamp_threshold(value: Any) -> int:
    return int(max(HUMIDITY_THRESHOLD_MIN, min(HUMIDITY_THRESHOLD_MAX, float(value))))


class HumidityThresholdTrigger:
    """Fire when ambient humidity rises above a threshold."""

    def __init__(
        self,
        weather: WeatherSource,
        switches: SwitchSource,
        notifier: Notifier,
    ) -> None:
        self._weather = weather
        self._switch_source = switches
        self._notifier = notifier
        self._listeners: List[Listener] = []

        self.name = TRIGGER_NAME
        self.description = TRIGGER_DESCRIPTION
        self.icon = TRIGGER_ICON
        self.category = TRIGGER_CATEGORY

        self._issues: List[str] = []
        self._last_issues_snapshot: List[str] = []
        self._current_humidity = 0.0
        self._humidity_threshold = DEFAULT_HUMIDITY_THRESHOLD
        self._is_switch_on = False
        self._desired_value = DEFAULT_VALUE
        self._switch_index = DEFAULT_SWITCH_INDEX
        self._selected_switch: Optional[WritableSwitch] = None
        self._switches = SwitchList.placeholders()
        self.selected_switch = self._switches[0]

    @classmethod
    def from_persisted(
        cls,
        weather: WeatherSource,
        switches: SwitchSource,
        notifier: Notifier,
        data: Mapping[str, Any],
    ) -> "HumidityThresholdTrigger":
        trigger = cls(weather, switches, notifier)
        trigger.apply_persisted(data)
        return trigger

    def __str__(self) -> str:
        return f"Category: {self.category}, Item: {type(self).__name__}"

    # Change listeners

    def add_listener(self, listener: Listener) -> Callable[[], None]:
        """Register a callback receiving the name of each changed field."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self, field_name: str) -> None:
        for listener in list(self._listeners):
            try:
                listener(field_name)
            except Exception:
                _LOGGER.exception("Listener failed for %s change on %s", field_name, self)

    # Configuration

    @property
    def desired_value(self) -> float:
        return self._desired_value

    @desired_value.setter
    def desired_value(self, value: float) -> None:
        if math.isnan(value):
            return
        clamped = quantize_value(value)
        if abs(self._desired_value - clamped) > _VALUE_EPSILON:
            self._desired_value = clamped
            self._notify("desired_value")

    @property
    def humidity_threshold(self) -> int:
        return self._humidity_threshold

    @humidity_threshold.setter
    def humidity_threshold(self, value: int) -> None:
        if math.isnan(value):
            return
        clamped = clamp_threshold(value)
        if clamped != self._humidity_threshold:
            self._humidity_threshold = clamped
            self._notify("humidity_threshold")

    @property
    def switch_index(self) -> int:
        return self._switch_index

    @switch_index.setter
    def switch_index(self, value: int) -> None:
        # Negative indexes come from lookups of unknown switches; keep the
        # configured index so the selection can be restored on reconnect.
        if value > -1:
            self._switch_index = int(value)
            self._notify("switch_index")

    @property
    def selected_switch(self) -> Optional[WritableSwitch]:
        return self._selected_switch

    @selected_switch.setter
    def selected_switch(self, switch: Optional[WritableSwitch]) -> None:
        self._selected_switch = switch
        self.switch_index = self._switches.index_of(switch)
        self._notify("selected_switch")

    @property
    def switches(self) -> SwitchList:
        return self._switches

    @switches.setter
    def switches(self, switches: SwitchList) -> None:
        self._switches = switches
        self._notify("switches")

    @property
    def is_switch_on(self) -> bool:
        return self._is_switch_on

    def _set_switch_on(self, value: bool) -> None:
        if value != self._is_switch_on:
            self._is_switch_on = value
            self._notify("is_switch_on")

    @property
    def current_humidity(self) -> float:
        return self._current_humidity

    @property
    def issues(self) -> List[str]:
        return list(self._issues)

    def increase_value(self) -> None:
        if self._desired_value <= VALUE_MAX - VALUE_STEP:
            self.desired_value = self._desired_value + VALUE_STEP

    def decrease_value(self) -> None:
        if self._desired_value >= VALUE_MIN + VALUE_STEP:
            self.desired_value = self._desired_value - VALUE_STEP

    # Persistence

    def to_persisted(self) -> Dict[str, Any]:
        return {
            CONF_VALUE: self._desired_value,
            CONF_HUMIDITY_THRESHOLD: self._humidity_threshold,
            CONF_SWITCH_INDEX: self._switch_index,
        }

    def apply_persisted(self, data: Mapping[str, Any]) -> None:
        """Load persisted fields through the clamping setters.

        Raises ``voluptuous.Invalid`` when a field is not numeric.
        """
        fields = PERSISTED_SCHEMA(dict(data))
        self.switch_index = fields[CONF_SWITCH_INDEX]
        self.desired_value = fields[CONF_VALUE]
        self.humidity_threshold = fields[CONF_HUMIDITY_THRESHOLD]

    def clone(self) -> "HumidityThresholdTrigger":
        """Copy metadata and configuration onto a trigger with the same sources.

        Cached humidity, issues and the switch list start fresh, so the clone
        has to be validated before it is used.
        """
        clone = type(self)(self._weather, self._switch_source, self._notifier)
        clone.icon = self.icon
        clone.name = self.name
        clone.category = self.category
        clone.description = self.description
        clone.switch_index = self.switch_index
        clone.desired_value = self.desired_value
        clone.humidity_threshold = self.humidity_threshold
        return clone

    # Host lifecycle

    def validate(self) -> bool:
        """Rebuild the issue list from the current sources and configuration."""
        self._issues.clear()
        self._validate_weather()
        self._validate_switch_source()

        if self._switches.in_range(self._switch_index):
            if self._switches[self._switch_index] != self._selected_switch:
                self.selected_switch = self._switches[self._switch_index]

        selected = self._selected_switch
        if selected is None:
            self._issues.append(ISSUE_NO_SWITCH_SELECTED)
        elif self._desired_value < selected.minimum or self._desired_value > selected.maximum:
            self._issues.append(
                ISSUE_INVALID_SWITCH_VALUE.format(
                    minimum=selected.minimum,
                    maximum=selected.maximum,
                    step=selected.step_size,
                )
            )

        if self._issues != self._last_issues_snapshot:
            self._last_issues_snapshot = list(self._issues)
            _LOGGER.debug("%s issues changed: %s", self, self._issues)
            self._notify("issues")

        return not self._issues

    def _validate_weather(self) -> None:
        info = self._weather.get_info()
        if info is None or not info.connected:
            self._issues.append(ISSUE_WEATHER_NOT_CONNECTED)
            return
        humidity = info.humidity
        # Exactly 0% is treated as missing data, not as a dry reading.
        if humidity is None or math.isnan(humidity) or humidity <= 0.0 or humidity > 100.0:
            self._issues.append(ISSUE_NO_HUMIDITY_DATA)
            return
        self._current_humidity = float(humidity)
        self._set_switch_on(self._current_humidity > self._humidity_threshold)

    def _validate_switch_source(self) -> None:
        info = self._switch_source.get_info()
        if info is None or not info.connected:
            if not self._switches.placeholder:
                self.switches = SwitchList.placeholders()
            self._issues.append(ISSUE_SWITCH_NOT_CONNECTED)
            return

        reported = SwitchList.live(info.writable_switches)
        if self._switches.placeholder or self._switches != reported:
            self.switches = reported
            if reported.in_range(self._switch_index):
                self.selected_switch = reported[self._switch_index]
            else:
                self.selected_switch = None

        if not len(reported):
            if self._selected_switch is not None:
                self.selected_switch = None
            self._issues.append(ISSUE_NO_WRITABLE_SWITCH)

    def should_trigger(self, previous_item: Any = None, next_item: Any = None) -> bool:
        """Return whether the last observed humidity is above the threshold."""
        self._set_switch_on(self._current_humidity > self._humidity_threshold)
        return self._is_switch_on

    async def async_execute(self, context: Any = None, progress: Any = None) -> None:
        """Announce the trigger; nothing blocks, so cancellation has no effect."""
        _LOGGER.info(
            "%s fired at %s%% humidity (threshold %s%%)",
            self,
            self._current_humidity,
            self._humidity_threshold,
        )
        self._notifier.show_success(TRIGGER_FIRED_MESSAGE)
