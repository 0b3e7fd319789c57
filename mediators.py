"""Home Assistant backed sources for the humidity trigger."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from homeassistant.const import STATE_UNAVAILABLE, STATE_UNKNOWN
from homeassistant.core import HomeAssistant

from .const import BINARY_SWITCH_DOMAINS, NUMERIC_SWITCH_DOMAINS, TRIGGER_NAME
from .models import SwitchInfo, WeatherInfo

_LOGGER = logging.getLogger(__name__)

_MISSING_STATES = {STATE_UNAVAILABLE, STATE_UNKNOWN}


@dataclass(frozen=True)
class HassWritableSwitch:
    """Switch handle for a Home Assistant entity."""

    entity_id: str
    name: str
    minimum: float
    maximum: float
    step_size: float


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


class HassWeatherSource:
    """Read humidity from a weather entity or a humidity sensor.

    ``weather.*`` entities carry humidity as an attribute; any other entity is
    expected to report the humidity as its state.
    """

    def __init__(self, hass: HomeAssistant, entity_id: str) -> None:
        self.hass = hass
        self.entity_id = entity_id

    def get_info(self) -> WeatherInfo:
        state = self.hass.states.get(self.entity_id)
        if state is None or state.state in _MISSING_STATES:
            return WeatherInfo(connected=False)
        if self.entity_id.split(".")[0] == "weather":
            humidity = _to_float(state.attributes.get("humidity"))
        else:
            humidity = _to_float(state.state)
        return WeatherInfo(connected=True, humidity=humidity)


class HassSwitchSource:
    """Expose configured entities as an ordered list of writable switches."""

    def __init__(self, hass: HomeAssistant, entity_ids: Sequence[str]) -> None:
        self.hass = hass
        self.entity_ids = list(entity_ids)

    def get_info(self) -> SwitchInfo:
        switches: List[HassWritableSwitch] = []
        connected = False
        for entity_id in self.entity_ids:
            state = self.hass.states.get(entity_id)
            if state is None:
                continue
            if state.state != STATE_UNAVAILABLE:
                connected = True
            switch = _switch_from_state(entity_id, state)
            if switch is not None:
                switches.append(switch)
        return SwitchInfo(connected=connected, writable_switches=tuple(switches))


def _switch_from_state(entity_id: str, state) -> Optional[HassWritableSwitch]:
    domain = entity_id.split(".")[0]
    name = state.attributes.get("friendly_name") or entity_id
    if domain in NUMERIC_SWITCH_DOMAINS:
        minimum = _to_float(state.attributes.get("min"))
        maximum = _to_float(state.attributes.get("max"))
        step = _to_float(state.attributes.get("step"))
        return HassWritableSwitch(
            entity_id=entity_id,
            name=name,
            minimum=0.0 if minimum is None else minimum,
            maximum=100.0 if maximum is None else maximum,
            step_size=1.0 if step is None else step,
        )
    if domain in BINARY_SWITCH_DOMAINS:
        return HassWritableSwitch(entity_id, name, 0.0, 1.0, 1.0)
    _LOGGER.debug("Ignoring %s; %s entities cannot be written as switches", entity_id, domain)
    return None


class HassNotifier:
    """Post trigger notifications as persistent notifications."""

    def __init__(self, hass: HomeAssistant, title: str = TRIGGER_NAME) -> None:
        self.hass = hass
        self.title = title

    def show_success(self, message: str) -> None:
        try:
            self.hass.async_create_task(
                self.hass.services.async_call(
                    "persistent_notification",
                    "create",
                    {"title": self.title, "message": message},
                    blocking=False,
                )
            )
        except Exception:
            _LOGGER.exception("Failed to post notification %r", message)
