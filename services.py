"""Service handlers for Humidity Switch Control."""

from __future__ import annotations

import logging
from typing import Callable, List

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers import config_validation as cv

from .const import DOMAIN
from .helpers.validators import finite_float

_LOGGER = logging.getLogger(__name__)

SERVICE_SET_DESIRED_VALUE = "set_desired_value"
SERVICE_SET_HUMIDITY_THRESHOLD = "set_humidity_threshold"
SERVICE_SELECT_SWITCH = "select_switch"
SERVICE_INCREASE_VALUE = "increase_value"
SERVICE_DECREASE_VALUE = "decrease_value"
SERVICE_VALIDATE = "validate"

ALL_SERVICES = (
    SERVICE_SET_DESIRED_VALUE,
    SERVICE_SET_HUMIDITY_THRESHOLD,
    SERVICE_SELECT_SWITCH,
    SERVICE_INCREASE_VALUE,
    SERVICE_DECREASE_VALUE,
    SERVICE_VALIDATE,
)

SERVICE_ENTRY_SCHEMA = vol.Schema({
    vol.Optional("entry_id"): cv.string,
})
SERVICE_SET_DESIRED_VALUE_SCHEMA = vol.Schema({
    vol.Optional("entry_id"): cv.string,
    vol.Required("value"): finite_float,
})
SERVICE_SET_HUMIDITY_THRESHOLD_SCHEMA = vol.Schema({
    vol.Optional("entry_id"): cv.string,
    vol.Required("threshold"): vol.All(finite_float, vol.Coerce(int)),
})
SERVICE_SELECT_SWITCH_SCHEMA = vol.Schema({
    vol.Optional("entry_id"): cv.string,
    vol.Required("index"): vol.All(vol.Coerce(int), vol.Range(min=0)),
})


async def async_register_services(hass: HomeAssistant) -> None:
    """Register services for the integration."""
    if hass.services.has_service(DOMAIN, SERVICE_VALIDATE):
        return

    def _register(service: str, apply: Callable, schema: vol.Schema) -> None:
        async def handler(call: ServiceCall) -> None:
            for entry in _resolve_entries(hass, call.data.get("entry_id")):
                data = hass.data[DOMAIN][entry.entry_id]
                trigger = data["trigger"]
                apply(trigger, call)
                # A written entry is re-evaluated by the entry update listener.
                wrote = _persist_fields(hass, entry, trigger)
                runner = data.get("runner")
                if runner and not wrote:
                    await runner.async_request_evaluate()

        hass.services.async_register(DOMAIN, service, handler, schema=schema)

    def _set_value(trigger, call: ServiceCall) -> None:
        trigger.desired_value = call.data["value"]

    def _set_threshold(trigger, call: ServiceCall) -> None:
        trigger.humidity_threshold = call.data["threshold"]

    def _select_switch(trigger, call: ServiceCall) -> None:
        trigger.switch_index = call.data["index"]

    _register(SERVICE_SET_DESIRED_VALUE, _set_value, SERVICE_SET_DESIRED_VALUE_SCHEMA)
    _register(SERVICE_SET_HUMIDITY_THRESHOLD, _set_threshold, SERVICE_SET_HUMIDITY_THRESHOLD_SCHEMA)
    _register(SERVICE_SELECT_SWITCH, _select_switch, SERVICE_SELECT_SWITCH_SCHEMA)
    _register(SERVICE_INCREASE_VALUE, lambda trigger, call: trigger.increase_value(), SERVICE_ENTRY_SCHEMA)
    _register(SERVICE_DECREASE_VALUE, lambda trigger, call: trigger.decrease_value(), SERVICE_ENTRY_SCHEMA)
    _register(SERVICE_VALIDATE, lambda trigger, call: None, SERVICE_ENTRY_SCHEMA)


async def async_unregister_services(hass: HomeAssistant) -> None:
    """Unregister services for the integration."""
    for service in ALL_SERVICES:
        if hass.services.has_service(DOMAIN, service):
            hass.services.async_remove(DOMAIN, service)


def _resolve_entries(hass: HomeAssistant, entry_id: str | None) -> List:
    loaded = hass.data.get(DOMAIN, {})
    if entry_id:
        entry = hass.config_entries.async_get_entry(entry_id)
        if entry is None or entry_id not in loaded:
            raise HomeAssistantError(f"Humidity Switch Control entry {entry_id} is not loaded")
        return [entry]
    entries = [entry for entry in hass.config_entries.async_entries(DOMAIN) if entry.entry_id in loaded]
    if not entries:
        raise HomeAssistantError("No Humidity Switch Control config entry found")
    return entries


def _persist_fields(hass: HomeAssistant, entry, trigger) -> bool:
    persisted = trigger.to_persisted()
    options = dict(entry.options or {})
    if all(options.get(key) == value for key, value in persisted.items()):
        return False
    options.update(persisted)
    # Keep the runtime copy in step so the update listener applies in place.
    data = hass.data[DOMAIN][entry.entry_id]
    data["config"] = {**data.get("config", {}), **persisted}
    hass.config_entries.async_update_entry(entry, options=options)
    _LOGGER.debug("Persisted %s for entry %s", persisted, entry.entry_id)
    return True
