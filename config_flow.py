"""Config flow for the Humidity Switch Control integration."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import voluptuous as vol
from homeassistant import config_entries
from homeassistant.helpers import selector

from .const import (
    BINARY_SWITCH_DOMAINS,
    CONF_EVALUATION_INTERVAL,
    CONF_HUMIDITY_THRESHOLD,
    CONF_SWITCH_ENTITIES,
    CONF_SWITCH_INDEX,
    CONF_VALUE,
    CONF_WEATHER_ENTITY,
    DEFAULT_HUMIDITY_THRESHOLD,
    DEFAULT_SWITCH_INDEX,
    DEFAULT_VALUE,
    DOMAIN,
    EVALUATION_INTERVAL_DEFAULT,
    EVALUATION_INTERVAL_MAX,
    EVALUATION_INTERVAL_MIN,
    HUMIDITY_THRESHOLD_MAX,
    HUMIDITY_THRESHOLD_MIN,
    NUMERIC_SWITCH_DOMAINS,
    TRIGGER_NAME,
    VALUE_MAX,
    VALUE_MIN,
    VALUE_STEP,
)
from .helpers.validators import bounded_float, bounded_int

_LOGGER = logging.getLogger(__name__)


class HumiditySwitchControlConfigFlow(config_entries.ConfigFlow, domain=DOMAIN):
    """Handle a config flow for Humidity Switch Control."""

    VERSION = 1
    MINOR_VERSION = 0

    @staticmethod
    def async_get_options_flow(config_entry: config_entries.ConfigEntry):
        return HumiditySwitchControlOptionsFlow(config_entry)

    async def async_step_user(self, user_input: Optional[Dict[str, Any]] = None):
        """Collect the weather source, the switches and the trigger settings."""
        errors: Dict[str, str] = {}
        if user_input is not None:
            data, errors = _validate_input(user_input)
            if not errors:
                await self.async_set_unique_id(data[CONF_WEATHER_ENTITY])
                self._abort_if_unique_id_configured()
                return self.async_create_entry(title=TRIGGER_NAME, data=data)

        return self.async_show_form(
            step_id="user",
            data_schema=_settings_schema(user_input or {}),
            errors=errors,
        )


class HumiditySwitchControlOptionsFlow(config_entries.OptionsFlow):
    """Options flow for Humidity Switch Control."""

    def __init__(self, entry: config_entries.ConfigEntry) -> None:
        self._entry = entry

    async def async_step_init(self, user_input: Optional[Dict[str, Any]] = None):
        errors: Dict[str, str] = {}
        if user_input is not None:
            data, errors = _validate_input(user_input)
            if not errors:
                return self.async_create_entry(title="", data=data)

        current = dict(self._entry.data or {})
        current.update(self._entry.options or {})
        return self.async_show_form(
            step_id="init",
            data_schema=_settings_schema(user_input or current),
            errors=errors,
        )


def _settings_schema(defaults: Dict[str, Any]) -> vol.Schema:
    return vol.Schema({
        vol.Required(CONF_WEATHER_ENTITY, default=defaults.get(CONF_WEATHER_ENTITY, vol.UNDEFINED)): selector.EntitySelector(
            selector.EntitySelectorConfig(domain=["weather", "sensor"])
        ),
        vol.Optional(CONF_SWITCH_ENTITIES, default=defaults.get(CONF_SWITCH_ENTITIES, [])): selector.EntitySelector(
            selector.EntitySelectorConfig(
                domain=list(NUMERIC_SWITCH_DOMAINS + BINARY_SWITCH_DOMAINS),
                multiple=True,
            )
        ),
        vol.Optional(CONF_SWITCH_INDEX, default=defaults.get(CONF_SWITCH_INDEX, DEFAULT_SWITCH_INDEX)): selector.NumberSelector(
            selector.NumberSelectorConfig(min=0, step=1, mode=selector.NumberSelectorMode.BOX)
        ),
        vol.Optional(CONF_VALUE, default=defaults.get(CONF_VALUE, DEFAULT_VALUE)): selector.NumberSelector(
            selector.NumberSelectorConfig(
                min=VALUE_MIN,
                max=VALUE_MAX,
                step=VALUE_STEP,
                mode=selector.NumberSelectorMode.SLIDER,
            )
        ),
        vol.Optional(
            CONF_HUMIDITY_THRESHOLD,
            default=defaults.get(CONF_HUMIDITY_THRESHOLD, DEFAULT_HUMIDITY_THRESHOLD),
        ): selector.NumberSelector(
            selector.NumberSelectorConfig(
                min=HUMIDITY_THRESHOLD_MIN,
                max=HUMIDITY_THRESHOLD_MAX,
                step=1,
                mode=selector.NumberSelectorMode.SLIDER,
                unit_of_measurement="%",
            )
        ),
        vol.Optional(
            CONF_EVALUATION_INTERVAL,
            default=defaults.get(CONF_EVALUATION_INTERVAL, EVALUATION_INTERVAL_DEFAULT),
        ): selector.NumberSelector(
            selector.NumberSelectorConfig(
                min=EVALUATION_INTERVAL_MIN,
                max=EVALUATION_INTERVAL_MAX,
                step=1,
                mode=selector.NumberSelectorMode.BOX,
                unit_of_measurement="s",
            )
        ),
    })


_FIELD_VALIDATORS = {
    CONF_SWITCH_INDEX: bounded_int(0, 32767),
    CONF_VALUE: bounded_float(VALUE_MIN, VALUE_MAX),
    CONF_HUMIDITY_THRESHOLD: bounded_int(HUMIDITY_THRESHOLD_MIN, HUMIDITY_THRESHOLD_MAX),
    CONF_EVALUATION_INTERVAL: bounded_int(EVALUATION_INTERVAL_MIN, EVALUATION_INTERVAL_MAX),
}


def _validate_input(user_input: Dict[str, Any]) -> tuple[Dict[str, Any], Dict[str, str]]:
    """Coerce selector output into stored types; return (data, errors)."""
    errors: Dict[str, str] = {}
    data: Dict[str, Any] = {
        CONF_WEATHER_ENTITY: user_input.get(CONF_WEATHER_ENTITY),
        CONF_SWITCH_ENTITIES: list(user_input.get(CONF_SWITCH_ENTITIES) or []),
    }
    if not data[CONF_WEATHER_ENTITY]:
        errors[CONF_WEATHER_ENTITY] = "required"
    for key, validator in _FIELD_VALIDATORS.items():
        if key not in user_input:
            continue
        try:
            data[key] = validator(user_input[key])
        except vol.Invalid as err:
            _LOGGER.debug("Rejected %s=%r: %s", key, user_input[key], err)
            errors[key] = "out_of_range"
    return data, errors
