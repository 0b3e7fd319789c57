"""Humidity Switch Control integration for Home Assistant."""

from __future__ import annotations

import logging
from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant

from .const import (
    CONF_EVALUATION_INTERVAL,
    CONF_SWITCH_ENTITIES,
    CONF_WEATHER_ENTITY,
    DOMAIN,
    PERSISTED_KEYS,
)
from .mediators import HassNotifier, HassSwitchSource, HassWeatherSource
from .services import async_register_services, async_unregister_services
from .trigger import HumidityThresholdTrigger
from .automations import async_setup_entry as async_setup_runner
from .automations import async_unload_entry as async_unload_runner

_LOGGER = logging.getLogger(__name__)

PLATFORMS = ["binary_sensor"]

# Changing any of these needs fresh sources and event subscriptions.
RELOAD_KEYS = (CONF_WEATHER_ENTITY, CONF_SWITCH_ENTITIES, CONF_EVALUATION_INTERVAL)


async def async_setup(hass: HomeAssistant, config: dict) -> bool:
    """Set up the Humidity Switch Control integration via YAML."""
    if DOMAIN in config:
        _LOGGER.warning(
            "Configuration via YAML is not supported for %s; please use the configuration UI.",
            DOMAIN,
        )
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Humidity Switch Control from a config entry."""
    entry.async_on_unload(entry.add_update_listener(_async_entry_updated))
    effective_config = _effective_entry_config(entry)
    trigger = build_trigger(hass, effective_config)
    hass.data.setdefault(DOMAIN, {})
    hass.data[DOMAIN][entry.entry_id] = {
        "config": effective_config,
        "options": entry.options,
        "trigger": trigger,
    }

    await async_register_services(hass)
    await hass.config_entries.async_forward_entry_setups(entry, PLATFORMS)
    await async_setup_runner(hass, entry)

    _LOGGER.info("Humidity Switch Control entry %s set up (%s)", entry.entry_id, trigger)
    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry."""
    unload_ok = await hass.config_entries.async_unload_platforms(entry, PLATFORMS)
    await async_unload_runner(hass, entry)
    hass.data.get(DOMAIN, {}).pop(entry.entry_id, None)
    if not hass.data.get(DOMAIN):
        await async_unregister_services(hass)
    return unload_ok


def build_trigger(hass: HomeAssistant, config: dict) -> HumidityThresholdTrigger:
    """Create a trigger wired to Home Assistant sources from an entry config."""
    weather = HassWeatherSource(hass, config.get(CONF_WEATHER_ENTITY, ""))
    switches = HassSwitchSource(hass, config.get(CONF_SWITCH_ENTITIES) or [])
    persisted = {key: config[key] for key in PERSISTED_KEYS if key in config}
    return HumidityThresholdTrigger.from_persisted(weather, switches, HassNotifier(hass), persisted)


def _effective_entry_config(entry: ConfigEntry) -> dict:
    config = dict(entry.data or {})
    options = dict(entry.options or {})
    config.update(options)
    return config


async def _async_entry_updated(hass: HomeAssistant, entry: ConfigEntry) -> None:
    """Apply persisted field updates in place; reload when sources change."""
    data = hass.data.get(DOMAIN, {}).get(entry.entry_id)
    if data is None:
        return
    new_config = _effective_entry_config(entry)
    old_config = data.get("config", {})
    if any(new_config.get(key) != old_config.get(key) for key in RELOAD_KEYS):
        await hass.config_entries.async_reload(entry.entry_id)
        return

    data["config"] = new_config
    data["options"] = entry.options
    trigger: HumidityThresholdTrigger = data["trigger"]
    trigger.apply_persisted({key: new_config[key] for key in PERSISTED_KEYS if key in new_config})
    runner = data.get("runner")
    if runner:
        await runner.async_request_evaluate()
