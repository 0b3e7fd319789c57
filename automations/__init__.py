"""Trigger runner setup for Humidity Switch Control."""

from __future__ import annotations

from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry

from .engine import HSCTriggerRunner
from ..const import DOMAIN


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    data = hass.data.setdefault(DOMAIN, {}).setdefault(entry.entry_id, {})
    runner = HSCTriggerRunner(hass, entry, data["trigger"])
    data["runner"] = runner
    await runner.async_start()


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> None:
    runner = hass.data.get(DOMAIN, {}).get(entry.entry_id, {}).get("runner")
    if runner:
        await runner.async_stop()
