"""Binary sensor platform for Humidity Switch Control."""

from __future__ import annotations

from typing import Any, Dict

from homeassistant.core import HomeAssistant
from homeassistant.config_entries import ConfigEntry
from homeassistant.components.binary_sensor import BinarySensorEntity
from homeassistant.helpers.device_registry import DeviceInfo

from .const import DOMAIN
from .trigger import HumidityThresholdTrigger


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry, async_add_entities) -> None:
    trigger = hass.data[DOMAIN][entry.entry_id]["trigger"]
    async_add_entities([HSCTriggerBinarySensor(entry.entry_id, trigger)])


class HSCTriggerBinarySensor(BinarySensorEntity):
    """Report whether humidity is above the threshold, with validation issues."""

    _attr_should_poll = False

    def __init__(self, entry_id: str, trigger: HumidityThresholdTrigger) -> None:
        self._trigger = trigger
        self._attr_name = trigger.name
        self._attr_icon = trigger.icon
        self._attr_unique_id = f"hsc_{entry_id}_trigger"
        self._attr_device_info = DeviceInfo(
            identifiers={(DOMAIN, entry_id)},
            name=trigger.name,
            manufacturer="Humidity Switch Control",
        )

    @property
    def is_on(self) -> bool:
        return self._trigger.is_switch_on

    @property
    def extra_state_attributes(self) -> Dict[str, Any]:
        trigger = self._trigger
        selected = trigger.selected_switch
        return {
            "description": trigger.description,
            "category": trigger.category,
            "issues": trigger.issues,
            "current_humidity": trigger.current_humidity,
            "humidity_threshold": trigger.humidity_threshold,
            "desired_value": trigger.desired_value,
            "switch_index": trigger.switch_index,
            "selected_switch": getattr(selected, "entity_id", None) or getattr(selected, "name", None),
            "placeholder_switches": trigger.switches.placeholder,
        }

    async def async_added_to_hass(self) -> None:
        self.async_on_remove(self._trigger.add_listener(self._handle_trigger_change))

    def _handle_trigger_change(self, field_name: str) -> None:
        self.async_write_ha_state()
