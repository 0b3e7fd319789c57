"""Trigger runner for Humidity Switch Control.

Home Assistant has no sequencer, so the runner stands in for one: it
re-evaluates the trigger whenever a source entity changes and on a fixed
interval, and only runs the trigger action when validation passes.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import timedelta
from typing import Any, List, Optional

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers.event import async_track_state_change_event, async_track_time_interval

from ..const import (
    CONF_EVALUATION_INTERVAL,
    CONF_SWITCH_ENTITIES,
    CONF_WEATHER_ENTITY,
    DOMAIN,
    EVALUATION_INTERVAL_DEFAULT,
    EVALUATION_INTERVAL_MAX,
    EVALUATION_INTERVAL_MIN,
)
from ..trigger import HumidityThresholdTrigger

_LOGGER = logging.getLogger(__name__)


class HSCTriggerRunner:
    def __init__(self, hass: HomeAssistant, entry: ConfigEntry, trigger: HumidityThresholdTrigger) -> None:
        self.hass = hass
        self.entry = entry
        self.trigger = trigger
        self.weather_entity: Optional[str] = self._cfg(CONF_WEATHER_ENTITY, None)
        self.switch_entities: List[str] = list(self._cfg(CONF_SWITCH_ENTITIES, []) or [])
        self.evaluation_interval_seconds = _interval_seconds(
            self._cfg(CONF_EVALUATION_INTERVAL, EVALUATION_INTERVAL_DEFAULT)
        )
        self.last_valid = False
        self.fire_count = 0
        self._lock = asyncio.Lock()
        self._unsub = None
        self._periodic = None

    def _cfg(self, key: str, default: Any) -> Any:
        if self.entry.options and key in self.entry.options:
            return self.entry.options.get(key, default)
        return self.entry.data.get(key, default)

    def _evaluation_sources(self) -> List[str]:
        sources = list(self.switch_entities)
        if self.weather_entity:
            sources.insert(0, self.weather_entity)
        return sources

    async def async_start(self) -> None:
        self._unsub = async_track_state_change_event(self.hass, self._evaluation_sources(), self._handle_change)
        self._periodic = async_track_time_interval(
            self.hass,
            self._periodic_check,
            timedelta(seconds=self.evaluation_interval_seconds),
        )
        await self._evaluate()

    async def async_stop(self) -> None:
        if self._unsub:
            self._unsub()
            self._unsub = None
        if self._periodic:
            self._periodic()
            self._periodic = None

    async def _handle_change(self, event) -> None:
        await self._evaluate()

    async def _periodic_check(self, now) -> None:
        await self._evaluate()

    async def async_request_evaluate(self) -> None:
        """Request an immediate evaluation cycle."""
        await self._evaluate()

    async def _evaluate(self) -> None:
        async with self._lock:
            try:
                valid = self.trigger.validate()
                self.last_valid = valid
                self._store_runtime()
                if not valid:
                    _LOGGER.debug("%s blocked: %s", self.trigger, "; ".join(self.trigger.issues))
                    return
                if self.trigger.should_trigger(None, None):
                    await self.trigger.async_execute()
                    self.fire_count += 1
            except Exception:
                _LOGGER.exception("Trigger evaluation failed for entry %s", self.entry.entry_id)

    def _store_runtime(self) -> None:
        data = self.hass.data.setdefault(DOMAIN, {}).setdefault(self.entry.entry_id, {})
        data["issues"] = self.trigger.issues
        data["valid"] = self.last_valid
        data["is_switch_on"] = self.trigger.is_switch_on


def _interval_seconds(value: Any) -> int:
    try:
        seconds = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return EVALUATION_INTERVAL_DEFAULT
    return max(EVALUATION_INTERVAL_MIN, min(EVALUATION_INTERVAL_MAX, seconds))
