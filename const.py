"""Constants for the Humidity Switch Control integration."""

from __future__ import annotations

DOMAIN: str = "humidity_switch_control"

# Version of the config entry data schema. Increment when migrating structure.
CONF_VERSION: int = 1

# Config entry keys
CONF_WEATHER_ENTITY = "weather_entity"
CONF_SWITCH_ENTITIES = "switch_entities"
CONF_EVALUATION_INTERVAL = "evaluation_interval_seconds"

# Persisted trigger fields. These names are part of the stored format.
CONF_VALUE = "value"
CONF_HUMIDITY_THRESHOLD = "humidityThreshold"
CONF_SWITCH_INDEX = "switchIndex"
PERSISTED_KEYS = (CONF_VALUE, CONF_HUMIDITY_THRESHOLD, CONF_SWITCH_INDEX)

# Display metadata
TRIGGER_NAME = "Humidity Switch Control"
TRIGGER_DESCRIPTION = "This trigger will turn on and off a switch type based on the humidity"
TRIGGER_ICON = "mdi:water-percent"
TRIGGER_CATEGORY = "Switch"

# Configuration defaults and bounds
DEFAULT_SWITCH_INDEX = 0
DEFAULT_VALUE = 0.0
DEFAULT_HUMIDITY_THRESHOLD = 50
VALUE_MIN = 0
VALUE_MAX = 100
VALUE_STEP = 5
HUMIDITY_THRESHOLD_MIN = 0
HUMIDITY_THRESHOLD_MAX = 100

EVALUATION_INTERVAL_DEFAULT = 60
EVALUATION_INTERVAL_MIN = 10
EVALUATION_INTERVAL_MAX = 3600

# Placeholder switch list shown while no switch source is connected
PLACEHOLDER_SWITCH_COUNT = 20
PLACEHOLDER_MINIMUM = 0.0
PLACEHOLDER_MAXIMUM = 100.0
PLACEHOLDER_STEP_SIZE = 5.0

# Validation issues
ISSUE_WEATHER_NOT_CONNECTED = "Weather Not Connected"
ISSUE_NO_HUMIDITY_DATA = "No Humidity Data"
ISSUE_SWITCH_NOT_CONNECTED = "Switch Not Connected"
ISSUE_NO_WRITABLE_SWITCH = "No Writable Switch"
ISSUE_NO_SWITCH_SELECTED = "No Switch Selected"
ISSUE_INVALID_SWITCH_VALUE = "Invalid Switch Value. Expected range {minimum:g} to {maximum:g} with step {step:g}."

TRIGGER_FIRED_MESSAGE = "Trigger was fired"

# Home Assistant entity domains usable as writable switches.
NUMERIC_SWITCH_DOMAINS = ("number", "input_number")
BINARY_SWITCH_DOMAINS = ("switch", "input_boolean", "light")
