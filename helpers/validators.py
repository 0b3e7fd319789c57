"""Voluptuous validators for Humidity Switch Control."""

from __future__ import annotations

import math

import voluptuous as vol

from ..const import (
    CONF_HUMIDITY_THRESHOLD,
    CONF_SWITCH_INDEX,
    CONF_VALUE,
    DEFAULT_HUMIDITY_THRESHOLD,
    DEFAULT_SWITCH_INDEX,
    DEFAULT_VALUE,
)


def finite_float(value) -> float:
    """Coerce to float, rejecting NaN and infinities."""
    try:
        fval = float(value)
    except (TypeError, ValueError):
        raise vol.Invalid(f"{value!r} is not a valid number")
    if math.isnan(fval) or math.isinf(fval):
        raise vol.Invalid(f"{value!r} is not a finite number")
    return fval


def bounded_float(min_value: float, max_value: float) -> vol.Schema:
    """Return a schema that validates a finite float within a range."""

    def validate(value: float) -> float:
        fval = finite_float(value)
        if not min_value <= fval <= max_value:
            raise vol.Invalid(f"Value {fval} out of range [{min_value}, {max_value}]")
        return fval

    return vol.Schema(validate)


def bounded_int(min_value: int, max_value: int) -> vol.Schema:
    """Return a schema that validates an int within a range.

    Whole floats such as the ``3.0`` a number selector returns are accepted.
    """

    def validate(value: int) -> int:
        fval = finite_float(value)
        if not fval.is_integer():
            raise vol.Invalid(f"{value!r} is not a whole number")
        ival = int(fval)
        if not min_value <= ival <= max_value:
            raise vol.Invalid(f"Value {ival} out of range [{min_value}, {max_value}]")
        return ival

    return vol.Schema(validate)


# Range clamping is left to the trigger setters; only types are checked here.
PERSISTED_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_VALUE, default=DEFAULT_VALUE): finite_float,
        vol.Optional(CONF_HUMIDITY_THRESHOLD, default=DEFAULT_HUMIDITY_THRESHOLD): vol.All(
            finite_float, vol.Coerce(int)
        ),
        vol.Optional(CONF_SWITCH_INDEX, default=DEFAULT_SWITCH_INDEX): vol.All(
            finite_float, vol.Coerce(int)
        ),
    },
    extra=vol.REMOVE_EXTRA,
)
