"""Device data model for Humidity Switch Control.

The weather and switch sources report plain info objects. Switch handles
are compared by value, so reading an unchanged device twice yields equal
handles and the trigger does not churn its selection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence, Tuple

from .const import (
    PLACEHOLDER_MAXIMUM,
    PLACEHOLDER_MINIMUM,
    PLACEHOLDER_STEP_SIZE,
    PLACEHOLDER_SWITCH_COUNT,
)


class WritableSwitch(Protocol):
    """A controllable device accepting a numeric value."""

    @property
    def minimum(self) -> float: ...

    @property
    def maximum(self) -> float: ...

    @property
    def step_size(self) -> float: ...


@dataclass(frozen=True)
class PlaceholderSwitch:
    """Synthetic switch listed while no real switch source is connected."""

    id: int
    name: str
    minimum: float = PLACEHOLDER_MINIMUM
    maximum: float = PLACEHOLDER_MAXIMUM
    step_size: float = PLACEHOLDER_STEP_SIZE


@dataclass(frozen=True)
class WeatherInfo:
    connected: bool
    humidity: Optional[float] = None


@dataclass(frozen=True)
class SwitchInfo:
    connected: bool
    writable_switches: Tuple[WritableSwitch, ...] = ()


class WeatherSource(Protocol):
    def get_info(self) -> Optional[WeatherInfo]: ...


class SwitchSource(Protocol):
    def get_info(self) -> Optional[SwitchInfo]: ...


class Notifier(Protocol):
    def show_success(self, message: str) -> None: ...


@dataclass(frozen=True)
class SwitchList:
    """Ordered switch handles tagged as placeholder or live."""

    switches: Tuple[WritableSwitch, ...] = ()
    placeholder: bool = False

    @classmethod
    def live(cls, switches: Sequence[WritableSwitch]) -> "SwitchList":
        return cls(tuple(switches), placeholder=False)

    @classmethod
    def placeholders(cls, count: int = PLACEHOLDER_SWITCH_COUNT) -> "SwitchList":
        """Return a fresh placeholder list with ids starting at 1."""
        switches = tuple(PlaceholderSwitch(i, f"Switch {i}") for i in range(1, count + 1))
        return cls(switches, placeholder=True)

    def __len__(self) -> int:
        return len(self.switches)

    def __getitem__(self, index: int) -> WritableSwitch:
        return self.switches[index]

    def __iter__(self):
        return iter(self.switches)

    def in_range(self, index: int) -> bool:
        return 0 <= index < len(self.switches)

    def index_of(self, switch: Optional[WritableSwitch]) -> int:
        if switch is None:
            return -1
        for idx, candidate in enumerate(self.switches):
            if candidate == switch:
                return idx
        return -1
