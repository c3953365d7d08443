"""Drink events and alcohol content helpers for BAC tracking.

A drink is logged as volume (mL) and alcohol by volume (%), stamped with
the instant it was consumed in milliseconds since the epoch.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

from buzzgauge.errors import InvalidInput

# Ethanol density (g/mL) for volume x ABV -> grams.
ETHANOL_DENSITY = 0.789

# Ranges offered by the add-drink form; used to clamp untrusted input.
MIN_VOLUME_ML = 30.0
MAX_VOLUME_ML = 500.0
DEFAULT_VOLUME_ML = 500.0
MIN_ABV_PERCENT = 2.0
MAX_ABV_PERCENT = 45.0
DEFAULT_ABV_PERCENT = 5.0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class DrinkEvent:
    """One consumption event. Immutable once created."""

    occurred_at: int  # ms since epoch
    volume_ml: float
    abv_percent: float  # e.g. 5.0 for 5%

    def __post_init__(self):
        if not isinstance(self.occurred_at, int) or isinstance(self.occurred_at, bool):
            raise InvalidInput(f"occurred_at must be integer milliseconds, got {self.occurred_at!r}")
        if not _is_number(self.volume_ml) or not math.isfinite(self.volume_ml) or self.volume_ml <= 0:
            raise InvalidInput(f"volume_ml must be > 0, got {self.volume_ml!r}")
        if not _is_number(self.abv_percent) or not (0 < self.abv_percent <= 100):
            raise InvalidInput(f"abv_percent must be in (0, 100], got {self.abv_percent!r}")

    def to_dict(self) -> Dict[str, Any]:
        """Persisted shape, same keys the browser app keeps in local storage."""
        return {
            "timestamp": self.occurred_at,
            "volume": self.volume_ml,
            "alcoholPercentage": self.abv_percent,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "DrinkEvent":
        if not isinstance(raw, dict):
            raise InvalidInput(f"drink record must be an object, got {type(raw).__name__}")
        try:
            timestamp = raw["timestamp"]
            volume = raw["volume"]
            abv = raw["alcoholPercentage"]
        except KeyError as exc:
            raise InvalidInput(f"drink record missing field {exc.args[0]!r}") from exc
        # JSON numbers may arrive as floats (e.g. 1700000000000.0).
        if isinstance(timestamp, float) and timestamp.is_integer():
            timestamp = int(timestamp)
        return cls(occurred_at=timestamp, volume_ml=volume, abv_percent=abv)


def alcohol_grams(event: DrinkEvent) -> float:
    """Grams of ethanol in a drink."""
    return event.volume_ml * (event.abv_percent / 100.0) * ETHANOL_DENSITY
