"""Physiological and regulatory settings for the BAC model.

Widmark distribution ratio (r) by sex:
- male: 0.68
- female: 0.55
"""

import math
from dataclasses import dataclass
from typing import Any, Dict

from buzzgauge.errors import InvalidInput

DISTRIBUTION_RATIOS = {
    "male": 0.68,
    "female": 0.55,
}

# Settings dialog ranges.
MIN_WEIGHT_KG = 30.0
MAX_WEIGHT_KG = 200.0
MIN_LIMIT_PERCENT = 0.0
MAX_LIMIT_PERCENT = 0.08

DEFAULT_SEX = "male"
DEFAULT_WEIGHT_KG = 75.0
DEFAULT_LIMIT_PERCENT = 0.05


def _finite(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class Profile:
    sex: str = DEFAULT_SEX
    weight_kg: float = DEFAULT_WEIGHT_KG
    legal_limit_percent: float = DEFAULT_LIMIT_PERCENT

    def __post_init__(self):
        if self.sex not in DISTRIBUTION_RATIOS:
            raise InvalidInput(f"sex must be one of {sorted(DISTRIBUTION_RATIOS)}, got {self.sex!r}")
        if not _finite(self.weight_kg) or self.weight_kg <= 0:
            raise InvalidInput(f"weight_kg must be > 0, got {self.weight_kg!r}")
        if not _finite(self.legal_limit_percent) or self.legal_limit_percent < 0:
            raise InvalidInput(f"legal_limit_percent must be >= 0, got {self.legal_limit_percent!r}")

    @property
    def distribution_ratio(self) -> float:
        return DISTRIBUTION_RATIOS[self.sex]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "gender": self.sex,
            "weight": self.weight_kg,
            "bacLimit": self.legal_limit_percent,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "Profile":
        """Build a profile from stored settings.

        Each field falls back to its default on its own when missing, null or
        out of range.
        """
        if not isinstance(raw, dict):
            return DEFAULT_PROFILE
        sex = raw.get("gender")
        if not isinstance(sex, str) or sex not in DISTRIBUTION_RATIOS:
            sex = DEFAULT_SEX
        weight = raw.get("weight")
        if not _finite(weight) or weight <= 0:
            weight = DEFAULT_WEIGHT_KG
        limit = raw.get("bacLimit")
        if not _finite(limit) or limit < 0:
            limit = DEFAULT_LIMIT_PERCENT
        return cls(sex=sex, weight_kg=weight, legal_limit_percent=limit)


DEFAULT_PROFILE = Profile()
