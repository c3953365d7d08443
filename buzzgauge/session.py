"""
Drinking session: profile plus drink log, with BAC and countdown helpers.
Time: epoch milliseconds; every query takes ``now`` explicitly.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from buzzgauge import calculations
from buzzgauge.drinks import DrinkEvent
from buzzgauge.profile import DEFAULT_PROFILE, Profile


def now_ms() -> int:
    return int(time.time() * 1000)


def format_duration(ms: float) -> str:
    """Render a duration as HH:MM (minutes rounded up so 0:00 means done)."""
    total_minutes = int(-(-ms // 60000)) if ms > 0 else 0
    hours, minutes = divmod(total_minutes, 60)
    return f"{hours:02d}:{minutes:02d}"


@dataclass
class Session:
    profile: Profile = DEFAULT_PROFILE
    _events: List[DrinkEvent] = field(default_factory=list)

    def add_drink(self, volume_ml: float, abv_percent: float, at: Optional[int] = None) -> DrinkEvent:
        event = DrinkEvent(occurred_at=now_ms() if at is None else at, volume_ml=volume_ml, abv_percent=abv_percent)
        self._events.append(event)
        return event

    def add_event(self, event: DrinkEvent) -> None:
        self._events.append(event)

    def remove_drink(self, index: int) -> DrinkEvent:
        """Remove a drink by its position in the chronological log."""
        ordered = self.events
        if not 0 <= index < len(ordered):
            raise IndexError(f"no drink at index {index}")
        target = ordered[index]
        self._events.remove(target)
        return target

    def clear(self) -> None:
        self._events.clear()

    @property
    def events(self) -> List[DrinkEvent]:
        return sorted(self._events, key=lambda e: e.occurred_at)

    @property
    def drink_count(self) -> int:
        return len(self._events)

    def bac_now(self, now: int) -> float:
        return calculations.evaluate_bac(self._events, self.profile, now)

    def curve(self, now: int) -> List[calculations.Sample]:
        return calculations.synthesize_series(self._events, self.profile, now)

    def is_over_limit(self, now: int) -> bool:
        return self.bac_now(now) > self.profile.legal_limit_percent

    def ms_until_sober(self, now: int) -> float:
        return calculations.time_until_target(self.bac_now(now), 0.0)

    def ms_until_legal(self, now: int) -> float:
        return calculations.time_until_target(self.bac_now(now), self.profile.legal_limit_percent)

    def sober_at(self, now: int) -> int:
        return int(now + self.ms_until_sober(now))

    def legal_at(self, now: int) -> int:
        return int(now + self.ms_until_legal(now))

    def clear_if_sober(self, now: int) -> bool:
        """End the session once BAC is back to zero and nothing is scheduled ahead."""
        if not self._events:
            return False
        if any(e.occurred_at > now for e in self._events):
            return False
        if self.bac_now(now) > 0:
            return False
        self.clear()
        return True

    def snapshot(self, now: int) -> Dict[str, Any]:
        bac = self.bac_now(now)
        until_legal = self.ms_until_legal(now)
        until_sober = self.ms_until_sober(now)
        return {
            "now": now,
            "profile": self.profile.to_dict(),
            "bac_now": round(bac, 4),
            "over_limit": bac > self.profile.legal_limit_percent,
            "ms_until_legal": until_legal,
            "ms_until_sober": until_sober,
            "time_until_legal": format_duration(until_legal),
            "time_until_sober": format_duration(until_sober),
            "legal_at": int(now + until_legal),
            "sober_at": int(now + until_sober),
            "drink_count": self.drink_count,
            "drinks": [e.to_dict() for e in self.events],
            "curve": [{"time": s.time, "level": s.level, "is_peak": s.is_peak} for s in self.curve(now)],
        }
