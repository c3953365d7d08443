"""BAC calculations using Widmark-style rise and linear elimination.

Model:
- Rise: BAC = [grams / (body_weight_g * r)] * 100, applied instantly at drink time
- r = 0.68 (male), 0.55 (female)
- Elimination: 0.015 BAC percentage points per hour, per drink

All functions are pure; the clock is always passed in as epoch milliseconds.
"""

from dataclasses import dataclass
from typing import Iterable, List

from buzzgauge.drinks import DrinkEvent, alcohol_grams
from buzzgauge.profile import Profile

# Elimination rate (% BAC per hour)
ELIMINATION_PER_HOUR = 0.015

MS_PER_HOUR = 60 * 60 * 1000


@dataclass(frozen=True)
class Sample:
    """One point of the BAC curve."""

    time: float  # ms since epoch
    level: float  # BAC %
    is_peak: bool = False


def peak_bac(event: DrinkEvent, profile: Profile) -> float:
    """Immediate BAC rise (%) from a single drink."""
    body_water_g = profile.weight_kg * 1000.0 * profile.distribution_ratio
    return (alcohol_grams(event) / body_water_g) * 100.0


def _decay(level: float, elapsed_ms: float) -> float:
    return max(0.0, level - ELIMINATION_PER_HOUR * (elapsed_ms / MS_PER_HOUR))


def evaluate_bac(events: Iterable[DrinkEvent], profile: Profile, at_time: int) -> float:
    """BAC (%) at ``at_time``; drinks logged after ``at_time`` are ignored."""
    bac = 0.0
    for event in events:
        if event.occurred_at > at_time:
            continue
        bac += _decay(peak_bac(event, profile), at_time - event.occurred_at)
    return bac


def _sort_key(event: DrinkEvent):
    # Ties on time are broken by the other fields so any input order gives the same curve.
    return (event.occurred_at, event.volume_ml, event.abv_percent)


def synthesize_series(events: Iterable[DrinkEvent], profile: Profile, now: int) -> List[Sample]:
    """Piecewise-linear BAC curve from the first drink until BAC returns to zero.

    Each drink yields a vertical rise (a sample before and a peak sample after
    absorption); levels decay linearly between drinks. After the last drink the
    curve runs to ``now`` and then to the zero crossing.
    """
    ordered = sorted(events, key=_sort_key)
    samples: List[Sample] = []
    level = 0.0

    for i, event in enumerate(ordered):
        samples.append(Sample(event.occurred_at, level))
        level += peak_bac(event, profile)
        samples.append(Sample(event.occurred_at, level, is_peak=True))

        zero_time = event.occurred_at + (level / ELIMINATION_PER_HOUR) * MS_PER_HOUR

        if i + 1 < len(ordered):
            level = _decay(level, ordered[i + 1].occurred_at - event.occurred_at)
        elif now > event.occurred_at:
            level = _decay(level, now - event.occurred_at)
            samples.append(Sample(now, level))
            if level > 0:
                samples.append(Sample(zero_time, 0.0))
        else:
            # Last drink is in the future: decaying back to now is meaningless.
            samples.append(Sample(zero_time, 0.0))

    return samples


def time_until_target(current_bac: float, target_bac: float) -> float:
    """Milliseconds until ``current_bac`` decays to ``target_bac`` with no further drinks."""
    if current_bac <= target_bac:
        return 0.0
    return ((current_bac - target_bac) / ELIMINATION_PER_HOUR) * MS_PER_HOUR
