"""
BuzzGauge: Widmark-based BAC estimation from a log of drinks, with session,
storage and graph helpers.
Use from project root: python -m buzzgauge.main
"""

from buzzgauge.errors import InvalidInput
from buzzgauge.drinks import ETHANOL_DENSITY, DrinkEvent, alcohol_grams
from buzzgauge.profile import DEFAULT_PROFILE, DISTRIBUTION_RATIOS, Profile
from buzzgauge.calculations import (
    ELIMINATION_PER_HOUR,
    Sample,
    evaluate_bac,
    peak_bac,
    synthesize_series,
    time_until_target,
)
from buzzgauge.session import Session
from buzzgauge.graph import curve_data, save_bac_graph

__all__ = [
    "InvalidInput",
    "DrinkEvent",
    "Profile",
    "Sample",
    "Session",
    "evaluate_bac",
    "synthesize_series",
    "time_until_target",
    "peak_bac",
    "alcohol_grams",
    "curve_data",
    "save_bac_graph",
    "DEFAULT_PROFILE",
    "DISTRIBUTION_RATIOS",
    "ELIMINATION_PER_HOUR",
    "ETHANOL_DENSITY",
]
