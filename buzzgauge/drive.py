"""Drive-risk advisory helpers.

Conservative messaging for driving decisions based on estimated BAC and the
user's configured legal limit. Educational only; it never guarantees
legal or safe driving.
"""

from buzzgauge.profile import Profile
from buzzgauge.session import format_duration

# Above this BAC, driving is discouraged even where the legal limit is higher.
CONSERVATIVE_LIMIT_BAC = 0.02


def get_drive_advice(bac_now: float, profile: Profile, ms_until_legal: float, ms_until_sober: float) -> dict:
    """Return conservative drive-risk guidance from estimated BAC."""
    limit = profile.legal_limit_percent

    if bac_now > limit:
        return {
            "status": "do_not_drive",
            "title": "Above your legal limit",
            "message": f"Estimated BAC is above {limit:.2f}%. Do not drive.",
            "action": f"Below the limit in about {format_duration(ms_until_legal)}. Use a rideshare, taxi, or sober driver.",
            "legal_limit_bac": limit,
        }

    if bac_now >= CONSERVATIVE_LIMIT_BAC:
        return {
            "status": "do_not_drive",
            "title": "Alcohol still present",
            "message": "Estimated BAC is within your limit but still in an impairment range.",
            "action": f"Do not drive. Fully sober in about {format_duration(ms_until_sober)}.",
            "legal_limit_bac": limit,
        }

    if bac_now > 0:
        return {
            "status": "caution",
            "title": "Residual alcohol",
            "message": "Estimated BAC is very low but not zero.",
            "action": "Safest choice is still not to drive.",
            "legal_limit_bac": limit,
        }

    return {
        "status": "ok",
        "title": "No alcohol in system",
        "message": "Estimated BAC is 0.000 right now.",
        "action": "If you have not consumed alcohol, impairment risk is lower.",
        "legal_limit_bac": limit,
    }
