"""Session model tests: drink log handling, countdowns, auto-clear."""
import pytest

from buzzgauge.calculations import MS_PER_HOUR
from buzzgauge.drive import get_drive_advice
from buzzgauge.profile import DEFAULT_PROFILE, Profile
from buzzgauge.session import Session, format_duration

T = 1_700_000_000_000
HOUR = MS_PER_HOUR


def make_session(limit=0.05):
    s = Session(profile=Profile(sex="male", weight_kg=75, legal_limit_percent=limit))
    s.add_drink(500, 5, at=T)
    s.add_drink(500, 5, at=T - HOUR)
    s.add_drink(500, 5, at=T - 2 * HOUR)
    return s


def test_default_profile():
    s = Session()
    assert s.profile == DEFAULT_PROFILE
    assert s.profile.sex == "male"
    assert s.profile.weight_kg == 75
    assert s.profile.legal_limit_percent == 0.05
    assert s.bac_now(T) == 0
    assert s.curve(T) == []


def test_events_sorted_and_counted():
    s = make_session()
    assert s.drink_count == 3
    assert [e.occurred_at for e in s.events] == [T - 2 * HOUR, T - HOUR, T]


def test_countdowns():
    s = make_session()
    bac = s.bac_now(T)
    assert bac > 0.05
    assert s.is_over_limit(T)
    assert s.ms_until_sober(T) == pytest.approx(bac / 0.015 * HOUR)
    assert s.ms_until_legal(T) == pytest.approx((bac - 0.05) / 0.015 * HOUR)
    assert s.ms_until_legal(T) < s.ms_until_sober(T)
    assert s.sober_at(T) == int(T + s.ms_until_sober(T))
    assert s.legal_at(T) == int(T + s.ms_until_legal(T))


def test_at_limit_is_not_over():
    s = Session(profile=Profile(legal_limit_percent=0.0))
    assert not s.is_over_limit(T)


def test_remove_drink_by_chronological_index():
    s = make_session()
    removed = s.remove_drink(0)
    assert removed.occurred_at == T - 2 * HOUR
    assert s.drink_count == 2
    with pytest.raises(IndexError):
        s.remove_drink(5)
    with pytest.raises(IndexError):
        s.remove_drink(-1)


def test_clear_if_sober():
    s = make_session()
    assert s.clear_if_sober(T) is False
    assert s.drink_count == 3
    assert s.clear_if_sober(T + 24 * HOUR) is True
    assert s.drink_count == 0
    assert s.clear_if_sober(T + 24 * HOUR) is False


def test_clear_if_sober_keeps_future_drinks():
    s = Session()
    s.add_drink(500, 5, at=T + HOUR)
    assert s.bac_now(T) == 0
    assert s.clear_if_sober(T) is False
    assert s.drink_count == 1


def test_snapshot_shape():
    s = make_session()
    snap = s.snapshot(T)
    assert snap["drink_count"] == 3
    assert snap["over_limit"] is True
    assert snap["profile"] == {"gender": "male", "weight": 75, "bacLimit": 0.05}
    assert snap["drinks"][0]["timestamp"] == T - 2 * HOUR
    assert snap["curve"][1]["is_peak"] is True
    assert snap["time_until_sober"] == format_duration(snap["ms_until_sober"])


def test_format_duration():
    assert format_duration(0) == "00:00"
    assert format_duration(-5) == "00:00"
    assert format_duration(2 * HOUR) == "02:00"
    assert format_duration(90 * 60 * 1000 + 1) == "01:31"


def test_drive_advice_uses_profile_limit():
    strict = Profile(legal_limit_percent=0.0)
    advice = get_drive_advice(0.01, strict, 1000, 1000)
    assert advice["status"] == "do_not_drive"
    assert advice["legal_limit_bac"] == 0.0

    lenient = Profile(legal_limit_percent=0.08)
    assert get_drive_advice(0.01, lenient, 0, 1000)["status"] == "caution"
    assert get_drive_advice(0.03, lenient, 0, 1000)["status"] == "do_not_drive"
    assert get_drive_advice(0.0, lenient, 0, 0)["status"] == "ok"
