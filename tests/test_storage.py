"""JSON store tests, including fallbacks for malformed data."""
import json
import logging

from buzzgauge.profile import DEFAULT_PROFILE, Profile
from buzzgauge.session import Session
from buzzgauge.storage import load_session, save_session, session_from_payload

T = 1_700_000_000_000


def test_missing_file_gives_empty_session(tmp_path):
    s = load_session(tmp_path / "nope.json")
    assert s.drink_count == 0
    assert s.profile == DEFAULT_PROFILE


def test_save_and_load(tmp_path):
    path = tmp_path / "nested" / "store.json"
    s = Session(profile=Profile(sex="female", weight_kg=60, legal_limit_percent=0.02))
    s.add_drink(330, 5, at=T)
    s.add_drink(150, 12.5, at=T - 1000)
    save_session(path, s)

    raw = json.loads(path.read_text(encoding="utf-8"))
    assert raw["settings"] == {"gender": "female", "weight": 60, "bacLimit": 0.02}
    assert raw["drinks"][0] == {"timestamp": T - 1000, "volume": 150, "alcoholPercentage": 12.5}

    loaded = load_session(path)
    assert loaded.profile == s.profile
    assert loaded.events == s.events
    assert list(tmp_path.joinpath("nested").iterdir()) == [path]


def test_unparseable_json_falls_back(tmp_path, caplog):
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="buzzgauge.storage"):
        s = load_session(path)
    assert s.drink_count == 0
    assert s.profile == DEFAULT_PROFILE
    assert "starting fresh" in caplog.text


def test_bad_records_skipped_individually(caplog):
    payload = {
        "drinks": [
            {"timestamp": T, "volume": 500, "alcoholPercentage": 5},
            {"timestamp": T, "volume": -1, "alcoholPercentage": 5},
            {"volume": 500, "alcoholPercentage": 5},
            "garbage",
            {"timestamp": float(T + 1), "volume": 330, "alcoholPercentage": 4.5},
        ],
        "settings": {"gender": "female"},
    }
    with caplog.at_level(logging.WARNING, logger="buzzgauge.storage"):
        s = session_from_payload(payload)
    assert s.drink_count == 2
    assert s.events[1].occurred_at == T + 1
    assert s.profile == Profile(sex="female", weight_kg=75, legal_limit_percent=0.05)
    assert caplog.text.count("Skipping stored drink") == 3


def test_invalid_settings_fall_back_to_defaults():
    s = session_from_payload({"drinks": [], "settings": {"gender": "x", "weight": 0}})
    assert s.profile == DEFAULT_PROFILE
    s = session_from_payload({"drinks": "nope", "settings": None})
    assert s.profile == DEFAULT_PROFILE
    assert s.drink_count == 0
    assert session_from_payload(["not", "a", "dict"]).drink_count == 0


def test_null_setting_defaults_only_that_field(caplog):
    payload = {"drinks": [], "settings": {"gender": "female", "weight": None, "bacLimit": 0.02}}
    with caplog.at_level(logging.WARNING, logger="buzzgauge.storage"):
        s = session_from_payload(payload)
    assert s.profile == Profile(sex="female", weight_kg=75, legal_limit_percent=0.02)
    assert "weight=None" in caplog.text


def test_each_invalid_setting_falls_back_on_its_own():
    assert Profile.from_dict({"gender": None, "weight": 60, "bacLimit": 0.03}) == Profile("male", 60, 0.03)
    assert Profile.from_dict({"gender": "female", "weight": -5, "bacLimit": None}) == Profile("female", 75, 0.05)
    assert Profile.from_dict({"gender": ["female"], "weight": "heavy", "bacLimit": -1}) == DEFAULT_PROFILE
