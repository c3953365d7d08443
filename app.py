"""BuzzGauge Flask app.

The drink log and settings live in the signed session cookie, so nothing is
persisted server-side.

Run from project root:
    python app.py
"""

import logging
import os
from datetime import timedelta
from typing import Any

from flask import Flask, jsonify, request, session as flask_session

from buzzgauge.drinks import (
    DEFAULT_ABV_PERCENT,
    DEFAULT_VOLUME_ML,
    MAX_ABV_PERCENT,
    MAX_VOLUME_ML,
    MIN_ABV_PERCENT,
    MIN_VOLUME_ML,
)
from buzzgauge.drive import get_drive_advice
from buzzgauge.profile import (
    DISTRIBUTION_RATIOS,
    MAX_LIMIT_PERCENT,
    MAX_WEIGHT_KG,
    MIN_LIMIT_PERCENT,
    MIN_WEIGHT_KG,
    Profile,
)
from buzzgauge.session import Session, now_ms
from buzzgauge.storage import session_from_payload, session_to_payload

app = Flask(__name__)
app.config["SECRET_KEY"] = os.environ.get("APP_SECRET_KEY", "dev-only-change-me")
app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
app.config["SESSION_COOKIE_HTTPONLY"] = True
app.config["SESSION_COOKIE_SECURE"] = os.environ.get("SESSION_COOKIE_SECURE", "0") == "1"
app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(days=30)
app.logger.setLevel(getattr(logging, os.environ.get("LOG_LEVEL", "INFO").upper(), logging.INFO))

MAX_MINUTES_AGO = 24 * 60.0
SESSION_KEY = "buzzgauge"


def _auto_clear_enabled() -> bool:
    return os.environ.get("BUZZGAUGE_AUTO_CLEAR", "1") == "1"


def _clamp_float(value: Any, default: float, min_value: float, max_value: float) -> float:
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        parsed = default
    if parsed != parsed:  # NaN
        parsed = default
    return max(min_value, min(max_value, parsed))


def _parse_sex(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in DISTRIBUTION_RATIOS:
        return value.strip().lower()
    return default


def get_session() -> Session:
    return session_from_payload(flask_session.get(SESSION_KEY))


def set_session(model: Session) -> None:
    flask_session[SESSION_KEY] = session_to_payload(model)
    flask_session.permanent = True


def _request_now() -> int:
    now = request.args.get("now", type=int)
    return now_ms() if now is None else now


@app.route("/healthz")
def healthz():
    return jsonify({"ok": True})


@app.route("/api/settings")
def api_settings():
    return jsonify(get_session().profile.to_dict())


@app.route("/api/settings", methods=["POST"])
def api_settings_update():
    model = get_session()
    current = model.profile
    data = request.get_json(silent=True) or {}
    model.profile = Profile(
        sex=_parse_sex(data.get("gender"), current.sex),
        weight_kg=_clamp_float(data.get("weight"), current.weight_kg, MIN_WEIGHT_KG, MAX_WEIGHT_KG),
        legal_limit_percent=_clamp_float(
            data.get("bacLimit"),
            current.legal_limit_percent,
            MIN_LIMIT_PERCENT,
            MAX_LIMIT_PERCENT,
        ),
    )
    set_session(model)
    return jsonify({"ok": True, **model.profile.to_dict()})


@app.route("/api/drink", methods=["POST"])
def api_drink():
    model = get_session()
    data = request.get_json(silent=True) or {}
    volume = _clamp_float(data.get("volume_ml"), DEFAULT_VOLUME_ML, MIN_VOLUME_ML, MAX_VOLUME_ML)
    abv = _clamp_float(data.get("abv_percent"), DEFAULT_ABV_PERCENT, MIN_ABV_PERCENT, MAX_ABV_PERCENT)
    minutes_ago = _clamp_float(data.get("minutes_ago"), 0.0, 0.0, MAX_MINUTES_AGO)

    event = model.add_drink(volume, abv, at=_request_now() - int(minutes_ago * 60 * 1000))
    set_session(model)
    app.logger.info("Added %gml drink at %g%% (%d logged)", volume, abv, model.drink_count)
    return jsonify({"ok": True, "drink": event.to_dict()})


@app.route("/api/drink/<int:index>", methods=["DELETE"])
def api_drink_delete(index: int):
    model = get_session()
    try:
        removed = model.remove_drink(index)
    except IndexError:
        return jsonify({"error": f"No drink at index {index}"}), 404
    set_session(model)
    return jsonify({"ok": True, "removed": removed.to_dict()})


@app.route("/api/reset", methods=["POST"])
def api_reset():
    model = get_session()
    model.clear()
    set_session(model)
    return jsonify({"ok": True})


@app.route("/api/state")
def api_state():
    model = get_session()
    now = _request_now()

    cleared = False
    if _auto_clear_enabled() and model.clear_if_sober(now):
        app.logger.info("BAC back to zero; clearing drink log")
        set_session(model)
        cleared = True

    state = model.snapshot(now)
    state["auto_cleared"] = cleared
    state["drive_advice"] = get_drive_advice(
        model.bac_now(now),
        model.profile,
        state["ms_until_legal"],
        state["ms_until_sober"],
    )
    return jsonify(state)


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    app.run(host="0.0.0.0", port=port, debug=os.environ.get("FLASK_DEBUG", "0") == "1")
