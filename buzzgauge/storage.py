"""JSON file storage for the drink log and settings.

One file holds ``{"drinks": [...], "settings": {...}}`` in the same record
shapes the browser app keeps in local storage. Unreadable or malformed data
falls back to an empty log and default settings.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from buzzgauge.drinks import DrinkEvent
from buzzgauge.errors import InvalidInput
from buzzgauge.profile import Profile
from buzzgauge.session import Session

logger = logging.getLogger(__name__)


def drinks_from_records(records: Any) -> list[DrinkEvent]:
    if not isinstance(records, list):
        if records is not None:
            logger.warning("Ignoring drink log of type %s", type(records).__name__)
        return []
    events: list[DrinkEvent] = []
    for record in records:
        try:
            events.append(DrinkEvent.from_dict(record))
        except InvalidInput as exc:
            logger.warning("Skipping stored drink %r: %s", record, exc)
    return events


def profile_from_record(record: Any) -> Profile:
    profile = Profile.from_dict(record)
    if isinstance(record, dict):
        for key, value in profile.to_dict().items():
            if key in record and record[key] != value:
                logger.warning("Stored setting %s=%r invalid, using %r", key, record[key], value)
    return profile


def session_from_payload(payload: Any) -> Session:
    if not isinstance(payload, dict):
        return Session()
    model = Session(profile=profile_from_record(payload.get("settings")))
    for event in drinks_from_records(payload.get("drinks")):
        model.add_event(event)
    return model


def session_to_payload(model: Session) -> dict[str, Any]:
    return {
        "drinks": [e.to_dict() for e in model.events],
        "settings": model.profile.to_dict(),
    }


def load_session(path: str | Path) -> Session:
    path = Path(path)
    if not path.exists():
        return Session()
    try:
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read %s, starting fresh: %s", path, exc)
        return Session()
    return session_from_payload(payload)


def save_session(path: str | Path, model: Session) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            json.dump(session_to_payload(model), handle, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved %d drink(s) to %s", model.drink_count, path)
