"""Load daily observations from a JSON-lines file.

One calendar day per line.  Field names mirror :class:`DailyObservation`;
dates and datetimes are ISO-8601 strings::

    {"day": "2026-02-13", "hrv_ms": 42.0, "rhr_bpm": 54,
     "sleep": {"duration_min": 455, "onset": "2026-02-12T23:10:00"},
     "workouts": [{"duration_min": 60, "workout_type": "cycling", "avg_hr": 148}]}

Every malformed value (unknown key, bad date, unknown workout type, wrong
type) is reported as a :class:`DomainViolationError` naming the field.
"""

from __future__ import annotations

import dataclasses
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Callable, TypeVar

from trainready.errors import DomainViolationError
from trainready.records import (
    DailyActivity,
    DailyObservation,
    SleepRecord,
    WorkoutRecord,
    WorkoutType,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _convert(where: str, parse: Callable[[Any], T], value: Any) -> T:
    """Apply *parse*, reporting failures against the field *where*."""
    try:
        return parse(value)
    except DomainViolationError:
        raise
    except (TypeError, ValueError, AttributeError) as e:
        raise DomainViolationError(f"{where}: invalid value {value!r} ({e})") from e


def _build(cls: type[T], where: str, data: Any) -> T:
    """Construct record *cls* from a JSON object, rejecting unknown keys."""
    if not isinstance(data, dict):
        raise DomainViolationError(f"{where}: expected an object, got {data!r}")
    unknown = sorted(set(data) - {f.name for f in dataclasses.fields(cls)})
    if unknown:
        raise DomainViolationError(f"{where}: unknown field(s) {', '.join(unknown)}")
    return _convert(where, lambda d: cls(**d), data)


def _workout_from_dict(data: Any, where: str) -> WorkoutRecord:
    if not isinstance(data, dict):
        raise DomainViolationError(f"{where}: expected an object, got {data!r}")
    fields = dict(data)
    if "workout_type" in fields:
        fields["workout_type"] = _convert(
            f"{where}.workout_type", WorkoutType, fields["workout_type"]
        )
    if "zone_minutes" in fields:
        # JSON object keys are always strings
        fields["zone_minutes"] = _convert(
            f"{where}.zone_minutes",
            lambda zones: {int(z): float(m) for z, m in zones.items()},
            fields["zone_minutes"],
        )
    return _build(WorkoutRecord, where, fields)


def _sleep_from_dict(data: Any) -> SleepRecord:
    if not isinstance(data, dict):
        raise DomainViolationError(f"sleep: expected an object, got {data!r}")
    fields = dict(data)
    for key in ("onset", "wake"):
        if fields.get(key) is not None:
            fields[key] = _convert(f"sleep.{key}", datetime.fromisoformat, fields[key])
    return _build(SleepRecord, "sleep", fields)


def observation_from_dict(data: dict[str, Any]) -> DailyObservation:
    """Build a validated DailyObservation from its JSON form.

    Raises:
        DomainViolationError: If a field is missing, unknown or invalid.
    """
    if not isinstance(data, dict):
        raise DomainViolationError(f"expected a JSON object per day, got {data!r}")
    if "day" not in data:
        raise DomainViolationError("missing required field 'day'")

    fields = dict(data)
    fields["day"] = _convert("day", date.fromisoformat, fields["day"])
    if fields.get("sleep") is not None:
        fields["sleep"] = _sleep_from_dict(fields["sleep"])
    if fields.get("activity") is not None:
        fields["activity"] = _build(DailyActivity, "activity", fields["activity"])
    workouts = fields.get("workouts") or ()
    if not isinstance(workouts, (list, tuple)):
        raise DomainViolationError(f"workouts: expected a list, got {workouts!r}")
    fields["workouts"] = tuple(
        _workout_from_dict(w, f"workouts[{i}]") for i, w in enumerate(workouts)
    )
    return _build(DailyObservation, "observation", fields)


def load_observations(path: str | Path) -> list[DailyObservation]:
    """Read a .jsonl file of daily observations, sorted by day.

    Blank lines are ignored and malformed JSON lines are skipped with a
    warning.

    Raises:
        DomainViolationError: If a well-formed line carries an invalid
            value; the message names the line.
    """
    path = Path(path)
    observations: list[DailyObservation] = []

    with open(path) as f:
        for line_num, line in enumerate(f, 1):
            line = line.strip()
            if not line:
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.warning("%s:%d: invalid JSON, skipping", path.name, line_num)
                continue
            try:
                observations.append(observation_from_dict(entry))
            except DomainViolationError as e:
                raise DomainViolationError(f"{path.name}:{line_num}: {e}") from e

    observations.sort(key=lambda o: o.day)
    logger.debug("Loaded %d day(s) from %s", len(observations), path)
    return observations
