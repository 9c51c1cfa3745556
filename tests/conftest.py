"""Shared fixtures and helpers for the trainready test suite."""

from __future__ import annotations

import json
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from trainready.records import (
    AthleteProfile,
    DailyActivity,
    DailyObservation,
    SleepRecord,
    WorkoutRecord,
    WorkoutType,
)

START_DAY = date(2026, 2, 2)  # a Monday


# ---------------------------------------------------------------------------
# Record-building helpers
# ---------------------------------------------------------------------------


def make_sleep(
    duration_min: float = 480.0,
    deep_min: float | None = 100.0,
    rem_min: float | None = 100.0,
    efficiency_pct: float | None = 95.0,
    disturbances: int | None = 1,
    night_of: date = START_DAY,
    bedtime: tuple[int, int] = (23, 0),
    time_in_bed_min: float | None = None,
) -> SleepRecord:
    """Build a night of sleep starting the evening of *night_of*."""
    onset = datetime(night_of.year, night_of.month, night_of.day, *bedtime)
    wake = onset + timedelta(minutes=time_in_bed_min or duration_min)
    return SleepRecord(
        duration_min=duration_min,
        time_in_bed_min=time_in_bed_min,
        deep_min=deep_min,
        rem_min=rem_min,
        efficiency_pct=efficiency_pct,
        disturbances=disturbances,
        onset=onset,
        wake=wake,
    )


def make_workout(
    duration_min: float = 60.0,
    workout_type: WorkoutType = WorkoutType.CYCLING,
    avg_hr: float | None = 150.0,
    **kwargs,
) -> WorkoutRecord:
    """Build a workout (60 min of cycling at 150 bpm by default)."""
    return WorkoutRecord(
        duration_min=duration_min, workout_type=workout_type, avg_hr=avg_hr, **kwargs
    )


def make_observation(
    offset: int = 0,
    hrv_ms: float | None = 40.0,
    rhr_bpm: float | None = 55.0,
    **kwargs,
) -> DailyObservation:
    """Build the observation for ``START_DAY + offset`` days."""
    return DailyObservation(
        day=START_DAY + timedelta(days=offset), hrv_ms=hrv_ms, rhr_bpm=rhr_bpm, **kwargs
    )


def make_window(
    days: int = 7,
    hrv_ms: float = 40.0,
    rhr_bpm: float = 55.0,
    **kwargs,
) -> list[DailyObservation]:
    """Build *days* consecutive, identical observations."""
    return [make_observation(i, hrv_ms=hrv_ms, rhr_bpm=rhr_bpm, **kwargs) for i in range(days)]


# ---------------------------------------------------------------------------
# JSONL file helpers
# ---------------------------------------------------------------------------


def write_jsonl(path: Path, entries: list[dict]) -> Path:
    """Write a list of dicts as JSONL to the given path."""
    with open(path, "w") as f:
        for entry in entries:
            f.write(json.dumps(entry) + "\n")
    return path


def make_day_entry(offset: int = 0, **fields) -> dict:
    """JSON form of one day's observation."""
    entry = {
        "day": (START_DAY + timedelta(days=offset)).isoformat(),
        "hrv_ms": 40.0,
        "rhr_bpm": 55.0,
    }
    entry.update(fields)
    return entry


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def profile() -> AthleteProfile:
    return AthleteProfile(max_hr=190.0, resting_hr=50.0)


@pytest.fixture
def steady_history() -> list[DailyObservation]:
    """Seven ordinary days followed by a rough morning (HRV 30, RHR 62)."""
    history = make_window(
        7,
        hrv_ms=40.0,
        rhr_bpm=55.0,
        activity=DailyActivity(steps=8000),
    )
    today = make_observation(
        7,
        hrv_ms=30.0,
        rhr_bpm=62.0,
        sleep=make_sleep(night_of=START_DAY + timedelta(days=6)),
        workouts=(make_workout(),),
    )
    return history + [today]
