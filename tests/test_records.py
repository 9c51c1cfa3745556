"""Tests for trainready.records -- input validation."""

import math
from datetime import datetime

import pytest

from trainready.errors import DomainViolationError, TrainReadyError
from trainready.records import (
    AthleteProfile,
    DailyActivity,
    DailyObservation,
    SleepRecord,
    WorkoutRecord,
    WorkoutType,
)
from tests.conftest import START_DAY, make_workout


class TestWorkoutRecord:
    def test_defaults(self):
        w = WorkoutRecord(duration_min=30.0)
        assert w.workout_type is WorkoutType.OTHER
        assert w.zone_minutes == {}
        assert not w.has_sensor_data

    def test_negative_duration(self):
        with pytest.raises(DomainViolationError):
            WorkoutRecord(duration_min=-1.0)

    def test_nan_heart_rate(self):
        with pytest.raises(DomainViolationError):
            WorkoutRecord(duration_min=30.0, avg_hr=math.nan)

    def test_rpe_out_of_range(self):
        with pytest.raises(DomainViolationError):
            WorkoutRecord(duration_min=30.0, rpe=11.0)

    def test_unknown_zone(self):
        with pytest.raises(DomainViolationError):
            WorkoutRecord(duration_min=30.0, zone_minutes={6: 10.0})

    def test_sensor_data_from_zones(self):
        w = WorkoutRecord(duration_min=30.0, zone_minutes={2: 30.0})
        assert w.has_sensor_data

    def test_sensor_data_from_hr(self):
        assert make_workout().has_sensor_data


class TestSleepRecord:
    def test_wake_before_onset(self):
        with pytest.raises(DomainViolationError):
            SleepRecord(
                duration_min=400.0,
                onset=datetime(2026, 2, 2, 23, 0),
                wake=datetime(2026, 2, 2, 22, 0),
            )

    def test_efficiency_above_100(self):
        with pytest.raises(DomainViolationError):
            SleepRecord(duration_min=400.0, efficiency_pct=101.0)

    def test_negative_disturbances(self):
        with pytest.raises(DomainViolationError):
            SleepRecord(duration_min=400.0, disturbances=-1)


class TestDailyObservation:
    def test_workouts_stored_as_tuple(self):
        obs = DailyObservation(day=START_DAY, workouts=[make_workout()])
        assert isinstance(obs.workouts, tuple)
        assert len(obs.workouts) == 1

    def test_zero_hrv_rejected(self):
        with pytest.raises(DomainViolationError):
            DailyObservation(day=START_DAY, hrv_ms=0.0)

    def test_negative_stress_rejected(self):
        with pytest.raises(DomainViolationError):
            DailyObservation(day=START_DAY, training_stress=-5.0)

    def test_sleep_score_range(self):
        with pytest.raises(DomainViolationError):
            DailyObservation(day=START_DAY, sleep_score=120.0)

    def test_negative_steps(self):
        with pytest.raises(DomainViolationError):
            DailyActivity(steps=-10)


class TestAthleteProfile:
    def test_max_must_exceed_resting(self):
        with pytest.raises(DomainViolationError):
            AthleteProfile(max_hr=60.0, resting_hr=60.0)

    def test_error_hierarchy(self):
        with pytest.raises(TrainReadyError):
            AthleteProfile(ftp=-200.0)
        with pytest.raises(ValueError):
            AthleteProfile(ftp=-200.0)


class TestHashing:
    def test_workout_with_zones_is_hashable(self):
        a = make_workout(zone_minutes={2: 30.0, 4: 15.0})
        b = make_workout(zone_minutes={4: 15.0, 2: 30.0})
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_observation_is_hashable(self):
        obs = DailyObservation(day=START_DAY, workouts=[make_workout(zone_minutes={3: 20.0})])
        assert obs in {obs}
