"""Tests for trainready.analytics.baseline -- rolling baselines."""

import pytest

from trainready.analytics.baseline import (
    HRVStability,
    Signal,
    compute_baseline,
    compute_sleep_baselines,
    detect_alcohol_days,
    extract_signal,
    hrv_coefficient_of_variation,
    hrv_stability,
    robust_baseline,
    sleep_debt,
)
from trainready.analytics.sleep import circular_minute_diff
from trainready.errors import DomainViolationError
from tests.conftest import START_DAY, make_observation, make_sleep, make_window


class TestComputeBaseline:
    def test_mean_of_window(self):
        window = [make_observation(i, hrv_ms=v) for i, v in enumerate([60.0, 70.0, 80.0])]
        assert compute_baseline(Signal.HRV, window) == 70.0

    def test_insufficient_days(self):
        window = make_window(2)
        assert compute_baseline(Signal.HRV, window, min_days=3) is None

    def test_missing_values_not_counted(self):
        window = make_window(2) + [make_observation(2, hrv_ms=None)]
        assert compute_baseline(Signal.HRV, window) is None
        assert compute_baseline(Signal.RHR, window) == 55.0

    def test_empty_window(self):
        assert compute_baseline(Signal.RHR, []) is None

    def test_exclude_days(self):
        window = [make_observation(i, hrv_ms=v) for i, v in enumerate([40.0, 40.0, 40.0, 10.0])]
        excluded = {window[3].day}
        assert compute_baseline(Signal.HRV, window, exclude=excluded) == 40.0

    def test_min_days_must_be_positive(self):
        with pytest.raises(DomainViolationError):
            compute_baseline(Signal.HRV, make_window(3), min_days=0)

    def test_sleep_duration_signal(self):
        window = [make_observation(i, sleep=make_sleep(duration_min=420.0)) for i in range(3)]
        assert compute_baseline(Signal.SLEEP_DURATION, window) == 420.0

    def test_extract_sleep_score(self):
        obs = make_observation(0, sleep_score=77.0)
        assert extract_signal(obs, Signal.SLEEP_SCORE) == 77.0


class TestRobustBaseline:
    def test_outlier_removed(self):
        values = [50.0] * 10 + [200.0]
        assert robust_baseline(values) == 50.0

    def test_median(self):
        assert robust_baseline([40.0, 42.0, 60.0]) == 42.0

    def test_too_few(self):
        assert robust_baseline([40.0, 42.0]) is None


class TestSleepBaselines:
    def test_timing_baselines(self):
        window = [make_observation(i, sleep=make_sleep(night_of=START_DAY)) for i in range(3)]
        baselines = compute_sleep_baselines(window, need_min=450.0)
        assert baselines.need_min == 450.0
        assert baselines.duration_min == 480.0
        assert baselines.bedtime_minute == pytest.approx(23 * 60)
        assert baselines.wake_minute == pytest.approx(7 * 60)

    def test_bedtime_average_wraps_midnight(self):
        window = [
            make_observation(0, sleep=make_sleep(bedtime=(23, 50))),
            make_observation(1, sleep=make_sleep(bedtime=(0, 10))),
            make_observation(2, sleep=make_sleep(bedtime=(0, 0))),
        ]
        baselines = compute_sleep_baselines(window)
        assert circular_minute_diff(baselines.bedtime_minute, 0.0) < 1e-6

    def test_too_few_nights(self):
        baselines = compute_sleep_baselines([make_observation(0, sleep=make_sleep())])
        assert baselines.duration_min is None
        assert baselines.wake_minute is None
        assert baselines.bedtime_minute is None


class TestHRVStability:
    def test_constant_hrv(self):
        cv = hrv_coefficient_of_variation(make_window(7))
        assert cv == 0.0
        assert hrv_stability(cv) == HRVStability.EXCELLENT

    def test_variable_hrv(self):
        window = [make_observation(i, hrv_ms=v) for i, v in enumerate([30.0, 50.0, 30.0, 50.0])]
        cv = hrv_coefficient_of_variation(window)
        assert cv == pytest.approx(25.0)
        assert hrv_stability(cv) == HRVStability.POOR

    def test_insufficient(self):
        assert hrv_coefficient_of_variation(make_window(2)) is None


class TestAlcoholDays:
    def test_flags_day_and_next(self):
        window = [
            make_observation(0, hrv_ms=50.0, rhr_bpm=50.0),
            make_observation(1, hrv_ms=30.0, rhr_bpm=60.0),  # -40 % HRV, +10 bpm
            make_observation(2, hrv_ms=45.0, rhr_bpm=52.0),
        ]
        flagged = detect_alcohol_days(window)
        assert window[1].day in flagged
        assert window[2].day in flagged
        assert window[0].day not in flagged

    def test_steady_days_not_flagged(self):
        assert detect_alcohol_days(make_window(7)) == set()

    def test_missing_signals_skipped(self):
        window = [
            make_observation(0, hrv_ms=None),
            make_observation(1, hrv_ms=20.0, rhr_bpm=70.0),
        ]
        assert detect_alcohol_days(window) == set()


class TestExtractSignal:
    def test_unknown_signal(self):
        with pytest.raises(DomainViolationError):
            extract_signal(make_observation(0), "pulse")


class TestSleepDebt:
    def test_accumulates(self):
        window = [make_observation(i, sleep=make_sleep(duration_min=420.0)) for i in range(3)]
        assert sleep_debt(window, need_min=480.0) == 180.0

    def test_never_negative(self):
        window = [make_observation(i, sleep=make_sleep(duration_min=600.0)) for i in range(3)]
        assert sleep_debt(window) == 0.0

    def test_missing_nights_skipped(self):
        window = [make_observation(0, sleep=make_sleep(duration_min=420.0)), make_observation(1)]
        assert sleep_debt(window) == 60.0
