"""Tests for trainready.analytics.recovery -- recovery scoring."""

import math

import pytest

from trainready.analytics.bands import Band
from trainready.analytics.recovery import (
    RecoveryResult,
    detect_alcohol_effect,
    hrv_component,
    load_component,
    respiratory_component,
    rhr_component,
    score_recovery,
    sleep_component,
    stress_penalty,
)
from trainready.errors import DomainViolationError


class TestComponents:
    def test_hrv_at_or_above_baseline(self):
        assert hrv_component(40.0, 40.0) == 100.0
        assert hrv_component(50.0, 40.0) == 100.0

    def test_hrv_ten_percent_drop(self):
        assert hrv_component(36.0, 40.0) == pytest.approx(85.0)

    def test_hrv_large_drop_floor(self):
        assert hrv_component(1.0, 40.0) >= 0.0

    def test_hrv_no_baseline(self):
        assert hrv_component(40.0, None) == 50.0

    def test_rhr_below_baseline(self):
        assert rhr_component(50.0, 55.0) == 100.0

    def test_rhr_elevated(self):
        assert rhr_component(62.0, 55.0) == pytest.approx(88.0 - (7.0 / 55.0 - 0.08) * 300.0)

    def test_rhr_no_baseline(self):
        assert rhr_component(None, 55.0) == 50.0

    def test_sleep_score_passthrough(self):
        assert sleep_component(85.0) == 85.0

    def test_sleep_duration_fallback(self):
        assert sleep_component(None, 420.0, 480.0) == pytest.approx(87.5)

    def test_sleep_missing(self):
        assert sleep_component(None) is None

    def test_respiratory_stable(self):
        assert respiratory_component(16.0, 16.0) == 100.0

    def test_respiratory_elevated(self):
        assert respiratory_component(17.6, 16.0) == pytest.approx(75.0)

    def test_respiratory_missing(self):
        assert respiratory_component(None, None) == 50.0

    @pytest.mark.parametrize(
        "tsb, expected",
        [(-60.0, 0.0), (-40.0, 0.0), (-10.0, 50.0), (0.0, 65.0), (10.0, 80.0), (25.0, 100.0), (80.0, 100.0)],
    )
    def test_load_mapping(self, tsb, expected):
        assert load_component(tsb) == pytest.approx(expected)

    def test_load_neutral_without_tsb(self):
        assert load_component(None) == 50.0

    def test_stress_penalty(self):
        assert stress_penalty(None) == 0.0
        assert stress_penalty(40.0) == 0.0
        assert stress_penalty(300.0) == pytest.approx(35.0)
        assert stress_penalty(10_000.0) == 40.0
        assert load_component(25.0, 300.0) == pytest.approx(65.0)


class TestAlcoholEffect:
    def test_suppressed_and_elevated(self):
        assert detect_alcohol_effect(30.0, 40.0, 62.0, 55.0)

    def test_hrv_only(self):
        assert not detect_alcohol_effect(30.0, 40.0, 55.0, 55.0)

    def test_rhr_only(self):
        assert not detect_alcohol_effect(40.0, 40.0, 62.0, 55.0)

    def test_explained_by_training(self):
        assert not detect_alcohol_effect(30.0, 40.0, 62.0, 55.0, recent_stress=200.0)

    def test_no_baselines(self):
        assert not detect_alcohol_effect(30.0, None, 62.0, None)


class TestScoreRecovery:
    def test_reference_scenario(self):
        result = score_recovery(30.0, 62.0, 40.0, 55.0, 85.0, 10.0)
        assert isinstance(result, RecoveryResult)
        assert result.score == 68.3
        assert result.band == Band.FAIR
        assert result.components["hrv"] == 50.0
        assert result.components["load"] == 80.0
        assert result.hrv_deviation == pytest.approx(-0.25)

    def test_flag_does_not_change_score(self):
        result = score_recovery(30.0, 62.0, 40.0, 55.0, 85.0, 10.0)
        assert result.alcohol_flag
        assert result.score == 68.3

    def test_fully_recovered(self):
        result = score_recovery(45.0, 50.0, 40.0, 55.0, 100.0, 25.0, respiratory_rate=15.0, respiratory_baseline=15.0)
        assert result.score == 100.0
        assert result.band == Band.OPTIMAL
        assert not result.alcohol_flag

    def test_limited_data(self):
        result = score_recovery(40.0, 55.0, None, None, 80.0, None)
        assert result.limited_data
        assert result.components["hrv"] == 50.0
        assert result.components["rhr"] == 50.0

    def test_missing_sleep_weight_redistributed(self):
        result = score_recovery(40.0, 55.0, 40.0, 55.0, None, None)
        assert "sleep" not in result.components
        # (0.3*100 + 0.2*100 + 0.1*50 + 0.1*50) / 0.7
        assert result.score == pytest.approx(85.7)

    def test_bounds(self):
        worst = score_recovery(5.0, 120.0, 60.0, 50.0, 0.0, -80.0, recent_stress=500.0)
        assert 0.0 <= worst.score <= 100.0
        assert worst.band == Band.POOR

    def test_repr(self):
        result = score_recovery(30.0, 62.0, 40.0, 55.0, 85.0, 10.0)
        assert "alcohol_flag=True" in repr(result)


class TestInputValidation:
    def test_negative_hrv(self):
        with pytest.raises(DomainViolationError):
            score_recovery(-30.0, 62.0, 40.0, 55.0, 85.0, 10.0)

    def test_nan_hrv(self):
        with pytest.raises(DomainViolationError):
            score_recovery(math.nan, 62.0, 40.0, 55.0, 85.0, 10.0)

    def test_nan_tsb(self):
        with pytest.raises(DomainViolationError):
            score_recovery(30.0, 62.0, 40.0, 55.0, 85.0, math.nan)

    def test_sleep_score_above_100(self):
        with pytest.raises(DomainViolationError):
            score_recovery(30.0, 62.0, 40.0, 55.0, 150.0, 10.0)

    def test_sleep_component_not_clamped(self):
        with pytest.raises(DomainViolationError):
            sleep_component(150.0)

    def test_negative_recent_stress(self):
        with pytest.raises(DomainViolationError):
            score_recovery(30.0, 62.0, 40.0, 55.0, 85.0, 10.0, recent_stress=-1.0)

    def test_zero_baseline(self):
        with pytest.raises(DomainViolationError):
            score_recovery(30.0, 62.0, 0.0, 55.0, 85.0, 10.0)
