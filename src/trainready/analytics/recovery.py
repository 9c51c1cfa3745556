"""Recovery score computation (HRV / RHR / sleep / training-load driven).

Recovery combines the deviation of today's HRV and resting HR from their
rolling baselines with last night's sleep score, respiratory rate and the
training stress balance.  Components whose baselines are missing score a
neutral 50; a missing sleep component has its weight redistributed over
the others.

An alcohol/illness heuristic flags days where HRV is suppressed *and* RHR
elevated without heavy recent training.  The flag is informational only and
never alters the score.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from trainready.analytics.bands import RECOVERY_BANDS, BandTable, ScoreResult
from trainready.analytics.constants import (
    ALCOHOL_HRV_SUPPRESSION,
    ALCOHOL_RHR_ELEVATION,
    HEAVY_TRAINING_STRESS,
    MAX_STRESS_PENALTY,
    NEUTRAL_SUBSCORE,
    RECOVERY_WEIGHTS,
    SCORE_MAX,
    SCORE_MIN,
    TSB_POINTS,
    TSB_SCORES,
)
from trainready.validation import (
    check_finite,
    check_non_negative,
    check_positive,
    check_range,
)


@dataclass(frozen=True, repr=False)
class RecoveryResult(ScoreResult):
    """Recovery score and its components."""

    alcohol_flag: bool = False  # possible alcohol / illness signature
    limited_data: bool = False  # HRV or RHR baseline missing
    hrv_deviation: float | None = None  # fraction vs baseline
    rhr_deviation: float | None = None

    def __repr__(self) -> str:
        return (
            f"RecoveryResult(score={self.score:.0f}, "
            f"band={self.band.value}, "
            f"alcohol_flag={self.alcohol_flag})"
        )


def _deviation(value: float | None, baseline: float | None) -> float | None:
    """Fractional deviation from baseline, or None without a usable baseline."""
    if value is None or baseline is None or baseline <= 0:
        return None
    return (value - baseline) / baseline


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def hrv_component(hrv_ms: float | None, baseline: float | None) -> float:
    """100 at or above baseline; deeper deficits cost more than proportionally."""
    change = _deviation(hrv_ms, baseline)
    if change is None:
        return NEUTRAL_SUBSCORE
    if change >= 0:
        return SCORE_MAX

    drop = -change
    if drop <= 0.10:
        return max(85.0, 100.0 - drop * 150.0)
    if drop <= 0.20:
        return max(60.0, 85.0 - (drop - 0.10) * 250.0)
    if drop <= 0.35:
        return max(30.0, 60.0 - (drop - 0.20) * 200.0)
    return max(SCORE_MIN, 30.0 - (drop - 0.35) * 60.0)


def rhr_component(rhr_bpm: float | None, baseline: float | None) -> float:
    """100 at or below baseline (no extra reward for large drops)."""
    change = _deviation(rhr_bpm, baseline)
    if change is None:
        return NEUTRAL_SUBSCORE
    if change <= 0:
        return SCORE_MAX

    if change <= 0.08:
        return max(88.0, 100.0 - change * 150.0)
    if change <= 0.15:
        return max(67.0, 88.0 - (change - 0.08) * 300.0)
    if change <= 0.25:
        return max(37.0, 67.0 - (change - 0.15) * 300.0)
    return max(SCORE_MIN, 37.0 - (change - 0.25) * 100.0)


def sleep_component(
    sleep_score: float | None,
    duration_min: float | None = None,
    duration_baseline: float | None = None,
) -> float | None:
    """Last night's sleep score, else duration vs. baseline; None if neither."""
    if sleep_score is not None:
        check_range("sleep_score", sleep_score, SCORE_MIN, SCORE_MAX)
        return sleep_score
    if duration_min is None or duration_baseline is None or duration_baseline <= 0:
        return None
    return max(SCORE_MIN, min(SCORE_MAX, duration_min / duration_baseline * 100.0))


def respiratory_component(rate: float | None, baseline: float | None) -> float:
    """Stable breathing scores 100; elevation is penalized harder than suppression."""
    change = _deviation(rate, baseline)
    if change is None:
        return NEUTRAL_SUBSCORE
    if change > 0.15:
        return max(SCORE_MIN, 50.0 - change * 200.0)
    if change > 0.05:
        return max(50.0, 100.0 - (change - 0.05) * 500.0)
    if change >= -0.05:
        return SCORE_MAX
    if change >= -0.15:
        return max(70.0, 100.0 - (-change - 0.05) * 300.0)
    return max(40.0, 70.0 - (-change - 0.15) * 200.0)


def stress_penalty(recent_stress: float | None) -> float:
    """Points removed from the load component after a hard recent day."""
    if recent_stress is None or recent_stress < 50:
        return 0.0
    if recent_stress < 100:
        return (recent_stress - 50) * 0.2
    if recent_stress < 200:
        return 10.0 + (recent_stress - 100) * 0.15
    return min(MAX_STRESS_PENALTY, 25.0 + (recent_stress - 200) * 0.1)


def load_component(tsb: float | None, recent_stress: float | None = None) -> float:
    """Bounded mapping of training stress balance: fresh high, fatigued low."""
    if tsb is None:
        base = NEUTRAL_SUBSCORE
    else:
        base = float(np.interp(tsb, TSB_POINTS, TSB_SCORES))
    return max(SCORE_MIN, base - stress_penalty(recent_stress))


def detect_alcohol_effect(
    hrv_ms: float | None,
    hrv_baseline: float | None,
    rhr_bpm: float | None,
    rhr_baseline: float | None,
    recent_stress: float | None = None,
) -> bool:
    """True when HRV is suppressed and RHR elevated without heavy training."""
    hrv_change = _deviation(hrv_ms, hrv_baseline)
    rhr_change = _deviation(rhr_bpm, rhr_baseline)
    if hrv_change is None or rhr_change is None:
        return False
    if recent_stress is not None and recent_stress >= HEAVY_TRAINING_STRESS:
        return False
    return hrv_change <= -ALCOHOL_HRV_SUPPRESSION and rhr_change >= ALCOHOL_RHR_ELEVATION


# ---------------------------------------------------------------------------
# Composite scoring
# ---------------------------------------------------------------------------


def score_recovery(
    hrv_ms: float | None,
    rhr_bpm: float | None,
    hrv_baseline: float | None,
    rhr_baseline: float | None,
    yesterday_sleep_score: float | None,
    tsb: float | None,
    *,
    respiratory_rate: float | None = None,
    respiratory_baseline: float | None = None,
    recent_stress: float | None = None,
    sleep_duration_min: float | None = None,
    sleep_duration_baseline: float | None = None,
    bands: BandTable = RECOVERY_BANDS,
) -> RecoveryResult:
    """Compute the daily recovery score.

    Args:
        hrv_ms: Today's HRV (RMSSD, ms).
        rhr_bpm: Today's resting heart rate.
        hrv_baseline: Rolling HRV baseline, None if not yet established.
        rhr_baseline: Rolling RHR baseline, None if not yet established.
        yesterday_sleep_score: Last night's sleep score (0-100).
        tsb: Training stress balance at the end of yesterday.
        respiratory_rate: Overnight respiratory rate (optional).
        respiratory_baseline: Rolling respiratory baseline (optional).
        recent_stress: Yesterday's training stress, used for the load
            penalty and to rule out training as the alcohol-flag cause.
        sleep_duration_min: Fallback when no sleep score is available.
        sleep_duration_baseline: Baseline for the duration fallback.
        bands: Threshold table used for the band.

    Returns:
        RecoveryResult with the 0-100 score and components.

    Raises:
        DomainViolationError: If any input is non-finite or out of range.
    """
    for name, value in (
        ("hrv_ms", hrv_ms),
        ("rhr_bpm", rhr_bpm),
        ("hrv_baseline", hrv_baseline),
        ("rhr_baseline", rhr_baseline),
        ("respiratory_rate", respiratory_rate),
        ("respiratory_baseline", respiratory_baseline),
    ):
        check_positive(name, value)
    check_non_negative("sleep_duration_baseline", sleep_duration_baseline)
    check_range("yesterday_sleep_score", yesterday_sleep_score, SCORE_MIN, SCORE_MAX)
    check_finite("tsb", tsb)
    check_non_negative("recent_stress", recent_stress)
    check_non_negative("sleep_duration_min", sleep_duration_min)

    components: dict[str, float | None] = {
        "hrv": hrv_component(hrv_ms, hrv_baseline),
        "rhr": rhr_component(rhr_bpm, rhr_baseline),
        "sleep": sleep_component(yesterday_sleep_score, sleep_duration_min, sleep_duration_baseline),
        "respiratory": respiratory_component(respiratory_rate, respiratory_baseline),
        "load": load_component(tsb, recent_stress),
    }

    # Redistribute the weight of any component that could not be computed
    present = {k: v for k, v in components.items() if v is not None}
    total_weight = sum(RECOVERY_WEIGHTS[k] for k in present)
    raw = sum(RECOVERY_WEIGHTS[k] * v for k, v in present.items()) / total_weight
    score = round(max(SCORE_MIN, min(SCORE_MAX, raw)), 1)

    return RecoveryResult(
        score=score,
        band=bands.classify(score),
        components={k: round(v, 1) for k, v in present.items()},
        alcohol_flag=detect_alcohol_effect(
            hrv_ms, hrv_baseline, rhr_bpm, rhr_baseline, recent_stress
        ),
        limited_data=hrv_baseline is None or rhr_baseline is None,
        hrv_deviation=_deviation(hrv_ms, hrv_baseline),
        rhr_deviation=_deviation(rhr_bpm, rhr_baseline),
    )
