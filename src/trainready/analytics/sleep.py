"""Sleep score.

A night is scored from five sub-scores (each 0-100) combined with fixed
weights:

    performance    time asleep vs. sleep need
    stage quality  deep + REM share of sleep
    efficiency     time asleep vs. time in bed
    disturbances   number of wake events
    timing         wake time / bedtime vs. their rolling baselines

Timing carries a 2 % weight.  A sub-score whose inputs are missing
falls back to a neutral 50.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from trainready.analytics.bands import SLEEP_BANDS, BandTable, ScoreResult
from trainready.analytics.constants import (
    DEEP_REM_FLOOR,
    DEEP_REM_TARGET,
    DEFAULT_SLEEP_NEED_MIN,
    DISTURBANCE_BUCKETS,
    DISTURBANCE_FLOOR,
    NEUTRAL_SUBSCORE,
    SCORE_MAX,
    SCORE_MIN,
    SLEEP_WEIGHTS,
    TIMING_BUCKETS,
    TIMING_FLOOR,
)
from trainready.records import SleepRecord
from trainready.validation import check_non_negative, check_positive, check_range

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class SleepBaselines:
    """Rolling sleep reference values.  ``None`` means no baseline yet."""

    need_min: float | None = None  # personalized sleep need
    duration_min: float | None = None
    wake_minute: float | None = None  # minutes after midnight
    bedtime_minute: float | None = None

    def __post_init__(self) -> None:
        check_positive("need_min", self.need_min)
        check_non_negative("duration_min", self.duration_min)
        check_range("wake_minute", self.wake_minute, 0.0, MINUTES_PER_DAY)
        check_range("bedtime_minute", self.bedtime_minute, 0.0, MINUTES_PER_DAY)


@dataclass(frozen=True, repr=False)
class SleepResult(ScoreResult):
    """Sleep score with its sub-score breakdown."""

    need_min: float = DEFAULT_SLEEP_NEED_MIN


def minute_of_day(ts: datetime) -> float:
    """Minutes after local midnight."""
    return ts.hour * 60 + ts.minute + ts.second / 60.0


def circular_minute_diff(a: float, b: float) -> float:
    """Absolute difference between two clock times, wrapping at midnight."""
    diff = abs(a - b) % MINUTES_PER_DAY
    return min(diff, MINUTES_PER_DAY - diff)


# ---------------------------------------------------------------------------
# Sub-scores
# ---------------------------------------------------------------------------


def performance_score(duration_min: float, need_min: float | None) -> float:
    """Time asleep as a percentage of the sleep need, capped at 100."""
    need = need_min if need_min is not None else DEFAULT_SLEEP_NEED_MIN
    check_positive("need_min", need)
    return max(SCORE_MIN, min(SCORE_MAX, duration_min / need * 100.0))


def efficiency_score(night: SleepRecord) -> float:
    """Reported efficiency, else time asleep / time in bed."""
    if night.efficiency_pct is not None:
        return night.efficiency_pct
    if night.time_in_bed_min is None or night.time_in_bed_min <= 0:
        return NEUTRAL_SUBSCORE
    return max(SCORE_MIN, min(SCORE_MAX, night.duration_min / night.time_in_bed_min * 100.0))


def stage_quality_score(night: SleepRecord) -> float:
    """Score the share of deep + REM sleep (target: 40 % or more)."""
    if night.duration_min <= 0 or (night.deep_min is None and night.rem_min is None):
        return NEUTRAL_SUBSCORE

    share = ((night.deep_min or 0.0) + (night.rem_min or 0.0)) / night.duration_min
    if share >= DEEP_REM_TARGET:
        return SCORE_MAX
    if share >= DEEP_REM_FLOOR:
        # 50 at 30 %, 100 at 40 %
        return 50.0 + (share - DEEP_REM_FLOOR) * 500.0
    # 0-30 % → 0-50
    return max(SCORE_MIN, share * 166.67)


def disturbances_score(disturbances: int | None) -> float:
    """Fewer wake events score higher; saturates at the floor."""
    if disturbances is None:
        return NEUTRAL_SUBSCORE
    for max_events, score in DISTURBANCE_BUCKETS:
        if disturbances <= max_events:
            return score
    return DISTURBANCE_FLOOR


def timing_score(night: SleepRecord, baselines: SleepBaselines) -> float:
    """Penalize wake time (and bedtime) deviating from baseline either way."""
    deviations: list[float] = []
    if night.wake is not None and baselines.wake_minute is not None:
        deviations.append(circular_minute_diff(minute_of_day(night.wake), baselines.wake_minute))
    if night.onset is not None and baselines.bedtime_minute is not None:
        deviations.append(
            circular_minute_diff(minute_of_day(night.onset), baselines.bedtime_minute)
        )
    if not deviations:
        return NEUTRAL_SUBSCORE

    avg_dev = sum(deviations) / len(deviations)
    for max_dev, score in TIMING_BUCKETS:
        if avg_dev <= max_dev:
            return score
    return TIMING_FLOOR


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_sleep(
    night: SleepRecord,
    baselines: SleepBaselines | None = None,
    bands: BandTable = SLEEP_BANDS,
) -> SleepResult:
    """Score one night of sleep.

    Args:
        night: The sleep record to score.
        baselines: Rolling sleep baselines; sleep need falls back to 8 h and
            timing to neutral when absent.
        bands: Threshold table used for the band.

    Returns:
        SleepResult with the 0-100 score, band and sub-scores.
    """
    baselines = baselines or SleepBaselines()
    need = baselines.need_min if baselines.need_min is not None else DEFAULT_SLEEP_NEED_MIN

    components = {
        "performance": performance_score(night.duration_min, need),
        "stage_quality": stage_quality_score(night),
        "efficiency": efficiency_score(night),
        "disturbances": disturbances_score(night.disturbances),
        "timing": timing_score(night, baselines),
    }

    raw = sum(SLEEP_WEIGHTS[name] * value for name, value in components.items())
    score = round(max(SCORE_MIN, min(SCORE_MAX, raw)), 1)

    return SleepResult(
        score=score,
        band=bands.classify(score),
        components={k: round(v, 1) for k, v in components.items()},
        need_min=need,
    )
