"""Rolling per-signal baselines.

A baseline is the mean of a signal over a caller-chosen window of days.
When fewer than ``min_days`` observations of the signal are present the
result is ``None``: a new user has *no* baseline, which downstream engines
treat as "neutral", never as a baseline of zero.
"""

from __future__ import annotations

import math
from datetime import date
from enum import Enum
from typing import Collection, Sequence

import numpy as np

from trainready.analytics.constants import (
    ALCOHOL_DAY_SCORE_THRESHOLD,
    DEFAULT_BASELINE_MIN_DAYS,
    DEFAULT_SLEEP_NEED_MIN,
    HRV_CV_EXCELLENT,
    HRV_CV_GOOD,
    HRV_CV_MODERATE,
    OUTLIER_SIGMA,
)
from trainready.analytics.sleep import MINUTES_PER_DAY, SleepBaselines, minute_of_day
from trainready.errors import DomainViolationError
from trainready.records import DailyObservation


class Signal(str, Enum):
    """Signals a baseline can be computed for."""

    HRV = "hrv"
    RHR = "rhr"
    SLEEP_DURATION = "sleep_duration"
    SLEEP_SCORE = "sleep_score"
    RESPIRATORY_RATE = "respiratory_rate"


class HRVStability(str, Enum):
    """Day-to-day HRV stability from the coefficient of variation."""

    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"


def extract_signal(obs: DailyObservation, signal: Signal) -> float | None:
    """Pull one signal out of a day's observation (None if absent)."""
    if signal is Signal.HRV:
        return obs.hrv_ms
    if signal is Signal.RHR:
        return obs.rhr_bpm
    if signal is Signal.SLEEP_DURATION:
        return obs.sleep.duration_min if obs.sleep is not None else None
    if signal is Signal.SLEEP_SCORE:
        return obs.sleep_score
    if signal is Signal.RESPIRATORY_RATE:
        return obs.respiratory_rate
    raise DomainViolationError(f"unknown signal {signal!r}")


def _check_min_days(min_days: int) -> None:
    if min_days < 1:
        raise DomainViolationError(f"min_days must be >= 1, got {min_days!r}")


def compute_baseline(
    signal: Signal,
    window: Sequence[DailyObservation],
    min_days: int = DEFAULT_BASELINE_MIN_DAYS,
    exclude: Collection[date] = (),
) -> float | None:
    """Arithmetic mean of *signal* across *window*.

    Args:
        signal: Which signal to average.
        window: Daily observations; the caller picks the window length.
        min_days: Minimum number of days carrying the signal.
        exclude: Days to leave out (e.g. from :func:`detect_alcohol_days`).

    Returns:
        The mean, or None if fewer than *min_days* values are present.
    """
    _check_min_days(min_days)
    values: list[float] = []
    for obs in window:
        if obs.day in exclude:
            continue
        value = extract_signal(obs, signal)
        if value is not None:
            values.append(value)

    if len(values) < min_days:
        return None
    return float(np.mean(values))


def robust_baseline(
    values: Sequence[float],
    sigma: float = OUTLIER_SIGMA,
    min_days: int = DEFAULT_BASELINE_MIN_DAYS,
) -> float | None:
    """Median after dropping values more than *sigma* std devs from the mean."""
    _check_min_days(min_days)
    if len(values) < min_days:
        return None
    arr = np.asarray(values, dtype=np.float64)
    std = float(np.std(arr))
    kept = arr[np.abs(arr - arr.mean()) <= std * sigma]
    if len(kept) == 0:
        return None
    return float(np.median(kept))


def _circular_mean_minute(minutes: Sequence[float]) -> float:
    """Mean clock time, so 23:50 and 00:10 average to midnight."""
    angles = np.asarray(minutes, dtype=np.float64) / MINUTES_PER_DAY * 2 * np.pi
    mean_angle = math.atan2(float(np.mean(np.sin(angles))), float(np.mean(np.cos(angles))))
    return (mean_angle / (2 * np.pi) * MINUTES_PER_DAY) % MINUTES_PER_DAY


def compute_sleep_baselines(
    window: Sequence[DailyObservation],
    min_days: int = DEFAULT_BASELINE_MIN_DAYS,
    need_min: float | None = None,
) -> SleepBaselines:
    """Build the sleep engine's baselines from a window of days.

    Args:
        window: Daily observations preceding the night being scored.
        min_days: Minimum nights required per baseline.
        need_min: Personalized sleep need, passed through unchanged.
    """
    _check_min_days(min_days)
    nights = [obs.sleep for obs in window if obs.sleep is not None]
    wakes = [minute_of_day(n.wake) for n in nights if n.wake is not None]
    onsets = [minute_of_day(n.onset) for n in nights if n.onset is not None]

    return SleepBaselines(
        need_min=need_min,
        duration_min=compute_baseline(Signal.SLEEP_DURATION, window, min_days),
        wake_minute=_circular_mean_minute(wakes) if len(wakes) >= min_days else None,
        bedtime_minute=_circular_mean_minute(onsets) if len(onsets) >= min_days else None,
    )


def hrv_coefficient_of_variation(
    window: Sequence[DailyObservation],
    days: int = 7,
) -> float | None:
    """HRV coefficient of variation (%) over the last *days* HRV readings."""
    values = [obs.hrv_ms for obs in window if obs.hrv_ms is not None][-days:]
    if len(values) < DEFAULT_BASELINE_MIN_DAYS:
        return None
    arr = np.asarray(values, dtype=np.float64)
    mean = float(arr.mean())
    if mean <= 0:
        return None
    return float(np.std(arr)) / mean * 100.0


def hrv_stability(cv: float) -> HRVStability:
    if cv < HRV_CV_EXCELLENT:
        return HRVStability.EXCELLENT
    if cv < HRV_CV_GOOD:
        return HRVStability.GOOD
    if cv < HRV_CV_MODERATE:
        return HRVStability.MODERATE
    return HRVStability.POOR


def _alcohol_day_score(
    prev: DailyObservation,
    today: DailyObservation,
    nxt: DailyObservation | None,
) -> int:
    score = 0

    hrv_drop = (today.hrv_ms - prev.hrv_ms) / prev.hrv_ms
    if hrv_drop < -0.30:
        score += 3
    elif hrv_drop < -0.20:
        score += 2
    elif hrv_drop < -0.15:
        score += 1

    rhr_spike = today.rhr_bpm - prev.rhr_bpm
    if rhr_spike > 8:
        score += 3
    elif rhr_spike > 5:
        score += 2
    elif rhr_spike > 3:
        score += 1

    if today.sleep_score is not None:
        if today.sleep_score < 50:
            score += 2
        elif today.sleep_score < 65:
            score += 1

    if today.day.weekday() >= 5:  # Saturday / Sunday
        score += 1

    # Alcohol tends to rebound the next night
    if nxt is not None and nxt.hrv_ms is not None:
        rebound = (nxt.hrv_ms - today.hrv_ms) / today.hrv_ms
        if rebound > 0.20:
            score += 2
        elif rebound > 0.15:
            score += 1

    return score


def detect_alcohol_days(window: Sequence[DailyObservation]) -> set[date]:
    """Flag historical days whose HRV/RHR pattern looks like alcohol.

    Flagged days and the recovery day after each are returned so they can
    be excluded from baseline computation.  Days missing HRV or RHR (or
    whose previous day does) are never flagged.
    """
    flagged: set[date] = set()
    for i in range(1, len(window)):
        prev, today = window[i - 1], window[i]
        if None in (prev.hrv_ms, prev.rhr_bpm, today.hrv_ms, today.rhr_bpm):
            continue
        nxt = window[i + 1] if i + 1 < len(window) else None
        if _alcohol_day_score(prev, today, nxt) >= ALCOHOL_DAY_SCORE_THRESHOLD:
            flagged.add(today.day)
            if nxt is not None:
                flagged.add(nxt.day)
    return flagged


def sleep_debt(
    window: Sequence[DailyObservation],
    need_min: float = DEFAULT_SLEEP_NEED_MIN,
) -> float:
    """Cumulative sleep deficit in minutes (never below zero).

    Nights without a sleep record are skipped rather than counted as zero
    sleep.
    """
    debt = 0.0
    for obs in window:
        if obs.sleep is None:
            continue
        debt = max(0.0, debt + need_min - obs.sleep.duration_min)
    return debt
