"""Analytics pipeline: run every engine for the latest day of a window.

This module consumes a chronological list of :class:`DailyObservation`
(as produced by :func:`trainready.loader.load_observations`), derives the
baselines and training load from the preceding days and produces a
:class:`DailySummary` for the last day.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Sequence

from trainready.analytics.baseline import (
    Signal,
    compute_baseline,
    compute_sleep_baselines,
    detect_alcohol_days,
    sleep_debt,
)
from trainready.analytics.constants import (
    DEFAULT_BASELINE_MIN_DAYS,
    DEFAULT_BASELINE_WINDOW_DAYS,
    DEFAULT_SLEEP_NEED_MIN,
)
from trainready.analytics.recovery import score_recovery
from trainready.analytics.sleep import score_sleep
from trainready.analytics.strain import (
    RecoveryFactorInputs,
    score_strain,
    workout_load,
)
from trainready.analytics.summary import DailySummary, build_daily_summary
from trainready.analytics.training_load import TrainingLoadState, advance, replay
from trainready.records import AthleteProfile, DailyObservation

logger = logging.getLogger(__name__)


def daily_stress(obs: DailyObservation, profile: AthleteProfile) -> float:
    """Training stress for a day.

    A caller-supplied ``training_stress`` wins; otherwise the day's workouts
    are summed (sensor TRIMP, or session-RPE equivalent without sensors).
    """
    if obs.training_stress is not None:
        return obs.training_stress
    return sum(workout_load(w, profile) for w in obs.workouts)


def stress_series(
    observations: Sequence[DailyObservation],
    profile: AthleteProfile,
) -> list[tuple[date, float | None]]:
    """One ``(day, stress)`` pair per calendar day, gaps as rest days (None)."""
    if not observations:
        return []
    by_day = {obs.day: daily_stress(obs, profile) for obs in observations}
    first, last = observations[0].day, observations[-1].day
    series: list[tuple[date, float | None]] = []
    day = first
    while day <= last:
        series.append((day, by_day.get(day)))
        day += timedelta(days=1)
    return series


def run_pipeline(
    observations: Sequence[DailyObservation],
    profile: AthleteProfile | None = None,
    baseline_window: int = DEFAULT_BASELINE_WINDOW_DAYS,
    min_days: int = DEFAULT_BASELINE_MIN_DAYS,
    sleep_need_min: float | None = None,
    initial_load: TrainingLoadState | None = None,
) -> DailySummary:
    """Score the last day of *observations*.

    Args:
        observations: Daily observations, any order; the latest day is scored.
        profile: Athlete physiology for TRIMP.
        baseline_window: Number of preceding days used for baselines.
        min_days: Minimum days of a signal required for a baseline.
        sleep_need_min: Personalized sleep need (default 8 h).
        initial_load: Load state before the first observed day.

    Returns:
        A populated DailySummary for the latest day.
    """
    if not observations:
        raise ValueError("run_pipeline needs at least one observation")

    profile = profile or AthleteProfile()
    ordered = sorted(observations, key=lambda o: o.day)
    today = ordered[-1]
    history = ordered[:-1]
    window = [o for o in history if o.day >= today.day - timedelta(days=baseline_window)]

    # --- Baselines ---
    excluded = detect_alcohol_days(history)
    if excluded:
        logger.debug("Excluding %d suspected alcohol day(s) from baselines", len(excluded))
    hrv_baseline = compute_baseline(Signal.HRV, window, min_days, exclude=excluded)
    rhr_baseline = compute_baseline(Signal.RHR, window, min_days, exclude=excluded)
    resp_baseline = compute_baseline(Signal.RESPIRATORY_RATE, window, min_days)
    sleep_baselines = compute_sleep_baselines(window, min_days, need_min=sleep_need_min)
    for name, value in (("HRV", hrv_baseline), ("RHR", rhr_baseline)):
        if value is None:
            logger.debug("No %s baseline yet (fewer than %d days); using neutral score", name, min_days)

    # --- Training load ---
    series = stress_series(ordered, profile)
    states = replay((s for _, s in series[:-1]), initial=initial_load)
    yesterday_state = states[-1] if states else (initial_load or TrainingLoadState())
    today_state = advance(yesterday_state, series[-1][1])
    tsb = yesterday_state.tsb if states or initial_load is not None else None
    recent_stress = series[-2][1] if len(series) >= 2 else None

    # --- Sleep (last night) ---
    sleep_result = None
    if today.sleep is not None:
        sleep_result = score_sleep(today.sleep, sleep_baselines)
    last_night_score = sleep_result.score if sleep_result is not None else today.sleep_score

    # --- Recovery ---
    recovery_result = score_recovery(
        today.hrv_ms,
        today.rhr_bpm,
        hrv_baseline,
        rhr_baseline,
        last_night_score,
        tsb,
        respiratory_rate=today.respiratory_rate,
        respiratory_baseline=resp_baseline,
        recent_stress=recent_stress,
        sleep_duration_min=today.sleep.duration_min if today.sleep is not None else None,
        sleep_duration_baseline=sleep_baselines.duration_min,
    )

    # --- Strain ---
    strain_result = score_strain(
        today.workouts,
        today.activity,
        RecoveryFactorInputs(
            hrv_ms=today.hrv_ms,
            hrv_baseline=hrv_baseline,
            rhr_bpm=today.rhr_bpm,
            rhr_baseline=rhr_baseline,
            sleep_score=last_night_score,
            tsb=tsb,
        ),
        profile,
    )

    need = sleep_need_min if sleep_need_min is not None else DEFAULT_SLEEP_NEED_MIN
    summary = build_daily_summary(
        day=today.day,
        sleep=sleep_result,
        recovery=recovery_result,
        strain=strain_result,
        load=today_state,
        hrv_baseline=hrv_baseline,
        rhr_baseline=rhr_baseline,
        sleep_debt_min=sleep_debt(window + [today], need),
    )
    logger.info("Scored %r", summary)
    return summary


def training_load_series(
    observations: Sequence[DailyObservation],
    profile: AthleteProfile | None = None,
    initial: TrainingLoadState | None = None,
) -> list[tuple[date, TrainingLoadState]]:
    """End-of-day load state for every calendar day the observations span."""
    profile = profile or AthleteProfile()
    series = stress_series(sorted(observations, key=lambda o: o.day), profile)
    states = replay((s for _, s in series), initial=initial)
    return [(day, state) for (day, _), state in zip(series, states)]
