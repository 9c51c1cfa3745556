"""Strain scoring (Banister TRIMP → EPOC → logarithmic 0-21 scale).

Per-workout load is a Banister TRIMP from heart rate (optionally blended
with a power-based TSS).  Sessions without usable heart rate or power
(power needs an FTP) fall back to session RPE, and steps/active energy
add a saturating non-exercise load.  The weighted total is converted to an
EPOC-style value and compressed with a Whoop-style ``ln(1 + x)`` transform
so a single very hard workout does not saturate the scale.  Finally the
strain is scaled by a recovery factor in [0.85, 1.0] derived from HRV,
RHR, sleep and training-stress balance.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Mapping, Sequence

from trainready.analytics.bands import STRAIN_BANDS, BandTable, ScoreResult
from trainready.analytics.constants import (
    ACTIVITY_LOAD_CEILING,
    ACTIVITY_LOAD_WEIGHT,
    ACTIVITY_MET_CAP,
    ACTIVITY_SATURATION_MET,
    ACTIVITY_SUBSCORE_SCALE,
    CARDIO_LOAD_WEIGHT,
    CARDIO_SUBSCORE_SCALE,
    EPOC_COEFFICIENT,
    EPOC_NORMALIZER,
    MET_MINUTES_PER_BASE,
    MET_MINUTES_PER_KCAL,
    POWER_BLEND_WEIGHT,
    RECOVERY_MODULATION_RANGE,
    RECOVERY_SIGNAL_WEIGHTS,
    SCORE_MAX,
    SCORE_MIN,
    SLEEP_SIGNAL_CENTER,
    SLEEP_SIGNAL_SPREAD,
    SRPE_TRIMP_FACTOR,
    STEPS_PER_BASE,
    STRAIN_MAX,
    STRENGTH_LOAD_WEIGHT,
    STRENGTH_SRPE_SCALE,
    STRENGTH_SUBSCORE_SCALE,
    TRIMP_CONSTANTS,
    TSB_SIGNAL_SPREAD,
    WHOOP_COEFFICIENT,
    ZONE_HRR_MIDPOINTS,
)
from trainready.records import AthleteProfile, DailyActivity, WorkoutRecord, WorkoutType
from trainready.validation import check_finite, check_positive, check_range


@dataclass(frozen=True)
class RecoveryFactorInputs:
    """Readiness signals that modulate how much a given load "costs"."""

    hrv_ms: float | None = None
    hrv_baseline: float | None = None
    rhr_bpm: float | None = None
    rhr_baseline: float | None = None
    sleep_score: float | None = None  # last night's sleep score, 0-100
    tsb: float | None = None

    def __post_init__(self) -> None:
        check_positive("hrv_ms", self.hrv_ms)
        check_positive("hrv_baseline", self.hrv_baseline)
        check_positive("rhr_bpm", self.rhr_bpm)
        check_positive("rhr_baseline", self.rhr_baseline)
        check_range("sleep_score", self.sleep_score, SCORE_MIN, SCORE_MAX)
        check_finite("tsb", self.tsb)


@dataclass(frozen=True, repr=False)
class StrainResult(ScoreResult):
    """Strain score (0-21) and its breakdown."""

    raw_strain: float = 0.0  # before recovery modulation
    trimp: float = 0.0  # workout TRIMP (cardio + strength)
    epoc: float = 0.0
    recovery_factor: float = 1.0
    loads: dict[str, float] = field(default_factory=dict)  # TRIMP-equivalents

    def __repr__(self) -> str:
        return (
            f"StrainResult(score={self.score:.1f}/21, "
            f"band={self.band.value}, "
            f"trimp={self.trimp:.0f}, "
            f"factor={self.recovery_factor:.2f})"
        )


# ---------------------------------------------------------------------------
# TRIMP
# ---------------------------------------------------------------------------


def heart_rate_reserve(hr: float, profile: AthleteProfile) -> float:
    """Fraction of heart-rate reserve, clamped to [0, 1]."""
    hrr = (hr - profile.resting_hr) / (profile.max_hr - profile.resting_hr)
    return max(0.0, min(1.0, hrr))


def _trimp_weight(hrr: float, profile: AthleteProfile) -> float:
    k, b = TRIMP_CONSTANTS[profile.sex.value]
    return hrr * k * math.exp(b * hrr)


def banister_trimp(duration_min: float, avg_hr: float, profile: AthleteProfile) -> float:
    """Banister TRIMP from the session's average heart rate."""
    if duration_min <= 0:
        return 0.0
    return duration_min * _trimp_weight(heart_rate_reserve(avg_hr, profile), profile)


def zone_trimp(zone_minutes: Mapping[int, float], profile: AthleteProfile) -> float:
    """Banister TRIMP summed over a heart-rate-reserve zone distribution."""
    return sum(
        minutes * _trimp_weight(ZONE_HRR_MIDPOINTS[zone], profile)
        for zone, minutes in zone_minutes.items()
        if minutes > 0
    )


def power_stress(duration_min: float, avg_power: float, ftp: float) -> tuple[float, float]:
    """Power-based training stress score and intensity factor.

    Returns:
        ``(tss, intensity_factor)`` with ``tss = hours * IF^2 * 100``.
    """
    intensity = avg_power / ftp if ftp > 0 else 0.0
    return duration_min / 60.0 * intensity ** 2 * 100.0, intensity


def workout_trimp(workout: WorkoutRecord, profile: AthleteProfile) -> float | None:
    """Sensor-derived load for one workout.

    A zone distribution takes precedence over the average HR.  When power
    and an FTP are available the power TSS is blended in, weighted towards
    power.

    Returns:
        The TRIMP, or None when neither heart rate nor power with an FTP is
        usable.
    """
    if not workout.has_sensor_data:
        return None

    hr_trimp: float | None = None
    if any(m > 0 for m in workout.zone_minutes.values()):
        hr_trimp = zone_trimp(workout.zone_minutes, profile)
    elif workout.avg_hr is not None:
        hr_trimp = banister_trimp(workout.duration_min, workout.avg_hr, profile)

    if workout.avg_power is not None and profile.ftp is not None:
        tss, _ = power_stress(workout.duration_min, workout.avg_power, profile.ftp)
        if hr_trimp is None:
            return tss
        return POWER_BLEND_WEIGHT * tss + (1.0 - POWER_BLEND_WEIGHT) * hr_trimp

    return hr_trimp


def session_rpe_load(workout: WorkoutRecord, body_mass_kg: float | None = None) -> float:
    """Session RPE x minutes, enhanced by lifted volume and set count."""
    if workout.rpe is None or workout.duration_min <= 0:
        return 0.0
    load = workout.rpe * workout.duration_min

    if workout.strength_volume_kg is not None and body_mass_kg:
        relative_volume = workout.strength_volume_kg / body_mass_kg
        load *= 1.0 + 0.15 * min(2.0, relative_volume ** 0.25)

    if workout.strength_sets:
        load *= min(1.3, 1.0 + (workout.strength_sets - 1) * 0.05)

    return load


def strength_load(workout: WorkoutRecord, profile: AthleteProfile) -> float:
    """TRIMP-equivalent load of a session without usable HR or power."""
    return SRPE_TRIMP_FACTOR * session_rpe_load(workout, profile.body_mass_kg)


def workout_load(workout: WorkoutRecord, profile: AthleteProfile) -> float:
    """Sensor TRIMP when available, else the session-RPE equivalent."""
    trimp = workout_trimp(workout, profile)
    if trimp is None:
        return strength_load(workout, profile)
    return trimp


# ---------------------------------------------------------------------------
# Non-exercise activity
# ---------------------------------------------------------------------------


def activity_met_minutes(activity: DailyActivity | None) -> float:
    """Approximate MET-minutes from steps and active energy."""
    if activity is None:
        return 0.0
    met = 0.0
    if activity.steps:
        met += MET_MINUTES_PER_BASE * activity.steps / STEPS_PER_BASE
    if activity.active_kcal:
        met += activity.active_kcal * MET_MINUTES_PER_KCAL
    return met


def activity_load(activity: DailyActivity | None) -> float:
    """Saturating TRIMP-equivalent for incidental daily movement."""
    met = activity_met_minutes(activity)
    return ACTIVITY_LOAD_CEILING * (1.0 - math.exp(-met / ACTIVITY_SATURATION_MET))


# ---------------------------------------------------------------------------
# EPOC / Whoop transform
# ---------------------------------------------------------------------------


def convert_trimp_to_epoc(load: float) -> float:
    return load * EPOC_COEFFICIENT


def whoop_strain(epoc: float) -> float:
    """Logarithmic 0-21 strain from an EPOC value."""
    if epoc <= 0:
        return 0.0
    return min(STRAIN_MAX, WHOOP_COEFFICIENT * math.log1p(epoc / EPOC_NORMALIZER))


# ---------------------------------------------------------------------------
# Diagnostic sub-scores (0-100)
# ---------------------------------------------------------------------------


def _bounded(value: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, value))


def cardio_subscore(
    trimp: float,
    duration_min: float = 0.0,
    intensity_factor: float | None = None,
) -> float:
    """Log-compressed cardio load with bonuses for long or intense work."""
    if trimp <= 0:
        return 0.0
    score = CARDIO_SUBSCORE_SCALE * math.log10(trimp + 1.0)
    if duration_min > 60:
        score += min(10.0, (duration_min - 60) * 0.1)
    if intensity_factor is not None and intensity_factor > 0.8:
        score += min(15.0, (intensity_factor - 0.8) * 75.0)
    return _bounded(score)


def strength_subscore(srpe_equivalent: float) -> float:
    """Log-compressed strength load from (equivalent) session RPE."""
    if srpe_equivalent <= 0:
        return 0.0
    return _bounded(STRENGTH_SUBSCORE_SCALE * math.log10(STRENGTH_SRPE_SCALE * srpe_equivalent + 1.0))


def activity_subscore(activity: DailyActivity | None) -> float:
    met = min(activity_met_minutes(activity), ACTIVITY_MET_CAP)
    return _bounded(ACTIVITY_SUBSCORE_SCALE * math.log1p(met))


# ---------------------------------------------------------------------------
# Recovery modulation
# ---------------------------------------------------------------------------


def recovery_factor(inputs: RecoveryFactorInputs | None) -> float:
    """Multiplier in [0.85, 1.0]; below 1 when the athlete is under-recovered.

    Missing signals contribute nothing, so no inputs gives exactly 1.0.
    """
    if inputs is None:
        return 1.0

    z = {"hrv": 0.0, "rhr": 0.0, "sleep": 0.0, "tsb": 0.0}
    if inputs.hrv_ms is not None and inputs.hrv_baseline:
        z["hrv"] = (inputs.hrv_ms - inputs.hrv_baseline) / inputs.hrv_baseline
    if inputs.rhr_bpm is not None and inputs.rhr_baseline:
        # Inverted: lower RHR is better
        z["rhr"] = (inputs.rhr_baseline - inputs.rhr_bpm) / inputs.rhr_baseline
    if inputs.sleep_score is not None:
        z["sleep"] = (inputs.sleep_score - SLEEP_SIGNAL_CENTER) / SLEEP_SIGNAL_SPREAD
    if inputs.tsb is not None:
        z["tsb"] = inputs.tsb / TSB_SIGNAL_SPREAD

    signal = sum(RECOVERY_SIGNAL_WEIGHTS[k] * v for k, v in z.items())
    signal = max(-1.0, min(0.0, signal))
    return 1.0 + RECOVERY_MODULATION_RANGE * signal


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def score_strain(
    workouts: Sequence[WorkoutRecord],
    activity: DailyActivity | None = None,
    recovery_inputs: RecoveryFactorInputs | None = None,
    profile: AthleteProfile | None = None,
    bands: BandTable = STRAIN_BANDS,
) -> StrainResult:
    """Compute a day's strain.

    Args:
        workouts: The day's exercise sessions (may be empty).
        activity: Steps / active energy for the day.
        recovery_inputs: Readiness signals for the recovery factor.
        profile: Athlete physiology for TRIMP (defaults apply if omitted).
        bands: Threshold table used for the band.

    Returns:
        StrainResult with the 0-21 score, band and diagnostics.
    """
    profile = profile or AthleteProfile()

    cardio_trimp = 0.0
    cardio_minutes = 0.0
    strength_trimp = 0.0
    strength_srpe = 0.0  # in session-RPE units, for the sub-score
    if_weighted = 0.0
    if_minutes = 0.0

    for w in workouts:
        load = workout_trimp(w, profile)
        if load is None:
            srpe_equiv = session_rpe_load(w, profile.body_mass_kg)
            load = SRPE_TRIMP_FACTOR * srpe_equiv
        else:
            srpe_equiv = load / SRPE_TRIMP_FACTOR

        if w.workout_type is WorkoutType.STRENGTH:
            strength_trimp += load
            strength_srpe += srpe_equiv
        else:
            cardio_trimp += load
            cardio_minutes += w.duration_min
            if w.avg_power is not None and profile.ftp is not None:
                _, intensity = power_stress(w.duration_min, w.avg_power, profile.ftp)
                if_weighted += intensity * w.duration_min
                if_minutes += w.duration_min

    intensity_factor = if_weighted / if_minutes if if_minutes > 0 else None
    non_exercise = activity_load(activity)

    total_load = (
        CARDIO_LOAD_WEIGHT * cardio_trimp
        + STRENGTH_LOAD_WEIGHT * strength_trimp
        + ACTIVITY_LOAD_WEIGHT * non_exercise
    )
    epoc = convert_trimp_to_epoc(total_load)
    raw = whoop_strain(epoc)
    factor = recovery_factor(recovery_inputs)
    score = round(max(0.0, min(STRAIN_MAX, raw * factor)), 1)

    components = {
        "cardio": round(cardio_subscore(cardio_trimp, cardio_minutes, intensity_factor), 1),
        "strength": round(strength_subscore(strength_srpe), 1),
        "activity": round(activity_subscore(activity), 1),
    }

    return StrainResult(
        score=score,
        band=bands.classify(score),
        components=components,
        raw_strain=round(raw, 2),
        trimp=round(cardio_trimp + strength_trimp, 2),
        epoc=round(epoc, 2),
        recovery_factor=round(factor, 3),
        loads={
            "cardio": round(cardio_trimp, 2),
            "strength": round(strength_trimp, 2),
            "activity": round(non_exercise, 2),
        },
    )
