"""Input records consumed by the scoring engines.

All records are immutable and validated on construction.  Units:

    durations   minutes
    heart rate  bpm
    HRV         ms (RMSSD)
    power       watts
    energy      kcal
    respiration breaths/min
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

from trainready.errors import DomainViolationError
from trainready.validation import (
    check_non_negative,
    check_positive,
    check_range,
)


class WorkoutType(str, Enum):
    """Coarse workout category."""

    CYCLING = "cycling"
    RUNNING = "running"
    STRENGTH = "strength"
    OTHER = "other"


class BiologicalSex(str, Enum):
    """Selects the Banister TRIMP constants."""

    FEMALE = "female"
    MALE = "male"
    UNSPECIFIED = "unspecified"


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WorkoutRecord:
    """A single exercise session."""

    duration_min: float
    workout_type: WorkoutType = WorkoutType.OTHER
    avg_hr: float | None = None
    zone_minutes: dict[int, float] = field(default_factory=dict)  # HRR zone 1-5 → minutes
    avg_power: float | None = None
    rpe: float | None = None  # session RPE, 1-10
    strength_sets: int | None = None
    strength_volume_kg: float | None = None

    def __post_init__(self) -> None:
        check_non_negative("duration_min", self.duration_min)
        check_positive("avg_hr", self.avg_hr)
        check_non_negative("avg_power", self.avg_power)
        check_non_negative("strength_volume_kg", self.strength_volume_kg)
        check_range("rpe", self.rpe, 1.0, 10.0)
        if self.strength_sets is not None and self.strength_sets < 0:
            raise DomainViolationError(f"strength_sets must be >= 0, got {self.strength_sets!r}")
        for zone, minutes in self.zone_minutes.items():
            if zone not in (1, 2, 3, 4, 5):
                raise DomainViolationError(f"unknown HR zone {zone!r}")
            check_non_negative(f"zone_minutes[{zone}]", minutes)

    def __hash__(self) -> int:
        # zone_minutes is a dict, so hash a frozen view of it
        return hash((
            self.duration_min,
            self.workout_type,
            self.avg_hr,
            tuple(sorted(self.zone_minutes.items())),
            self.avg_power,
            self.rpe,
            self.strength_sets,
            self.strength_volume_kg,
        ))

    @property
    def has_sensor_data(self) -> bool:
        """True when the session carries heart rate or power."""
        return (
            self.avg_hr is not None
            or self.avg_power is not None
            or any(m > 0 for m in self.zone_minutes.values())
        )


@dataclass(frozen=True)
class SleepRecord:
    """One night of sleep."""

    duration_min: float  # time asleep
    time_in_bed_min: float | None = None
    deep_min: float | None = None
    rem_min: float | None = None
    efficiency_pct: float | None = None
    disturbances: int | None = None  # wake events
    onset: datetime | None = None
    wake: datetime | None = None

    def __post_init__(self) -> None:
        check_non_negative("duration_min", self.duration_min)
        check_non_negative("time_in_bed_min", self.time_in_bed_min)
        check_non_negative("deep_min", self.deep_min)
        check_non_negative("rem_min", self.rem_min)
        check_range("efficiency_pct", self.efficiency_pct, 0.0, 100.0)
        if self.disturbances is not None and self.disturbances < 0:
            raise DomainViolationError(f"disturbances must be >= 0, got {self.disturbances!r}")
        if self.onset is not None and self.wake is not None and self.wake < self.onset:
            raise DomainViolationError("wake time precedes sleep onset")


@dataclass(frozen=True)
class DailyActivity:
    """Non-exercise movement for a day."""

    steps: int | None = None
    active_kcal: float | None = None

    def __post_init__(self) -> None:
        if self.steps is not None and self.steps < 0:
            raise DomainViolationError(f"steps must be >= 0, got {self.steps!r}")
        check_non_negative("active_kcal", self.active_kcal)


@dataclass(frozen=True)
class DailyObservation:
    """Everything observed for one calendar day."""

    day: date
    hrv_ms: float | None = None
    rhr_bpm: float | None = None
    respiratory_rate: float | None = None
    sleep: SleepRecord | None = None
    activity: DailyActivity | None = None
    workouts: tuple[WorkoutRecord, ...] = ()
    sleep_score: float | None = None  # previously computed score for this night
    training_stress: float | None = None

    def __post_init__(self) -> None:
        check_positive("hrv_ms", self.hrv_ms)
        check_positive("rhr_bpm", self.rhr_bpm)
        check_positive("respiratory_rate", self.respiratory_rate)
        check_non_negative("training_stress", self.training_stress)
        check_range("sleep_score", self.sleep_score, 0.0, 100.0)
        # Accept any iterable of workouts but store a tuple
        if not isinstance(self.workouts, tuple):
            object.__setattr__(self, "workouts", tuple(self.workouts))


@dataclass(frozen=True)
class AthleteProfile:
    """Per-athlete physiology used by the TRIMP calculations."""

    max_hr: float = 190.0
    resting_hr: float = 60.0
    sex: BiologicalSex = BiologicalSex.UNSPECIFIED
    ftp: float | None = None
    body_mass_kg: float | None = None

    def __post_init__(self) -> None:
        check_positive("max_hr", self.max_hr)
        check_positive("resting_hr", self.resting_hr)
        check_positive("ftp", self.ftp)
        check_positive("body_mass_kg", self.body_mass_kg)
        if self.max_hr <= self.resting_hr:
            raise DomainViolationError(
                f"max_hr ({self.max_hr}) must exceed resting_hr ({self.resting_hr})"
            )
