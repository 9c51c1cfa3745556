"""Ordinal score bands shared by the recovery, sleep and strain engines."""

from __future__ import annotations

import math
from bisect import bisect_right
from dataclasses import dataclass, field
from enum import Enum
from typing import Sequence

from trainready.errors import DomainViolationError


class Band(str, Enum):
    """Qualitative classification of a score."""

    POOR = "poor"
    FAIR = "fair"
    GOOD = "good"
    OPTIMAL = "optimal"
    LIGHT = "light"
    MODERATE = "moderate"
    HIGH = "high"
    ALL_OUT = "all_out"


def classify(score: float, thresholds: Sequence[float], labels: Sequence[Band]) -> Band:
    """Map *score* onto one of *labels*.

    ``thresholds`` are ascending inclusive lower bounds for ``labels[1:]``;
    anything below ``thresholds[0]`` gets ``labels[0]``.  A score sitting
    exactly on a threshold belongs to the higher band.
    """
    if len(labels) != len(thresholds) + 1:
        raise DomainViolationError(
            f"need exactly one more label than thresholds "
            f"(got {len(labels)} labels, {len(thresholds)} thresholds)"
        )
    if any(b <= a for a, b in zip(thresholds, thresholds[1:])):
        raise DomainViolationError(f"thresholds must be strictly ascending: {list(thresholds)}")
    if math.isnan(score):
        raise DomainViolationError("cannot classify a NaN score")
    return labels[bisect_right(thresholds, score)]


@dataclass(frozen=True)
class BandTable:
    """A threshold table for one score type."""

    thresholds: tuple[float, ...]
    labels: tuple[Band, ...]

    def __post_init__(self) -> None:
        # Validate eagerly so a bad table fails at definition time
        classify(self.thresholds[0] if self.thresholds else 0.0, self.thresholds, self.labels)

    def classify(self, score: float) -> Band:
        return classify(score, self.thresholds, self.labels)


_WELLNESS_LABELS = (Band.POOR, Band.FAIR, Band.GOOD, Band.OPTIMAL)

RECOVERY_BANDS = BandTable((60.0, 70.0, 80.0), _WELLNESS_LABELS)
SLEEP_BANDS = BandTable((40.0, 60.0, 80.0), _WELLNESS_LABELS)
STRAIN_BANDS = BandTable(
    (6.0, 11.0, 16.0),
    (Band.LIGHT, Band.MODERATE, Band.HIGH, Band.ALL_OUT),
)


@dataclass(frozen=True)
class ScoreResult:
    """A bounded score, its band and the named sub-scores behind it."""

    score: float
    band: Band
    components: dict[str, float] = field(default_factory=dict)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(score={self.score:.1f}, band={self.band.value})"
