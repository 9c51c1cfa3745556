"""Daily summary aggregator.

Pulls the results of all engines into a single DailySummary that is
JSON-serializable.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

from trainready.analytics.recovery import RecoveryResult
from trainready.analytics.sleep import SleepResult
from trainready.analytics.strain import StrainResult
from trainready.analytics.training_load import TrainingLoadState


@dataclass
class DailySummary:
    """A single day's scores."""

    date: str  # ISO date string, e.g. "2026-02-13"

    # Recovery
    recovery_score: float | None = None
    recovery_band: str | None = None
    alcohol_flag: bool = False
    limited_data: bool = False

    # Sleep
    sleep_score: float | None = None
    sleep_band: str | None = None
    sleep_debt_min: float | None = None

    # Strain
    strain_score: float | None = None
    strain_band: str | None = None
    trimp: float = 0.0

    # Training load (end of day)
    ctl: float = 0.0
    atl: float = 0.0
    tsb: float = 0.0

    # Baselines used
    hrv_baseline: float | None = None
    rhr_baseline: float | None = None

    components: dict[str, dict[str, float]] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict (JSON-friendly)."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        def fmt(v: float | None) -> str:
            return "n/a" if v is None else f"{v:.0f}"

        return (
            f"DailySummary({self.date}: "
            f"recovery={fmt(self.recovery_score)}, "
            f"sleep={fmt(self.sleep_score)}, "
            f"strain={'n/a' if self.strain_score is None else f'{self.strain_score:.1f}'}/21, "
            f"tsb={self.tsb:+.1f})"
        )


def build_daily_summary(
    day: date | str,
    sleep: SleepResult | None = None,
    recovery: RecoveryResult | None = None,
    strain: StrainResult | None = None,
    load: TrainingLoadState | None = None,
    hrv_baseline: float | None = None,
    rhr_baseline: float | None = None,
    sleep_debt_min: float | None = None,
) -> DailySummary:
    """Build a daily summary from individual engine results.

    Args:
        day: The date for this summary.
        sleep: Sleep score result.
        recovery: Recovery score result.
        strain: Strain score result.
        load: Training load state at the end of the day.
        hrv_baseline: HRV baseline used for recovery.
        rhr_baseline: RHR baseline used for recovery.
        sleep_debt_min: Cumulative sleep debt.

    Returns:
        A populated DailySummary.
    """
    date_str = day if isinstance(day, str) else day.isoformat()

    summary = DailySummary(
        date=date_str,
        hrv_baseline=hrv_baseline,
        rhr_baseline=rhr_baseline,
        sleep_debt_min=sleep_debt_min,
    )

    if recovery is not None:
        summary.recovery_score = recovery.score
        summary.recovery_band = recovery.band.value
        summary.alcohol_flag = recovery.alcohol_flag
        summary.limited_data = recovery.limited_data
        summary.components["recovery"] = dict(recovery.components)

    if sleep is not None:
        summary.sleep_score = sleep.score
        summary.sleep_band = sleep.band.value
        summary.components["sleep"] = dict(sleep.components)

    if strain is not None:
        summary.strain_score = strain.score
        summary.strain_band = strain.band.value
        summary.trimp = strain.trimp
        summary.components["strain"] = dict(strain.components)

    if load is not None:
        summary.ctl = round(load.ctl, 1)
        summary.atl = round(load.atl, 1)
        summary.tsb = round(load.tsb, 1)

    return summary
