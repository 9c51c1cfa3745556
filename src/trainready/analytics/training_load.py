"""Training load model (CTL / ATL / TSB).

Chronic and acute training load are exponentially-weighted moving averages
of daily training stress with 42- and 7-day time constants.  Each day's
state depends only on the previous state and that day's stress, so callers
persist a :class:`TrainingLoadState` and call :func:`advance` once per
calendar day.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

import numpy as np

from trainready.analytics.constants import (
    ATL_TIME_CONSTANT,
    CTL_TIME_CONSTANT,
    SEED_ATL_MULTIPLIER,
    SEED_CTL_MULTIPLIER,
    SEED_WINDOW_DAYS,
)
from trainready.errors import DomainViolationError


@dataclass(frozen=True)
class TrainingLoadState:
    """CTL (fitness) and ATL (fatigue) as of the end of a day."""

    ctl: float = 0.0
    atl: float = 0.0

    def __post_init__(self) -> None:
        for name, value in (("ctl", self.ctl), ("atl", self.atl)):
            if not math.isfinite(value) or value < 0:
                raise DomainViolationError(f"{name} must be finite and >= 0, got {value!r}")

    @property
    def tsb(self) -> float:
        """Training stress balance (form): positive = fresh."""
        return self.ctl - self.atl

    def __repr__(self) -> str:
        return f"TrainingLoadState(ctl={self.ctl:.1f}, atl={self.atl:.1f}, tsb={self.tsb:+.1f})"


def advance(previous: TrainingLoadState, today_stress: float | None) -> TrainingLoadState:
    """Roll the load model forward by one day.

    Args:
        previous: State at the end of yesterday.
        today_stress: Today's training stress.  ``None`` is a rest day and
            counts as zero; the decay must still be applied.

    Returns:
        The state at the end of today.
    """
    stress = 0.0 if today_stress is None else float(today_stress)
    if not math.isfinite(stress) or stress < 0:
        raise DomainViolationError(f"training stress must be finite and >= 0, got {today_stress!r}")

    ctl = previous.ctl + (stress - previous.ctl) / CTL_TIME_CONSTANT
    atl = previous.atl + (stress - previous.atl) / ATL_TIME_CONSTANT
    return TrainingLoadState(ctl=ctl, atl=atl)


def replay(
    daily_stress: Iterable[float | None],
    initial: TrainingLoadState | None = None,
) -> list[TrainingLoadState]:
    """Apply :func:`advance` for each day in chronological order.

    Returns one state per input day.
    """
    state = initial if initial is not None else TrainingLoadState()
    states: list[TrainingLoadState] = []
    for stress in daily_stress:
        state = advance(state, stress)
        states.append(state)
    return states


def estimate_initial_state(daily_stress: Sequence[float | None]) -> TrainingLoadState:
    """Estimate a seed state for an athlete with no load history.

    Uses the mean stress of the training days in the first two weeks; at a
    steady 3-4 sessions a week CTL settles near 70 % of that and ATL starts
    lower.
    """
    head = [s for s in daily_stress[:SEED_WINDOW_DAYS] if s is not None and s > 0]
    if not head:
        return TrainingLoadState()
    avg = float(np.mean(head))
    return TrainingLoadState(ctl=avg * SEED_CTL_MULTIPLIER, atl=avg * SEED_ATL_MULTIPLIER)
