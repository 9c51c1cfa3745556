"""Scoring engines for daily training-readiness metrics.

Modules:
    constants     -- Weights, thresholds and model constants
    bands         -- Score → qualitative band classification
    baseline      -- Rolling per-signal baselines and alcohol-day exclusion
    training_load -- CTL / ATL / TSB exponentially-weighted load
    strain        -- TRIMP → EPOC → 0-21 strain
    sleep         -- Five-component sleep score
    recovery      -- HRV / RHR / sleep / load recovery score
    summary       -- Daily summary aggregation
    pipeline      -- Runs every engine for the latest day of a window
"""

from trainready.analytics.bands import Band, BandTable, ScoreResult, classify
from trainready.analytics.baseline import (
    Signal,
    compute_baseline,
    compute_sleep_baselines,
    detect_alcohol_days,
    robust_baseline,
)
from trainready.analytics.training_load import (
    TrainingLoadState,
    advance,
    estimate_initial_state,
    replay,
)
from trainready.analytics.strain import score_strain, StrainResult, RecoveryFactorInputs
from trainready.analytics.sleep import score_sleep, SleepResult, SleepBaselines
from trainready.analytics.recovery import score_recovery, RecoveryResult
from trainready.analytics.summary import build_daily_summary, DailySummary
from trainready.analytics.pipeline import run_pipeline, daily_stress

__all__ = [
    # bands
    "Band",
    "BandTable",
    "ScoreResult",
    "classify",
    # baseline
    "Signal",
    "compute_baseline",
    "compute_sleep_baselines",
    "detect_alcohol_days",
    "robust_baseline",
    # training load
    "TrainingLoadState",
    "advance",
    "estimate_initial_state",
    "replay",
    # strain
    "score_strain",
    "StrainResult",
    "RecoveryFactorInputs",
    # sleep
    "score_sleep",
    "SleepResult",
    "SleepBaselines",
    # recovery
    "score_recovery",
    "RecoveryResult",
    # summary
    "build_daily_summary",
    "DailySummary",
    # pipeline
    "run_pipeline",
    "daily_stress",
]
