"""Named domain constants shared by the scoring engines.

All tunable numbers used by the engines live here.  The weights and cut
points are empirically tuned reference values, not derived from a
physiological model.
"""

from __future__ import annotations

import math

# ---------------------------------------------------------------------------
# Scales
# ---------------------------------------------------------------------------

SCORE_MIN = 0.0
SCORE_MAX = 100.0
STRAIN_MAX = 21.0  # Whoop-style strain ceiling
NEUTRAL_SUBSCORE = 50.0  # used when a component's inputs are missing

# ---------------------------------------------------------------------------
# Baselines
# ---------------------------------------------------------------------------

DEFAULT_BASELINE_MIN_DAYS = 3
DEFAULT_BASELINE_WINDOW_DAYS = 7
OUTLIER_SIGMA = 3.0

# HRV coefficient of variation (%) → stability cut points
HRV_CV_EXCELLENT = 5.0
HRV_CV_GOOD = 10.0
HRV_CV_MODERATE = 15.0

# Historical alcohol-day detector (score >= threshold flags the day)
ALCOHOL_DAY_SCORE_THRESHOLD = 5

# ---------------------------------------------------------------------------
# Training load
# ---------------------------------------------------------------------------

CTL_TIME_CONSTANT = 42.0  # days
ATL_TIME_CONSTANT = 7.0  # days
SEED_WINDOW_DAYS = 14
SEED_CTL_MULTIPLIER = 0.7
SEED_ATL_MULTIPLIER = 0.4

# ---------------------------------------------------------------------------
# Strain
# ---------------------------------------------------------------------------

# Banister TRIMP: duration * hrr * k * exp(b * hrr)
TRIMP_CONSTANTS = {
    "male": (0.64, 1.92),
    "female": (0.86, 1.67),
    "unspecified": (0.75, 1.85),
}

# Heart-rate-reserve midpoint of each zone
ZONE_HRR_MIDPOINTS = {1: 0.55, 2: 0.65, 3: 0.75, 4: 0.85, 5: 0.95}

POWER_BLEND_WEIGHT = 0.6  # share of the power-based TSS in a blended TRIMP

EPOC_COEFFICIENT = 0.25
EPOC_NORMALIZER = 5.0
EPOC_CEILING = 250.0  # EPOC that maps onto STRAIN_MAX
WHOOP_COEFFICIENT = STRAIN_MAX / math.log1p(EPOC_CEILING / EPOC_NORMALIZER)

# Load weights applied before the EPOC conversion
CARDIO_LOAD_WEIGHT = 1.0
STRENGTH_LOAD_WEIGHT = 0.8
ACTIVITY_LOAD_WEIGHT = 0.6

# Session-RPE (RPE x minutes) → TRIMP-equivalent
SRPE_TRIMP_FACTOR = 0.25

# Non-exercise activity
STEPS_PER_BASE = 2000.0
MET_MINUTES_PER_BASE = 20.0
MET_MINUTES_PER_KCAL = 0.003
ACTIVITY_LOAD_CEILING = 40.0  # TRIMP-equivalent asymptote
ACTIVITY_SATURATION_MET = 60.0

# Diagnostic sub-scores (0-100)
CARDIO_SUBSCORE_SCALE = 18.0
STRENGTH_SUBSCORE_SCALE = CARDIO_SUBSCORE_SCALE * 0.8
STRENGTH_SRPE_SCALE = 3.5
ACTIVITY_SUBSCORE_SCALE = 16.0
ACTIVITY_MET_CAP = 60.0

# Recovery-factor modulation of strain
RECOVERY_MODULATION_RANGE = 0.15
RECOVERY_SIGNAL_WEIGHTS = {"hrv": 0.5, "rhr": 0.25, "sleep": 0.1, "tsb": 0.15}
SLEEP_SIGNAL_CENTER = 75.0
SLEEP_SIGNAL_SPREAD = 25.0
TSB_SIGNAL_SPREAD = 25.0

# ---------------------------------------------------------------------------
# Sleep
# ---------------------------------------------------------------------------

DEFAULT_SLEEP_NEED_MIN = 480.0  # 8 h

SLEEP_WEIGHTS = {
    "performance": 0.30,
    "stage_quality": 0.32,
    "efficiency": 0.22,
    "disturbances": 0.14,
    "timing": 0.02,
}

DEEP_REM_TARGET = 0.40
DEEP_REM_FLOOR = 0.30

# (max wake events, score); anything above the last bucket scores the floor
DISTURBANCE_BUCKETS = ((2, 100.0), (5, 75.0), (8, 50.0))
DISTURBANCE_FLOOR = 25.0

# (max deviation in minutes, score)
TIMING_BUCKETS = ((30.0, 100.0), (60.0, 75.0), (90.0, 50.0))
TIMING_FLOOR = 25.0

# ---------------------------------------------------------------------------
# Recovery
# ---------------------------------------------------------------------------

RECOVERY_WEIGHTS = {
    "hrv": 0.30,
    "rhr": 0.20,
    "sleep": 0.30,
    "respiratory": 0.10,
    "load": 0.10,
}

# TSB → load component (np.interp, clamped at the ends)
TSB_POINTS = (-40.0, -20.0, -10.0, 0.0, 10.0, 25.0)
TSB_SCORES = (0.0, 30.0, 50.0, 65.0, 80.0, 100.0)

MAX_STRESS_PENALTY = 40.0

# Alcohol / illness signature
ALCOHOL_HRV_SUPPRESSION = 0.15  # HRV at least 15 % below baseline
ALCOHOL_RHR_ELEVATION = 0.08  # RHR at least 8 % above baseline
HEAVY_TRAINING_STRESS = 150.0
