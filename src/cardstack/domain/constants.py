"""Centralized constants for cardstack.

All magic numbers and scheduling defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Time ----------
SECONDS_PER_DAY = 86_400

# ---------- Basic ----------
DEFAULT_REPETITIONS_TO_COMPLETE = 3

# ---------- SM2 ----------
SM2_DEFAULT_EFACTOR = 2.5
SM2_MIN_EFACTOR = 1.3
SM2_MAX_QUALITY = 5
SM2_PASSING_QUALITY = 4
SM2_FIRST_INTERVAL = 1  # days
SM2_SECOND_INTERVAL = 6  # days

# ---------- FSRS ----------
FSRS_DIFFICULTY_SCALE = 10.0
FSRS_DEFAULT_DIFFICULTY = 0.3  # normalized 0-1
FSRS_DEFAULT_RETENTION = 0.9
FSRS_DEFAULT_MAXIMUM_INTERVAL = 36500  # days
FSRS_MIN_RATING = 1
FSRS_MAX_RATING = 4

# Fallback intervals (days) used when the memory model is unavailable.
FSRS_FALLBACK_AGAIN = 1
FSRS_FALLBACK_HARD = 3
FSRS_FALLBACK_GOOD = 7
FSRS_FALLBACK_EASY_MULTIPLIER = 2.5

# ---------- Static intervals ----------
STATIC_DO_OVER_SECONDS = SECONDS_PER_DAY

# 0s, 1d, 3d, 1w, 2w, 23d, 35d, 50d, 65d, 85d
DEFAULT_INTERVALS = [
    0, 86400, 259200, 604800, 1209600, 1987200, 3024000, 4320000, 5616000, 7344000,
]
# 0s, 12h, 2d, 5d, 12d, 25d, 40d, 55d
FAST_INTERVALS = [0, 43200, 172800, 432000, 1036800, 2160000, 3456000, 4752000]

# ---------- FSRS progress "Good" ladders (days) ----------
DEFAULT_GOOD_LADDER = [0.5, 1, 3, 7, 14, 23, 35, 50, 65, 85]
FAST_GOOD_LADDER = [0.5, 1, 2, 5, 12, 25, 40, 55]

# ---------- Progress thresholds ----------
DEFAULT_UNLOCKS_AT = 0
DEFAULT_STARTS_AT = 1
DEFAULT_PASSES_AT = 3
DEFAULT_COMPLETES_AT = 10

# ---------- Session ----------
DEFAULT_LEARN_LIMIT = 10
DEFAULT_REVIEW_LIMIT = 200
