"""
Flashcard schedulers.

1. Core schedulers: BasicScheduler, Sm2Scheduler, FsrsScheduler, StaticScheduler
2. Composition: ProgressScheduler wraps any core scheduler
3. Presets: Sm2ProgressScheduler, FsrsProgressScheduler, StaticProgressScheduler
"""

from .basic import BasicQuality, BasicScheduler
from .fsrs import FsrsQuality, FsrsScheduler
from .presets import (
    DEFAULT_FSRS_SRS,
    DEFAULT_STATIC_SRS,
    FsrsProgressScheduler,
    FsrsSrs,
    Sm2ProgressScheduler,
    StaticProgressScheduler,
    StaticSrs,
)
from .progress import (
    DEFAULT_PROGRESS_THRESHOLDS,
    ProgressScheduler,
    ProgressThresholds,
    ProgressTracker,
    efactor_extractor,
    repetition_extractor,
    sm2_progress_extractor,
    static_progress_extractor,
)
from .sm2 import Sm2Quality, Sm2Scheduler
from .static import DEFAULT_INTERVAL_SYSTEMS, IntervalSystem, StaticQuality, StaticScheduler

__all__ = [
    "BasicQuality",
    "BasicScheduler",
    "DEFAULT_FSRS_SRS",
    "DEFAULT_INTERVAL_SYSTEMS",
    "DEFAULT_PROGRESS_THRESHOLDS",
    "DEFAULT_STATIC_SRS",
    "FsrsProgressScheduler",
    "FsrsQuality",
    "FsrsScheduler",
    "FsrsSrs",
    "IntervalSystem",
    "ProgressScheduler",
    "ProgressThresholds",
    "ProgressTracker",
    "Sm2ProgressScheduler",
    "Sm2Quality",
    "Sm2Scheduler",
    "StaticProgressScheduler",
    "StaticQuality",
    "StaticScheduler",
    "StaticSrs",
    "efactor_extractor",
    "repetition_extractor",
    "sm2_progress_extractor",
    "static_progress_extractor",
]
