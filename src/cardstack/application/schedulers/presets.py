"""
Ready-made progress schedulers.

Each preset wraps one core algorithm in a `ProgressScheduler` with SRS
tables ("Default" and "Fast") keyed by `data["srs_id"]`.
"""

import random
from collections.abc import Mapping
from dataclasses import dataclass, field, replace

from cardstack.application.utils import clock
from cardstack.domain.constants import (
    DEFAULT_GOOD_LADDER,
    DEFAULT_INTERVALS,
    FAST_GOOD_LADDER,
    FAST_INTERVALS,
)
from cardstack.domain.models import Assignment, Subject, SubjectPair
from cardstack.domain.ports import MemoryModel, random_order
from cardstack.infrastructure.memory import FsrsMemoryModel, FsrsParams

from .fsrs import FsrsQuality, FsrsScheduler
from .progress import (
    ProgressScheduler,
    ProgressThresholds,
    sm2_progress_extractor,
    static_progress_extractor,
)
from .sm2 import Sm2Scheduler
from .static import IntervalSystem, StaticScheduler


@dataclass(frozen=True)
class StaticSrs:
    id: int
    name: str
    intervals: tuple[int, ...]
    thresholds: ProgressThresholds = field(default_factory=ProgressThresholds)


@dataclass(frozen=True)
class FsrsSrs:
    """
    Attributes:
        good_ladder: Fixed intervals (days) used for a Good rating, indexed by
            the repetition count before the review.
        params: FSRS parameters for this SRS.
    """

    id: int
    name: str
    good_ladder: tuple[float, ...]
    params: FsrsParams = field(default_factory=FsrsParams)
    thresholds: ProgressThresholds = field(default_factory=ProgressThresholds)


DEFAULT_STATIC_SRS: dict[int, StaticSrs] = {
    1: StaticSrs(
        id=1,
        name="Default",
        intervals=tuple(DEFAULT_INTERVALS),
        thresholds=ProgressThresholds(id=1, name="Default"),
    ),
    2: StaticSrs(
        id=2,
        name="Fast",
        intervals=tuple(FAST_INTERVALS),
        thresholds=ProgressThresholds(id=2, name="Fast"),
    ),
}

DEFAULT_FSRS_SRS: dict[int, FsrsSrs] = {
    1: FsrsSrs(
        id=1,
        name="Default",
        good_ladder=tuple(DEFAULT_GOOD_LADDER),
        # Lower retention and a short cap keep early intervals aggressive
        params=FsrsParams(request_retention=0.65, maximum_interval=100),
        thresholds=ProgressThresholds(id=1, name="Default"),
    ),
    2: FsrsSrs(
        id=2,
        name="Fast",
        good_ladder=tuple(FAST_GOOD_LADDER),
        params=FsrsParams(request_retention=0.55, maximum_interval=60),
        thresholds=ProgressThresholds(id=2, name="Fast"),
    ),
}


class Sm2ProgressScheduler(ProgressScheduler[int]):
    def __init__(
        self,
        user_level: int = 0,
        thresholds: ProgressThresholds | None = None,
        strict_prerequisites: bool = False,
        rng: random.Random | None = None,
    ):
        super().__init__(
            Sm2Scheduler(rng),
            user_level=user_level,
            thresholds=thresholds,
            progress_extractor=sm2_progress_extractor,
            strict_prerequisites=strict_prerequisites,
        )


class StaticProgressScheduler(ProgressScheduler[bool]):
    def __init__(
        self,
        srs: Mapping[int, StaticSrs] | None = None,
        user_level: int = 0,
        strict_prerequisites: bool = False,
        rng: random.Random | None = None,
    ):
        srs = srs or DEFAULT_STATIC_SRS
        interval_systems = {
            srs_id: IntervalSystem(id=config.id, name=config.name, intervals=config.intervals)
            for srs_id, config in srs.items()
        }
        super().__init__(
            StaticScheduler(interval_systems, rng),
            user_level=user_level,
            thresholds={srs_id: config.thresholds for srs_id, config in srs.items()},
            progress_extractor=static_progress_extractor,
            strict_prerequisites=strict_prerequisites,
        )


class FsrsProgressScheduler(ProgressScheduler[int]):
    """
    FSRS with level-based introduction and the static scheduler's thresholds.

    Example:
        scheduler = FsrsProgressScheduler(user_level=1)
        assignment = scheduler.add(subject)
        assignment = scheduler.update(FsrsQuality.GOOD, subject, assignment)
    """

    def __init__(
        self,
        srs: Mapping[int, FsrsSrs] | None = None,
        user_level: int = 0,
        memory_model: MemoryModel | None = None,
        strict_prerequisites: bool = False,
        rng: random.Random | None = None,
    ):
        self.srs = dict(srs or DEFAULT_FSRS_SRS)
        if memory_model is None:
            # The memory model is shared, so the first SRS supplies the parameters
            first = next(iter(self.srs.values()), None)
            memory_model = FsrsMemoryModel(first.params if first else None)
        super().__init__(
            FsrsScheduler(memory_model, rng),
            user_level=user_level,
            thresholds={srs_id: config.thresholds for srs_id, config in self.srs.items()},
            progress_extractor=sm2_progress_extractor,
            strict_prerequisites=strict_prerequisites,
        )

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        """Level, then due date, then position; anything left is random."""
        (subject_a, assignment_a), (subject_b, assignment_b) = a, b
        level_a, level_b = subject_a.level, subject_b.level
        if level_a and not level_b:
            return -1
        if level_b and not level_a:
            return 1
        if level_a != level_b:
            return (level_a or 0) - (level_b or 0)

        due_a = assignment_a.available_at if assignment_a else None
        due_b = assignment_b.available_at if assignment_b else None
        if due_a is None and due_b is not None:
            return -1
        if due_b is None and due_a is not None:
            return 1
        if due_a is not None and due_b is not None and due_a != due_b:
            return -1 if due_a < due_b else 1

        return (subject_a.position - subject_b.position) or random_order(self.rng)

    def sort_learnable(self, a: SubjectPair, b: SubjectPair) -> int:
        return self.sort(a, b)

    def sort_quizzable(self, a: SubjectPair, b: SubjectPair) -> int:
        return self.sort(a, b)

    def update(self, quality: int, subject: Subject, assignment: Assignment) -> Assignment:
        updated = super().update(quality, subject, assignment)
        if quality != FsrsQuality.GOOD:
            return updated

        config = self.srs.get(subject.data.get("srs_id"))
        repetition = assignment.repetition or 0
        if config is None or repetition >= len(config.good_ladder):
            return updated

        interval = config.good_ladder[repetition]
        studied_at = updated.last_studied_at or clock.get_now()
        return replace(
            updated,
            interval=interval,
            available_at=clock.add_days(studied_at, interval),
        )
