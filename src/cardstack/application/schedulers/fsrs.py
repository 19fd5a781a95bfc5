"""
FSRS-backed scheduler.

Numeric memory modelling is delegated to a `MemoryModel`; this module only
translates assignments to and from the model's card shape, and guarantees
that grading succeeds even when the model does not.

References:
    https://github.com/open-spaced-repetition/fsrs4anki/wiki
"""

import logging
import math
import random
from collections.abc import Mapping
from dataclasses import replace
from datetime import datetime
from enum import IntEnum
from typing import Any

from cardstack.application.utils import clock
from cardstack.domain.constants import (
    FSRS_DEFAULT_DIFFICULTY,
    FSRS_FALLBACK_AGAIN,
    FSRS_FALLBACK_EASY_MULTIPLIER,
    FSRS_FALLBACK_GOOD,
    FSRS_FALLBACK_HARD,
    FSRS_MAX_RATING,
    FSRS_MIN_RATING,
    SECONDS_PER_DAY,
)
from cardstack.domain.models import Assignment, Subject, SubjectPair
from cardstack.domain.ports import MemoryCandidate, MemoryCard, MemoryModel, Scheduler

from ._due import compare_due, is_due

logger = logging.getLogger(__name__)


class FsrsQuality(IntEnum):
    AGAIN = 1
    HARD = 2
    GOOD = 3
    EASY = 4


def clamp_rating(rating: float) -> int:
    return min(max(round(rating), FSRS_MIN_RATING), FSRS_MAX_RATING)


def fallback_interval(rating: int, prev_interval: float) -> float:
    """Deterministic interval table used when the memory model fails."""
    if rating == FsrsQuality.AGAIN:
        return FSRS_FALLBACK_AGAIN
    if rating == FsrsQuality.HARD:
        return FSRS_FALLBACK_HARD
    if rating == FsrsQuality.GOOD:
        return FSRS_FALLBACK_GOOD
    return round(prev_interval * FSRS_FALLBACK_EASY_MULTIPLIER)


def _read_candidate(result: Any, rating: int) -> MemoryCandidate:
    """Pull one rating's candidate out of model output, rejecting anything unusable."""
    if not isinstance(result, Mapping):
        raise ValueError(f"memory model returned {type(result).__name__}, expected a mapping")

    candidate = result.get(rating)
    if candidate is None:
        candidate = result.get(str(rating))
    if isinstance(candidate, Mapping):
        # Accept the {"card": {...}} envelope as well as a bare dict
        candidate = candidate.get("card", candidate)
        fields = {key: candidate.get(key) for key in ("stability", "difficulty", "scheduled_days")}
    elif isinstance(candidate, MemoryCandidate):
        fields = {
            "stability": candidate.stability,
            "difficulty": candidate.difficulty,
            "scheduled_days": candidate.scheduled_days,
        }
    else:
        raise ValueError(f"memory model returned no candidate for rating {rating}")

    for key, value in fields.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"candidate field {key}={value!r} is not numeric")
        if not math.isfinite(value):
            raise ValueError(f"candidate field {key}={value!r} is not finite")
    if fields["scheduled_days"] < 0:
        raise ValueError(f"candidate interval {fields['scheduled_days']} is negative")

    return MemoryCandidate(**fields)


class FsrsScheduler(Scheduler[int]):
    """
    Free Spaced Repetition Scheduler.

    Ratings are 1-4 (Again, Hard, Good, Easy). Intervals are in days.
    """

    def __init__(
        self,
        memory_model: MemoryModel | None = None,
        rng: random.Random | None = None,
    ):
        self.rng = rng
        if memory_model is None:
            from cardstack.infrastructure.memory.fsrs_model import FsrsMemoryModel

            memory_model = FsrsMemoryModel()
        self.memory_model = memory_model

    def add(self, subject: Subject) -> Assignment:
        return Assignment(
            subject_id=subject.id,
            difficulty=FSRS_DEFAULT_DIFFICULTY,
            stability=0,
            interval=0,
            repetition=0,
        )

    def filter(self, subject: Subject, assignment: Assignment | None) -> bool:
        return is_due(assignment)

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        return compare_due(a, b, self.rng)

    def to_memory_card(self, assignment: Assignment) -> MemoryCard:
        now = clock.get_now()
        last_studied_at = assignment.last_studied_at or now
        repetition = assignment.repetition or 0
        return MemoryCard(
            stability=assignment.stability or 0,
            difficulty=(
                assignment.difficulty
                if assignment.difficulty is not None
                else FSRS_DEFAULT_DIFFICULTY
            ),
            elapsed_days=max(0.0, (now - last_studied_at).total_seconds() / SECONDS_PER_DAY),
            scheduled_days=assignment.interval or 0,
            reps=repetition,
            lapses=0,
            state=0 if repetition == 0 else 2,
        )

    def update(self, quality: int, subject: Subject, assignment: Assignment) -> Assignment:
        rating = clamp_rating(quality)
        now = clock.get_now()
        repetition = 0 if rating == FsrsQuality.AGAIN else (assignment.repetition or 0) + 1

        try:
            result = self.memory_model.repeat(self.to_memory_card(assignment), now)
            candidate = _read_candidate(result, rating)
        except Exception as e:
            logger.warning(f"FSRS memory model failed for {subject.id}, using fallback: {e}")
            return self._fallback_update(rating, assignment, repetition, now)

        return replace(
            assignment,
            stability=candidate.stability,
            difficulty=candidate.difficulty,
            interval=candidate.scheduled_days,
            repetition=repetition,
            last_studied_at=now,
            available_at=clock.add_days(now, candidate.scheduled_days),
        )

    def _fallback_update(
        self, rating: int, assignment: Assignment, repetition: int, now: datetime
    ) -> Assignment:
        interval = fallback_interval(rating, assignment.interval or 0)
        difficulty = (
            assignment.difficulty
            if assignment.difficulty is not None
            else FSRS_DEFAULT_DIFFICULTY
        )
        return replace(
            assignment,
            stability=(assignment.stability or 0) + (rating - 1),
            difficulty=max(0.1, min(1.0, difficulty - 0.1 * (rating - 3))),
            interval=interval,
            repetition=repetition,
            last_studied_at=now,
            available_at=clock.add_days(now, interval),
        )
