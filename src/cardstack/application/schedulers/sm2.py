"""
SuperMemo-2.

References:
    https://super-memory.com/english/ol/sm2.htm
"""

import random
from dataclasses import replace
from enum import IntEnum

from cardstack.application.utils import clock
from cardstack.domain.constants import (
    SM2_DEFAULT_EFACTOR,
    SM2_FIRST_INTERVAL,
    SM2_MAX_QUALITY,
    SM2_MIN_EFACTOR,
    SM2_PASSING_QUALITY,
    SM2_SECOND_INTERVAL,
)
from cardstack.domain.models import Assignment, Subject, SubjectPair
from cardstack.domain.ports import Scheduler

from ._due import compare_due, is_due


class Sm2Quality(IntEnum):
    BLACKOUT = 0
    INCORRECT = 1
    ALMOST_CORRECT = 2
    BARELY_CORRECT = 3
    CORRECT = 4
    PERFECT = 5


def next_efactor(efactor: float, quality: int) -> float:
    """EF' = EF + (0.1 - (5-q) * (0.08 + (5-q) * 0.02)), floored at 1.3."""
    miss = SM2_MAX_QUALITY - quality
    return max(SM2_MIN_EFACTOR, efactor + (0.1 - miss * (0.08 + miss * 0.02)))


class Sm2Scheduler(Scheduler[int]):
    """
    Classic ease-factor algorithm. Intervals are in days.

    Interval(1) = 1, Interval(2) = 6, Interval(n) = Interval(n-1) * EF.
    A grade below 4 restarts repetitions; below 3 the E-Factor is kept.
    """

    def __init__(self, rng: random.Random | None = None):
        self.rng = rng

    def add(self, subject: Subject) -> Assignment:
        return Assignment(
            subject_id=subject.id,
            efactor=SM2_DEFAULT_EFACTOR,
            interval=0,
            repetition=0,
        )

    def filter(self, subject: Subject, assignment: Assignment | None) -> bool:
        return is_due(assignment)

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        return compare_due(a, b, self.rng)

    def update(self, quality: int, subject: Subject, assignment: Assignment) -> Assignment:
        prev_repetition = assignment.repetition or 0
        prev_interval = assignment.interval or 0
        prev_efactor = (
            assignment.efactor if assignment.efactor is not None else SM2_DEFAULT_EFACTOR
        )
        quality = min(int(quality), SM2_MAX_QUALITY)
        efactor = next_efactor(prev_efactor, quality)
        now = clock.get_now()

        if quality < SM2_PASSING_QUALITY:
            # Same-day discount: a failed card never moves its due date backward
            # past today.
            studied_today = clock.is_same_day(assignment.last_studied_at or now, now)
            interval = 0 if studied_today else min(1, prev_interval)
            efactor = prev_efactor if quality < 3 else efactor
            repetition = 0
        elif prev_repetition == 0:
            interval = SM2_FIRST_INTERVAL
            repetition = 1
        elif prev_repetition == 1:
            interval = SM2_SECOND_INTERVAL
            repetition = 2
        else:
            interval = round(prev_interval * prev_efactor)
            repetition = prev_repetition + 1

        return replace(
            assignment,
            efactor=efactor,
            interval=interval,
            repetition=repetition,
            last_studied_at=now,
            available_at=clock.add_days(now, interval),
        )
