"""
A basic scheduler that shows a subject a few times.

Mostly useful as a reference for how a scheduler is built.
"""

import random
from dataclasses import replace
from enum import IntEnum

from cardstack.domain.constants import DEFAULT_REPETITIONS_TO_COMPLETE
from cardstack.domain.models import Assignment, Subject, SubjectPair
from cardstack.domain.ports import Scheduler, random_order


class BasicQuality(IntEnum):
    INCORRECT = 0
    CORRECT = 1


class BasicScheduler(Scheduler[BasicQuality]):
    """
    Repetition counter only.

    Example:
        scheduler = BasicScheduler(repetitions_to_complete=2)
        assignment = scheduler.add(subject)
        assignment = scheduler.update(BasicQuality.CORRECT, subject, assignment)
    """

    def __init__(
        self,
        repetitions_to_complete: int = DEFAULT_REPETITIONS_TO_COMPLETE,
        rng: random.Random | None = None,
    ):
        self.repetitions_to_complete = repetitions_to_complete
        self.rng = rng

    def add(self, subject: Subject) -> Assignment:
        return Assignment(subject_id=subject.id, repetition=0)

    def filter(self, subject: Subject, assignment: Assignment | None) -> bool:
        if assignment is None:
            return True
        if assignment.marked_completed:
            return False
        return (assignment.repetition or 0) < self.repetitions_to_complete

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        """Least-repeated first; ties are random."""
        rep_a = (a[1].repetition or 0) if a[1] else 0
        rep_b = (b[1].repetition or 0) if b[1] else 0
        return (rep_a - rep_b) or random_order(self.rng)

    def update(self, quality: BasicQuality, subject: Subject, assignment: Assignment) -> Assignment:
        repetition = assignment.repetition or 0
        if quality:
            return replace(assignment, repetition=repetition + 1)
        return replace(assignment, repetition=max(repetition - 1, 0))
