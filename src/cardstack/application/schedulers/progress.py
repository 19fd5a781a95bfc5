"""
Progress tracking layered over any scheduler.

`ProgressScheduler` wraps another scheduler without modifying it and adds:
1. Level gating against the user's current level
2. Prerequisite gating through `data["required_subjects"]`
3. Threshold promotion (`passed_at`, `completed_at`) driven by a
   pluggable progress extractor
"""

import logging
import random
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from cardstack.application.utils import clock
from cardstack.domain.constants import (
    DEFAULT_COMPLETES_AT,
    DEFAULT_PASSES_AT,
    DEFAULT_STARTS_AT,
    DEFAULT_UNLOCKS_AT,
)
from cardstack.domain.models import Assignment, Subject, SubjectPair
from cardstack.domain.ports import Quality, Scheduler

logger = logging.getLogger(__name__)

ProgressExtractor = Callable[[Assignment | None], float]


@dataclass(frozen=True)
class ProgressThresholds:
    """
    Progress values at which an assignment changes status.

    Attributes:
        unlocks_at: Assignment becomes available to the user.
        starts_at: User has seen/learned the assignment.
        passes_at: Dependent subjects may unlock.
        completes_at: Mastered; no longer shown.
    """

    id: int = 1
    name: str = "Default"
    unlocks_at: float = DEFAULT_UNLOCKS_AT
    starts_at: float = DEFAULT_STARTS_AT
    passes_at: float = DEFAULT_PASSES_AT
    completes_at: float = DEFAULT_COMPLETES_AT


DEFAULT_PROGRESS_THRESHOLDS = ProgressThresholds()


def repetition_extractor(assignment: Assignment | None) -> float:
    """Progress as the successful-review streak (FSRS, basic)."""
    if assignment is None:
        return 0
    return assignment.repetition or 0


def efactor_extractor(assignment: Assignment | None) -> float:
    """Progress as the stage stored in `efactor` (static intervals)."""
    if assignment is None:
        return 0
    return assignment.efactor or 0


# SM2 keeps its ease factor in efactor (starting at 2.5), so only the streak counts.
sm2_progress_extractor = repetition_extractor


def static_progress_extractor(assignment: Assignment | None) -> float:
    """Stage, with any started assignment counting as at least stage 1."""
    if assignment is None:
        return 0
    if assignment.started_at is not None:
        return assignment.efactor or 1
    return assignment.efactor or 0


class ProgressTracker:
    """
    Level, prerequisite and threshold bookkeeping, independent of any algorithm.

    `thresholds` is either one `ProgressThresholds` for every subject, or a
    mapping keyed by `data["srs_id"]` (first entry used for unknown ids).
    """

    def __init__(
        self,
        user_level: int = 0,
        thresholds: ProgressThresholds | Mapping[int, ProgressThresholds] | None = None,
        progress_extractor: ProgressExtractor = repetition_extractor,
        strict_prerequisites: bool = False,
    ):
        # Users start at level 1; 0 means "not initialized".
        self.user_level = user_level
        self.thresholds = thresholds or DEFAULT_PROGRESS_THRESHOLDS
        self.progress_extractor = progress_extractor
        self.strict_prerequisites = strict_prerequisites

    def thresholds_for(self, subject: Subject) -> ProgressThresholds:
        if isinstance(self.thresholds, ProgressThresholds):
            return self.thresholds
        found = self.thresholds.get(subject.data.get("srs_id"))
        if found is None:
            found = next(iter(self.thresholds.values()), DEFAULT_PROGRESS_THRESHOLDS)
        return found

    def filter_by_level(self, subject: Subject, assignment: Assignment | None) -> bool:
        """Subject is at or below the user's level and not finished."""
        if (subject.level or 0) > self.user_level:
            return False
        if assignment is not None and (assignment.marked_completed or assignment.completed_at):
            return False
        return True

    def has_started(self, subject: Subject, assignment: Assignment | None) -> bool:
        if assignment is None:
            return False
        if assignment.started_at is not None:
            return True
        return self.progress_extractor(assignment) >= self.thresholds_for(subject).starts_at

    def prerequisites_met(
        self,
        subject: Subject,
        all_assignments: Mapping[str, Assignment] | None,
    ) -> bool:
        """
        Every required subject has been passed.

        Without an all-assignments map the check is skipped (fail-open) unless
        `strict_prerequisites` is set, in which case it fails closed.
        """
        required = subject.required_subjects
        if not required:
            return True
        if all_assignments is None:
            if self.strict_prerequisites:
                logger.debug(f"No assignment map for {subject.id}; prerequisites fail closed")
                return False
            return True
        for required_id in required:
            required_assignment = all_assignments.get(required_id)
            if required_assignment is None or required_assignment.passed_at is None:
                return False
        return True

    def filter_learnable(
        self,
        subject: Subject,
        assignment: Assignment | None,
        all_assignments: Mapping[str, Assignment] | None = None,
    ) -> bool:
        if not self.filter_by_level(subject, assignment):
            return False
        if self.has_started(subject, assignment):
            return False
        return self.prerequisites_met(subject, all_assignments)

    def filter_quizzable(self, subject: Subject, assignment: Assignment | None) -> bool:
        if not self.filter_by_level(subject, assignment):
            return False
        return self.has_started(subject, assignment)

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        """Levelled subjects first, then by level, then by position within a level."""
        level_a, level_b = a[0].level, b[0].level
        if level_a and not level_b:
            return -1
        if level_b and not level_a:
            return 1
        if level_a != level_b:
            return (level_a or 0) - (level_b or 0)
        return a[0].position - b[0].position

    def update_progress_states(self, subject: Subject, assignment: Assignment) -> Assignment:
        """Stamp `unlocked_at`, `passed_at` and `completed_at` once their thresholds are met."""
        thresholds = self.thresholds_for(subject)
        progress = self.progress_extractor(assignment)
        now = clock.get_now()

        unlocked_at = assignment.unlocked_at
        if unlocked_at is None and progress >= thresholds.unlocks_at:
            unlocked_at = now
        passed_at = assignment.passed_at
        if passed_at is None and progress >= thresholds.passes_at:
            passed_at = now
            logger.debug(f"{subject.id} passed at progress {progress}")
        completed_at = assignment.completed_at
        if completed_at is None and progress >= thresholds.completes_at:
            completed_at = now
            logger.debug(f"{subject.id} completed at progress {progress}")

        return replace(
            assignment,
            unlocked_at=unlocked_at,
            passed_at=passed_at,
            completed_at=completed_at,
        )

    def initialize_assignment(self, assignment: Assignment) -> Assignment:
        now = clock.get_now()
        return replace(
            assignment,
            marked_completed=False,
            unlocked_at=assignment.unlocked_at or now,
            started_at=assignment.started_at or now,
            available_at=assignment.available_at or assignment.last_studied_at or now,
        )


class ProgressScheduler(Scheduler[Quality]):
    """
    Wraps a scheduler with level gating, prerequisites and threshold promotion.

    Example:
        scheduler = ProgressScheduler(
            Sm2Scheduler(),
            user_level=1,
            progress_extractor=sm2_progress_extractor,
        )
    """

    def __init__(
        self,
        scheduler: Scheduler[Quality],
        user_level: int = 0,
        thresholds: ProgressThresholds | Mapping[int, ProgressThresholds] | None = None,
        progress_extractor: ProgressExtractor = repetition_extractor,
        strict_prerequisites: bool = False,
    ):
        self.base_scheduler = scheduler
        self.progress_tracker = ProgressTracker(
            user_level=user_level,
            thresholds=thresholds,
            progress_extractor=progress_extractor,
            strict_prerequisites=strict_prerequisites,
        )

    @property
    def user_level(self) -> int:
        return self.progress_tracker.user_level

    @user_level.setter
    def user_level(self, level: int) -> None:
        self.progress_tracker.user_level = level

    @property
    def rng(self) -> random.Random | None:
        return self.base_scheduler.rng

    def add(self, subject: Subject) -> Assignment:
        return self.progress_tracker.initialize_assignment(self.base_scheduler.add(subject))

    def filter(self, subject: Subject, assignment: Assignment | None) -> bool:
        if not self.progress_tracker.filter_by_level(subject, assignment):
            return False
        return self.base_scheduler.filter(subject, assignment)

    def filter_learnable(
        self,
        subject: Subject,
        assignment: Assignment | None,
        all_assignments: Mapping[str, Assignment] | None = None,
    ) -> bool:
        if not self.progress_tracker.filter_learnable(subject, assignment, all_assignments):
            return False
        return self.base_scheduler.filter_learnable(subject, assignment, all_assignments)

    def filter_quizzable(
        self,
        subject: Subject,
        assignment: Assignment | None,
        all_assignments: Mapping[str, Assignment] | None = None,
    ) -> bool:
        if not self.base_scheduler.filter_quizzable(subject, assignment, all_assignments):
            return False
        return self.progress_tracker.filter_quizzable(subject, assignment)

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        return self.progress_tracker.sort(a, b) or self.base_scheduler.sort(a, b)

    def sort_learnable(self, a: SubjectPair, b: SubjectPair) -> int:
        return self.progress_tracker.sort(a, b) or self.base_scheduler.sort_learnable(a, b)

    def sort_quizzable(self, a: SubjectPair, b: SubjectPair) -> int:
        return self.progress_tracker.sort(a, b) or self.base_scheduler.sort_quizzable(a, b)

    def update(self, quality: Quality, subject: Subject, assignment: Assignment) -> Assignment:
        updated = self.base_scheduler.update(quality, subject, assignment)
        return self.progress_tracker.update_progress_states(subject, updated)
