"""
Ports (interfaces) for scheduling.

These define the contracts that algorithms and adapters implement. The
session engine depends on these abstractions, never on a concrete algorithm.
"""

import random
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from .models import Assignment, Subject, SubjectPair

Quality = TypeVar("Quality")


def random_order(rng: random.Random | None = None) -> int:
    """Comparator result for "no preference": a coin flip, drawn from `rng` when given."""
    chooser = rng if rng is not None else random
    return chooser.choice((-1, 1))


class Scheduler(Generic[Quality]):
    """
    The grading contract every algorithm implements.

    The base class is a documented no-op: `add` fails at call time, the
    filters are permissive and `update` returns its input. Concrete
    algorithms override what they need.

    `rng` is the random source for comparator tie-breaks; None uses the
    module-level generator, so pass a seeded `random.Random` for a
    reproducible order.
    """

    rng: random.Random | None = None

    def add(self, subject: Subject) -> Assignment:
        """
        Create the first assignment for a subject; assumes none exists yet.
        """
        raise NotImplementedError(f"{type(self).__name__}.add is not implemented")

    def filter(self, subject: Subject, assignment: Assignment | None) -> bool:
        """Whether the subject is currently eligible to be shown at all."""
        return True

    def filter_learnable(
        self,
        subject: Subject,
        assignment: Assignment | None,
        all_assignments: Mapping[str, Assignment] | None = None,
    ) -> bool:
        """Eligible and never started."""
        if assignment is not None and assignment.started_at is not None:
            return False
        return self.filter(subject, assignment)

    def filter_quizzable(
        self,
        subject: Subject,
        assignment: Assignment | None,
        all_assignments: Mapping[str, Assignment] | None = None,
    ) -> bool:
        """Eligible and already started."""
        if assignment is None or assignment.started_at is None:
            return False
        return self.filter(subject, assignment)

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        """Priority comparator; negative means `a` is shown first."""
        return 0

    def sort_learnable(self, a: SubjectPair, b: SubjectPair) -> int:
        return self.sort(a, b)

    def sort_quizzable(self, a: SubjectPair, b: SubjectPair) -> int:
        return self.sort(a, b)

    def update(self, quality: Quality, subject: Subject, assignment: Assignment) -> Assignment:
        """
        Grade a review. Must return a new Assignment and never mutate the input.
        """
        return assignment


@dataclass(frozen=True)
class MemoryCard:
    """
    Card shape handed to a memory model.

    Attributes:
        stability: Days until recall probability drops to 90%.
        difficulty: Normalized difficulty (0.0-1.0).
        elapsed_days: Days since the last review.
        scheduled_days: Interval assigned by the previous review.
        reps: Successful review streak.
        lapses: Number of times the card was forgotten.
        state: 0=new, 2=review.
    """

    stability: float
    difficulty: float
    elapsed_days: float
    scheduled_days: float
    reps: int
    lapses: int
    state: int


@dataclass(frozen=True)
class MemoryCandidate:
    """The memory model's proposal for one rating."""

    stability: float
    difficulty: float
    scheduled_days: float


class MemoryModel(ABC):
    """
    Port for a numeric memory model (FSRS or compatible).

    Implementations:
        - FsrsMemoryModel: backed by the `fsrs` library.
    """

    @abstractmethod
    def repeat(self, card: MemoryCard, now: datetime) -> Mapping[int, MemoryCandidate]:
        """
        Propose the next memory state for every rating.

        Args:
            card: Current memory state.
            now: Review time (timezone-aware UTC).

        Returns:
            Mapping of rating (1=Again, 2=Hard, 3=Good, 4=Easy) to candidate.
        """
        pass
