"""
Domain models for study sessions.

These are pure data structures with no I/O or external dependencies.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any


class CardState(str, Enum):
    """How well the current card was answered."""

    PENDING = "Pending"
    SUCCESS = "Success"
    FAILURE = "Failure"


class SessionStatus(str, Enum):
    INACTIVE = "Inactive"
    ACTIVE = "Active"
    COMPLETED = "Completed"


class StudyMode(str, Enum):
    LEARN = "Learn"
    QUIZ = "Quiz"


class CardSortMethod(str, Enum):
    PAIRED = "Paired"
    SEQUENTIAL = "Sequential"
    RANDOM = "Random"


@dataclass(frozen=True)
class Subject:
    """
    The concept being taught.

    Attributes:
        id: Unique subject id.
        learn_cards: Facets shown while learning, in order.
        quiz_cards: Facets shown while quizzing, in order.
        data: Scheduler-specific payload (level, position, required_subjects, srs_id).
        hidden_at: Subject was retired and is never shown again.
    """

    id: str
    learn_cards: tuple[str, ...] = ()
    quiz_cards: tuple[str, ...] = ()
    data: Mapping[str, Any] = field(default_factory=dict)
    hidden_at: datetime | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "learn_cards", tuple(self.learn_cards))
        object.__setattr__(self, "quiz_cards", tuple(self.quiz_cards))
        object.__setattr__(self, "data", MappingProxyType(dict(self.data)))

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def level(self) -> int | None:
        return self.data.get("level")

    @property
    def position(self) -> int:
        return self.data.get("position") or 0

    @property
    def required_subjects(self) -> list[str]:
        return list(self.data.get("required_subjects") or [])

    def cards_for(self, is_learn_mode: bool) -> tuple[str, ...]:
        return self.learn_cards if is_learn_mode else self.quiz_cards


@dataclass(frozen=True)
class Assignment:
    """
    Mastery record for one subject. Updated only by returning a new copy.

    Only the progress fields relevant to the active algorithm are meaningful.
    """

    subject_id: str
    marked_completed: bool = False

    # Algorithm progress signals
    efactor: float | None = None  # SM2 ease factor, or static-interval stage
    stability: float | None = None  # FSRS
    difficulty: float | None = None  # FSRS, normalized 0-1
    interval: float | None = None  # days (SM2/FSRS) or seconds (static)
    repetition: int | None = None

    # Timeline
    last_studied_at: datetime | None = None
    available_at: datetime | None = None
    unlocked_at: datetime | None = None
    started_at: datetime | None = None
    passed_at: datetime | None = None
    completed_at: datetime | None = None


SubjectPair = tuple[Subject, Assignment | None]
