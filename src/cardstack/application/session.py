"""
Study session engine.

Sequences which card is shown next and how grading mutates assignments.
Application code builds subjects and a scheduler, then calls
`start_session` followed by repeated `submit` calls.

Grading is two-phase: a Pending card is first classified as Success or
Failure, then the classification is applied. With `allow_redos` the two
phases happen on separate `submit` calls, so the caller can `redo()` in
between; otherwise both happen on one call.
"""

import functools
import logging
import random
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Generic

from cardstack.application.config import SessionSettings
from cardstack.application.queue_builder import (
    PendingCard,
    apply_limits,
    expand_cards,
    order_cards,
)
from cardstack.application.state import Observable
from cardstack.application.utils import clock
from cardstack.domain.errors import InvalidSessionStateError, PreconditionError
from cardstack.domain.models import (
    Assignment,
    CardState,
    SessionStatus,
    StudyMode,
    Subject,
)
from cardstack.domain.ports import Quality, Scheduler

logger = logging.getLogger(__name__)

AnswerChecker = Callable[[str, Subject], Any]
CompletionChecker = Callable[[Any], bool]


def accept_any_answer(answer: str, subject: Subject) -> bool:
    return True


@dataclass(frozen=True)
class SessionSnapshot:
    """Immutable view of a session, handed to listeners."""

    status: SessionStatus
    mode: StudyMode
    curr_subject: Subject | None
    curr_assignment: Assignment | None
    curr_card_state: CardState | None
    curr_card_type: str | None
    pending: tuple[PendingCard, ...]
    failures: frozenset[str]
    successes: frozenset[str]
    assignments: Mapping[str, Assignment]


class StudySession(Observable[SessionSnapshot], Generic[Quality]):
    """
    One study session over a deck of subjects.

    Args:
        subjects: Static teaching content.
        scheduler: Algorithm used to create, filter, sort and grade assignments.
        assignments: Existing assignments; at most one per subject.
        check_answer: Maps a raw answer to the scheduler's quality scale.
        check_complete: Classifies a quality as passing (Success) or not.
        settings: Daily caps, session size, card ordering and redo mode.
        mode: Initial study mode.
        rng: Random source for card shuffling. Subject tie-breaks come from
            the scheduler's own `rng`.
    """

    def __init__(
        self,
        subjects: Iterable[Subject],
        scheduler: Scheduler[Quality],
        assignments: Iterable[Assignment] = (),
        check_answer: AnswerChecker = accept_any_answer,
        check_complete: CompletionChecker = bool,
        settings: SessionSettings | None = None,
        mode: StudyMode = StudyMode.QUIZ,
        rng: random.Random | None = None,
    ):
        super().__init__()
        self.scheduler = scheduler
        self.check_answer = check_answer
        self.check_complete = check_complete
        self.settings = settings or SessionSettings()
        self.rng = rng or random.Random()

        self.subjects = list(subjects)
        self.subjects_by_id: dict[str, Subject] = {}
        for subject in self.subjects:
            if subject.id in self.subjects_by_id:
                raise PreconditionError(f"Duplicate subject id: {subject.id}")
            self.subjects_by_id[subject.id] = subject

        self.assignments_by_id: dict[str, Assignment] = {}
        for assignment in assignments:
            if assignment.subject_id in self.assignments_by_id:
                raise PreconditionError(f"Duplicate assignment for subject: {assignment.subject_id}")
            self.assignments_by_id[assignment.subject_id] = assignment

        self.status = SessionStatus.INACTIVE
        self.mode = StudyMode(mode)
        self.curr_subject: Subject | None = None
        self.curr_assignment: Assignment | None = None
        self.curr_card_state: CardState | None = None
        self.curr_card_type: str | None = None
        self.curr_quality: Any = None
        self.curr_pending: list[PendingCard] = []
        self.curr_failures: set[str] = set()
        self.curr_successes: set[str] = set()

        # Preview the first card; the session itself starts on start_session or submit
        self.curr_pending = self._build_queue(self.mode)
        if self.curr_pending:
            self._load_next()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def assignments(self) -> list[Assignment]:
        return list(self.assignments_by_id.values())

    @property
    def is_learn_mode(self) -> bool:
        return self.mode is StudyMode.LEARN

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            status=self.status,
            mode=self.mode,
            curr_subject=self.curr_subject,
            curr_assignment=self.curr_assignment,
            curr_card_state=self.curr_card_state,
            curr_card_type=self.curr_card_type,
            pending=tuple(self.curr_pending),
            failures=frozenset(self.curr_failures),
            successes=frozenset(self.curr_successes),
            assignments=MappingProxyType(dict(self.assignments_by_id)),
        )

    def get_available(self) -> list[Subject]:
        """All subjects that can currently be learned or studied."""
        return [
            subject
            for subject in self.subjects
            if subject.hidden_at is None
            and self.scheduler.filter(subject, self.assignments_by_id.get(subject.id))
        ]

    def get_learnable(self) -> list[Subject]:
        """Never-started subjects whose prerequisites are met, in priority order."""
        learnable = [
            subject
            for subject in self.get_available()
            if self.scheduler.filter_learnable(
                subject, self.assignments_by_id.get(subject.id), self.assignments_by_id
            )
        ]
        return self._prioritize(learnable, self.scheduler.sort_learnable)

    def get_quizzable(self) -> list[Subject]:
        """Started subjects that are due, in priority order."""
        quizzable = [
            subject
            for subject in self.get_available()
            if self.scheduler.filter_quizzable(
                subject, self.assignments_by_id.get(subject.id), self.assignments_by_id
            )
        ]
        return self._prioritize(quizzable, self.scheduler.sort_quizzable)

    def get_started(self) -> list[Subject]:
        started = []
        for subject in self.subjects:
            assignment = self.assignments_by_id.get(subject.id)
            if assignment and (assignment.started_at or assignment.marked_completed):
                started.append(subject)
        return started

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start_session(self, mode: StudyMode | str | None = None) -> bool:
        """
        Build a fresh queue and load its first card.

        Returns:
            True if there is at least one card to study; otherwise the
            session stays Inactive.
        """
        if mode is None:
            mode = self.mode
        try:
            mode = StudyMode(mode)
        except ValueError as e:
            raise PreconditionError(f"Unknown study mode: {mode!r}") from e

        with self.batch():
            pending = self._build_queue(mode)
            self.set_state(
                mode=mode,
                curr_pending=pending,
                curr_failures=set(),
                curr_successes=set(),
            )
            if not pending:
                self._clear_current()
                self.set_state(status=SessionStatus.INACTIVE)
                logger.info(f"No {mode.value.lower()} cards available; session not started")
                return False

            self.set_state(status=SessionStatus.ACTIVE)
            self._load_next()

        logger.info(f"Started {mode.value.lower()} session with {len(pending)} cards")
        return True

    def submit(self, answer: str = "") -> None:
        """
        Submit an answer for the current card and advance the session.
        """
        subject = self.curr_subject
        if subject is None:
            return
        if self.status is SessionStatus.INACTIVE:
            self.start_session(self.mode)
            return

        with self.batch():
            self._grade(answer, subject)

    def redo(self) -> None:
        """Discard the current classification so the card can be answered again."""
        if self.curr_subject is None:
            return
        self.set_state(curr_card_state=CardState.PENDING, curr_quality=None)

    def set_marked_completed(self, subject_id: str, marked_completed: bool = True) -> Assignment:
        """User override hiding (or restoring) a subject; reversible."""
        if subject_id not in self.subjects_by_id:
            raise PreconditionError(f"Unknown subject: {subject_id}")
        assignment = self.assignments_by_id.get(subject_id) or Assignment(subject_id=subject_id)
        updated = replace(assignment, marked_completed=marked_completed)
        self._store(updated)
        return updated

    # ------------------------------------------------------------------
    # Grading
    # ------------------------------------------------------------------

    def _grade(self, answer: str, subject: Subject) -> None:
        assignment = self.assignments_by_id.get(subject.id)

        # First exposure has no grading phase
        if self.is_learn_mode or assignment is None:
            if subject.id not in self.curr_successes:
                self._store(self._learn(subject, assignment))
                self.curr_successes.add(subject.id)
            self._advance()
            return

        state = self.curr_card_state
        if state is CardState.PENDING:
            quality = self.check_answer(answer, subject)
            state = CardState.SUCCESS if self.check_complete(quality) else CardState.FAILURE
            self.set_state(curr_card_state=state, curr_quality=quality)
            if self.settings.allow_redos:
                return

        if state is CardState.FAILURE:
            if subject.id not in self.curr_failures:
                self._store(self.scheduler.update(self.curr_quality, subject, assignment))
            self.curr_failures.add(subject.id)
            self._advance()
        elif state is CardState.SUCCESS and self._is_last_entry(subject.id):
            if subject.id not in self.curr_failures and subject.id not in self.curr_successes:
                self._store(self.scheduler.update(self.curr_quality, subject, assignment))
            self.curr_successes.add(subject.id)
            self._advance(purge=subject.id)
        elif state is CardState.SUCCESS:
            self._advance()
        else:
            raise InvalidSessionStateError(
                f"Cannot grade {subject.id}/{self.curr_card_type} in state {state!r}"
            )

    def _learn(self, subject: Subject, existing: Assignment | None) -> Assignment:
        assignment = self.scheduler.add(subject)
        now = clock.get_now()
        return replace(
            assignment,
            started_at=(existing and existing.started_at) or assignment.started_at or now,
            unlocked_at=(existing and existing.unlocked_at) or assignment.unlocked_at or now,
        )

    def _is_last_entry(self, subject_id: str) -> bool:
        return not any(card.subject_id == subject_id for card in self.curr_pending[1:])

    def _store(self, assignment: Assignment) -> None:
        self.assignments_by_id[assignment.subject_id] = assignment
        if self.curr_subject is not None and self.curr_subject.id == assignment.subject_id:
            self.curr_assignment = assignment
        self.notify()

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def _build_queue(self, mode: StudyMode) -> list[PendingCard]:
        if mode is StudyMode.LEARN:
            subjects = self.get_learnable()
            limit = self.settings.learn_limit
        else:
            subjects = self.get_quizzable()
            limit = self.settings.review_limit
        subjects = apply_limits(
            subjects, self.assignments_by_id, mode, limit, self.settings.session_size
        )
        cards = expand_cards(subjects, mode)
        logger.debug(f"[session] {len(subjects)} subjects expanded to {len(cards)} cards")
        return order_cards(
            cards, self.settings.card_sort_method, self.settings.card_order, self.rng
        )

    def _prioritize(self, subjects: list[Subject], comparator) -> list[Subject]:
        pairs = [(subject, self.assignments_by_id.get(subject.id)) for subject in subjects]
        pairs.sort(key=functools.cmp_to_key(comparator))
        return [subject for subject, _ in pairs]

    def _advance(self, purge: str | None = None) -> None:
        """Pop the current card (requeueing it on failure) and load the next one."""
        pending = list(self.curr_pending)
        current = pending.pop(0) if pending else None
        if current is not None and self.curr_card_state is CardState.FAILURE:
            pending.append(current)
        if purge is not None:
            pending = [card for card in pending if card.subject_id != purge]
        self.set_state(curr_pending=pending)

        if pending:
            self._load_next()
            return

        self._clear_current()
        self.set_state(status=SessionStatus.COMPLETED)
        logger.info(
            f"Session completed: {len(self.curr_successes)} passed, "
            f"{len(self.curr_failures)} failed"
        )

    def _load_next(self) -> None:
        subject_id, card_type = self.curr_pending[0]
        self.set_state(
            curr_subject=self.subjects_by_id[subject_id],
            curr_assignment=self.assignments_by_id.get(subject_id),
            curr_card_state=CardState.PENDING,
            curr_card_type=card_type,
            curr_quality=None,
        )

    def _clear_current(self) -> None:
        self.set_state(
            curr_subject=None,
            curr_assignment=None,
            curr_card_state=None,
            curr_card_type=None,
            curr_quality=None,
        )
