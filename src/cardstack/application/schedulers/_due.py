"""Due-date helpers shared by the day-interval algorithms (SM2, FSRS)."""

import random
from datetime import datetime

from cardstack.application.utils import clock
from cardstack.domain.models import Assignment, SubjectPair
from cardstack.domain.ports import random_order


def get_due_date(assignment: Assignment | None) -> datetime | None:
    if assignment is None or assignment.last_studied_at is None:
        return None
    return clock.add_days(assignment.last_studied_at, assignment.interval or 0)


def is_due(assignment: Assignment | None) -> bool:
    if assignment is not None and assignment.marked_completed:
        return False
    due = get_due_date(assignment)
    return due is None or due <= clock.get_now()


def compare_due(a: SubjectPair, b: SubjectPair, rng: random.Random | None = None) -> int:
    """Never-studied first, then oldest due date; same-day ties are random."""
    due_a = get_due_date(a[1])
    due_b = get_due_date(b[1])
    if due_a is None and due_b is not None:
        return -1
    if due_b is None and due_a is not None:
        return 1
    if due_a is None or due_b is None:
        return random_order(rng)
    if clock.is_same_day(due_a, due_b):
        return random_order(rng)
    return -1 if due_a < due_b else 1
