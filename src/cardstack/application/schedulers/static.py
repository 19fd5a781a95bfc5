"""
Static interval scheduler.

Each subject names an interval system (`data["srs_id"]`); the assignment's
`efactor` holds the stage, an index into that system's table of waits in
seconds. Stage 0 is reserved for "added but never answered".
"""

import random
from dataclasses import dataclass, replace
from enum import IntEnum

from cardstack.application.utils import clock
from cardstack.domain.constants import DEFAULT_INTERVALS, FAST_INTERVALS, STATIC_DO_OVER_SECONDS
from cardstack.domain.errors import IntervalSystemNotFoundError
from cardstack.domain.models import Assignment, Subject, SubjectPair
from cardstack.domain.ports import Scheduler, random_order


class StaticQuality(IntEnum):
    INCORRECT = 0
    CORRECT = 1


@dataclass(frozen=True)
class IntervalSystem:
    id: int
    name: str
    intervals: tuple[int, ...]  # seconds, indexed by stage


DEFAULT_INTERVAL_SYSTEMS: dict[int, IntervalSystem] = {
    1: IntervalSystem(id=1, name="Default", intervals=tuple(DEFAULT_INTERVALS)),
    2: IntervalSystem(id=2, name="Fast", intervals=tuple(FAST_INTERVALS)),
}


class StaticScheduler(Scheduler[bool]):
    """Advance one stage per correct answer, fall back one per miss."""

    def __init__(
        self,
        interval_systems: dict[int, IntervalSystem] | None = None,
        rng: random.Random | None = None,
    ):
        self.interval_systems = interval_systems or DEFAULT_INTERVAL_SYSTEMS
        self.rng = rng

    def get_system(self, subject: Subject) -> IntervalSystem:
        srs_id = subject.data.get("srs_id")
        system = self.interval_systems.get(srs_id)
        if system is None:
            raise IntervalSystemNotFoundError(srs_id)
        return system

    def add(self, subject: Subject) -> Assignment:
        system = self.get_system(subject)
        first = system.intervals[0] if system.intervals else 0
        return Assignment(
            subject_id=subject.id,
            efactor=0,
            interval=first,
            available_at=clock.get_now(first),
        )

    def filter(self, subject: Subject, assignment: Assignment | None) -> bool:
        if assignment is None:
            return True
        if assignment.marked_completed:
            return False
        if assignment.available_at is None:
            return True
        return assignment.available_at <= clock.get_now()

    def sort(self, a: SubjectPair, b: SubjectPair) -> int:
        return random_order(self.rng)

    def update(self, quality: bool, subject: Subject, assignment: Assignment) -> Assignment:
        system = self.get_system(subject)
        prev_stage = int(assignment.efactor or 0)
        now = clock.get_now()

        if quality:
            # Past the end of the table there is nothing left to wait for
            stage = min(prev_stage + 1, len(system.intervals))
            interval = _interval_at(system, stage)
            available_at = now if interval is None else clock.get_now(interval)
        else:
            stage = max(1, (prev_stage or 1) - 1)
            interval = _interval_at(system, stage)
            do_over = clock.get_now(STATIC_DO_OVER_SECONDS)
            if interval is None:
                available_at = do_over
            else:
                available_at = min(clock.get_now(interval), do_over)

        return replace(
            assignment,
            efactor=stage,
            interval=interval,
            available_at=available_at,
            last_studied_at=now,
        )


def _interval_at(system: IntervalSystem, stage: int) -> int | None:
    if 0 <= stage < len(system.intervals):
        return system.intervals[stage]
    return None
