import random
from datetime import timedelta

import pytest

from cardstack.application.schedulers import IntervalSystem, StaticScheduler
from cardstack.domain.errors import IntervalSystemNotFoundError
from cardstack.domain.models import Subject

subject = Subject(id="a", quiz_cards=["front"], data={"srs_id": 1})
DAY = timedelta(days=1)


@pytest.fixture
def scheduler():
    return StaticScheduler()


def test_add_starts_at_stage_zero(scheduler, frozen_clock):
    assignment = scheduler.add(subject)
    assert assignment.efactor == 0
    assert assignment.available_at == frozen_clock.now
    assert scheduler.filter(subject, assignment)


def test_unknown_interval_system(scheduler):
    stray = Subject(id="b", data={"srs_id": 99})
    with pytest.raises(IntervalSystemNotFoundError):
        scheduler.add(stray)
    with pytest.raises(KeyError):
        scheduler.add(Subject(id="c"))


def test_correct_advances_stage(scheduler, frozen_clock):
    assignment = scheduler.update(True, subject, scheduler.add(subject))
    assert assignment.efactor == 1
    assert assignment.interval == 86400
    assert assignment.available_at == frozen_clock.now + DAY
    assert not scheduler.filter(subject, assignment)

    assignment = scheduler.update(True, subject, assignment)
    assert assignment.efactor == 2
    assert assignment.available_at == frozen_clock.now + 3 * DAY


def test_past_the_table_stays_available(frozen_clock):
    scheduler = StaticScheduler({1: IntervalSystem(id=1, name="Short", intervals=(0, 60))})
    assignment = scheduler.add(subject)
    for _ in range(5):
        assignment = scheduler.update(True, subject, assignment)

    assert assignment.efactor == 2
    assert assignment.interval is None
    assert scheduler.filter(subject, assignment)


def test_incorrect_never_drops_below_stage_one(scheduler, frozen_clock):
    assignment = scheduler.add(subject)
    for _ in range(4):
        assignment = scheduler.update(False, subject, assignment)
        assert assignment.efactor == 1


def test_incorrect_waits_at_most_one_day(frozen_clock):
    rng = random.Random(7)
    intervals = tuple(sorted(rng.randint(0, 90 * 86400) for _ in range(12)))
    scheduler = StaticScheduler({1: IntervalSystem(id=1, name="Wide", intervals=intervals)})
    assignment = scheduler.add(subject)
    for _ in range(10):
        assignment = scheduler.update(True, subject, assignment)

    for _ in range(12):
        assignment = scheduler.update(False, subject, assignment)
        assert assignment.efactor >= 1
        assert assignment.available_at <= frozen_clock.now + DAY


def test_incorrect_uses_shorter_interval_when_available(frozen_clock):
    system = IntervalSystem(id=1, name="Fast", intervals=(0, 3600, 7200, 14 * 86400))
    scheduler = StaticScheduler({1: system})
    assignment = scheduler.add(subject)
    for _ in range(3):
        assignment = scheduler.update(True, subject, assignment)

    assignment = scheduler.update(False, subject, assignment)
    assert assignment.efactor == 2
    assert assignment.available_at == frozen_clock.now + timedelta(seconds=7200)
