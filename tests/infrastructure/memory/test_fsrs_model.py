"""Tests for FsrsMemoryModel against the real fsrs library."""

from datetime import datetime, timedelta, timezone

import pytest

from cardstack.application.schedulers import FsrsScheduler
from cardstack.domain.ports import MemoryCard
from cardstack.infrastructure.memory import FsrsMemoryModel, FsrsParams

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def model():
    return FsrsMemoryModel()


def new_card():
    return MemoryCard(
        stability=0, difficulty=0.3, elapsed_days=0, scheduled_days=0, reps=0, lapses=0, state=0
    )


def review_card(stability=10.0, difficulty=0.5, elapsed_days=10.0):
    return MemoryCard(
        stability=stability,
        difficulty=difficulty,
        elapsed_days=elapsed_days,
        scheduled_days=elapsed_days,
        reps=3,
        lapses=0,
        state=2,
    )


def test_new_card_has_candidate_per_rating(model):
    candidates = model.repeat(new_card(), NOW)

    assert sorted(candidates) == [1, 2, 3, 4]
    for candidate in candidates.values():
        assert candidate.stability > 0
        assert 0 < candidate.difficulty <= 1
        assert candidate.scheduled_days >= 0


def test_review_intervals_grow_with_rating(model):
    candidates = model.repeat(review_card(), NOW)

    days = [candidates[rating].scheduled_days for rating in (1, 2, 3, 4)]
    assert days == sorted(days)
    assert candidates[4].stability > candidates[1].stability
    assert candidates[1].difficulty > candidates[4].difficulty


def test_maximum_interval_is_respected():
    model = FsrsMemoryModel(FsrsParams(maximum_interval=30))
    candidates = model.repeat(review_card(stability=200.0, elapsed_days=200.0), NOW)
    assert all(c.scheduled_days <= 30 for c in candidates.values())


def test_naive_datetime_treated_as_utc(model):
    naive = NOW.replace(tzinfo=None)
    assert model.repeat(review_card(), naive) == model.repeat(review_card(), NOW)


def test_input_card_unchanged(model):
    card = review_card()
    model.repeat(card, NOW)
    assert card == review_card()


def test_scheduler_with_real_model(subject, frozen_clock):
    scheduler = FsrsScheduler(FsrsMemoryModel())
    assignment = scheduler.add(subject)

    frozen_clock.advance(days=1)
    assignment = scheduler.update(3, subject, assignment)
    assert assignment.repetition == 1
    assert assignment.stability > 0

    frozen_clock.advance(days=max(1, round(assignment.interval)))
    reviewed = scheduler.update(3, subject, assignment)
    assert reviewed.repetition == 2
    assert reviewed.available_at > frozen_clock.now - timedelta(seconds=1)
