from cardstack.application.schedulers import BasicQuality, BasicScheduler
from cardstack.domain.models import Assignment, Subject

subject = Subject(id="a", quiz_cards=["front"])


def test_add_starts_at_zero():
    assignment = BasicScheduler().add(subject)
    assert assignment == Assignment(subject_id="a", repetition=0)
    assert BasicScheduler().add(subject) == assignment


def test_update_counts_up_and_down_with_floor():
    scheduler = BasicScheduler()
    assignment = scheduler.add(subject)

    assignment = scheduler.update(BasicQuality.CORRECT, subject, assignment)
    assignment = scheduler.update(BasicQuality.CORRECT, subject, assignment)
    assert assignment.repetition == 2

    assignment = scheduler.update(BasicQuality.INCORRECT, subject, assignment)
    assignment = scheduler.update(BasicQuality.INCORRECT, subject, assignment)
    assignment = scheduler.update(BasicQuality.INCORRECT, subject, assignment)
    assert assignment.repetition == 0


def test_update_does_not_mutate_input():
    scheduler = BasicScheduler()
    assignment = scheduler.add(subject)
    scheduler.update(BasicQuality.CORRECT, subject, assignment)
    assert assignment.repetition == 0


def test_filter_hides_completed_and_marked():
    scheduler = BasicScheduler(repetitions_to_complete=2)

    assert scheduler.filter(subject, Assignment(subject_id="a", repetition=1))
    assert not scheduler.filter(subject, Assignment(subject_id="a", repetition=2))
    assert not scheduler.filter(
        subject, Assignment(subject_id="a", repetition=0, marked_completed=True)
    )
    assert scheduler.filter(subject, None)


def test_sort_least_repeated_first():
    scheduler = BasicScheduler()
    low = (Subject(id="low"), Assignment(subject_id="low", repetition=0))
    high = (Subject(id="high"), Assignment(subject_id="high", repetition=2))

    assert scheduler.sort(low, high) < 0
    assert scheduler.sort(high, low) > 0
    assert scheduler.sort(low, low) in (-1, 1)
