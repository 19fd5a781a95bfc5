from unittest.mock import MagicMock

import pytest

from cardstack.application.state import Observable


class Counter(Observable[int]):
    def __init__(self):
        super().__init__()
        self.value = 0

    def snapshot(self) -> int:
        return self.value


@pytest.fixture
def counter():
    return Counter()


def test_set_state_notifies(counter):
    listener = MagicMock()
    counter.add_listener(listener)

    counter.set_state(value=1)
    listener.assert_called_once_with(1)


def test_batch_notifies_once(counter):
    listener = MagicMock()
    counter.add_listener(listener)

    with counter.batch():
        counter.set_state(value=1)
        with counter.batch():
            counter.set_state(value=2)
            counter.set_state(value=3)
        listener.assert_not_called()

    listener.assert_called_once_with(3)


def test_batch_with_callable(counter):
    listener = MagicMock()
    counter.add_listener(listener)

    def bump():
        counter.set_state(value=counter.value + 1)
        counter.set_state(value=counter.value + 1)
        return "done"

    assert counter.batch(bump) == "done"
    listener.assert_called_once_with(2)


def test_batch_without_changes_is_silent(counter):
    listener = MagicMock()
    counter.add_listener(listener)
    with counter.batch():
        pass
    listener.assert_not_called()


def test_batch_notifies_after_error(counter):
    listener = MagicMock()
    counter.add_listener(listener)

    with pytest.raises(RuntimeError):
        with counter.batch():
            counter.set_state(value=5)
            raise RuntimeError("boom")

    listener.assert_called_once_with(5)
    counter.set_state(value=6)
    assert listener.call_count == 2


def test_remove_listener(counter):
    listener = MagicMock()
    counter.add_listener(listener)
    counter.remove_listener(listener)
    counter.set_state(value=1)
    listener.assert_not_called()


def test_snapshot_is_required():
    class Silent(Observable[int]):
        pass

    with pytest.raises(TypeError):
        Silent()
