"""
Observable state holder.

Subclasses mutate their fields through `set_state` (or plain attribute
writes followed by `notify`); listeners receive a snapshot of the new state.
`batch()` groups several writes into a single notification.
"""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, Generic, TypeVar

SnapshotT = TypeVar("SnapshotT")
T = TypeVar("T")
Listener = Callable[[SnapshotT], None]


class Observable(ABC, Generic[SnapshotT]):
    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._batch_depth = 0
        self._pending_notification = False

    @abstractmethod
    def snapshot(self) -> SnapshotT:
        """Immutable view of the current state, handed to listeners."""
        pass

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        self._listeners = [fn for fn in self._listeners if fn is not listener]

    def notify(self) -> None:
        """Send a snapshot to every listener, or defer it until the outermost batch ends."""
        if self._batch_depth:
            self._pending_notification = True
            return
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    def set_state(self, **fields: Any) -> None:
        for name, value in fields.items():
            setattr(self, name, value)
        self.notify()

    def batch(self, fn: Callable[[], T] | None = None) -> Any:
        """
        Coalesce notifications; nested batches notify once, when the outermost exits.

        Use as `with state.batch(): ...`, or pass a callable to run it inside a batch.
        """
        if fn is None:
            return self._batching()
        with self._batching():
            return fn()

    @contextmanager
    def _batching(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._pending_notification:
                self._pending_notification = False
                self.notify()
