from __future__ import annotations

from typing import Any, Callable, Generic, Iterator, List, Optional, TypeVar

T = TypeVar("T")


class QueueError(RuntimeError):
    """Raised when a queue is used in a way its owner should never allow."""


class QueueFullError(QueueError):
    pass


class QueueEmptyError(QueueError):
    pass


class QueueClosedError(QueueError):
    pass


class BoundedQueue(Generic[T]):
    """Fixed-capacity FIFO backed by a pre-allocated circular list.

    The queue never grows: appending past ``capacity`` is an error, not an
    eviction. Elements are visited oldest to newest.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError("capacity must be > 0")
        self._capacity = int(capacity)
        self._items: List[Optional[T]] = [None] * self._capacity
        self._front = 0
        self._rear = self._capacity - 1
        self._size = 0
        self._visiting = False
        self._closed = False

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        return self._size

    @property
    def is_empty(self) -> bool:
        return self._size == 0

    @property
    def is_full(self) -> bool:
        return self._size == self._capacity

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[T]:
        self._check_open()
        return self._iter_live()

    def _iter_live(self) -> Iterator[T]:
        idx = self._front
        for _ in range(self._size):
            yield self._items[idx]  # type: ignore[misc]
            idx = (idx + 1) % self._capacity

    def __contains__(self, element: object) -> bool:
        return any(item == element for item in self)

    def append(self, element: T) -> None:
        self._check_mutable()
        if self._size >= self._capacity:
            raise QueueFullError(f"queue is full (capacity={self._capacity})")
        self._rear = (self._rear + 1) % self._capacity
        self._items[self._rear] = element
        self._size += 1

    def pop_oldest(self) -> T:
        self._check_mutable()
        if self._size == 0:
            raise QueueEmptyError("pop from an empty queue")
        element = self._items[self._front]
        self._items[self._front] = None
        self._front = (self._front + 1) % self._capacity
        self._size -= 1
        return element  # type: ignore[return-value]

    def peek_newest(self) -> T:
        self._check_open()
        if self._size == 0:
            raise QueueEmptyError("peek into an empty queue")
        return self._items[self._rear]  # type: ignore[return-value]

    def for_each(self, context: Any, visitor: Callable[[T, Any], None]) -> None:
        """Call ``visitor(element, context)`` for every element, oldest first."""
        self._check_open()
        outer = self._visiting
        self._visiting = True
        try:
            for element in self:
                visitor(element, context)
        finally:
            self._visiting = outer

    def clear(self) -> None:
        self._check_mutable()
        while self._size > 0:
            self.pop_oldest()

    def close(self) -> None:
        self._check_mutable()
        self._items = []
        self._size = 0
        self._closed = True

    def _check_open(self) -> None:
        if self._closed:
            raise QueueClosedError("queue has been closed")

    def _check_mutable(self) -> None:
        self._check_open()
        if self._visiting:
            raise QueueError("queue mutated during for_each")
