"""
Bounded look-ahead over an iterator of started tasks
"""

import operator
from collections import deque
from typing import Deque, Generic, Iterable, Iterator, Optional, Tuple, TypeVar

T = TypeVar('T')


class BufferedPipeline(Generic[T]):
    """
    Pull up to ``limit`` items out of ``source`` ahead of the consumer.

    Useful when producing an item starts work in the background, e.g. when
    ``source`` submits a fetch to a thread pool and yields its future: the
    buffer keeps ``limit`` fetches in flight while the consumer handles the
    results one by one in submission order. ``limit == 0`` drains the whole
    source up front.
    """

    def __init__(self, source: Iterable[T], limit: int = 0):
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")
        self._source: Iterator[T] = iter(source)
        self._total = len(source) if hasattr(source, '__len__') else None
        self._pulled = 0
        self._exhausted = False
        self._buffer: Deque[T] = deque()

        if limit == 0:
            self._buffer.extend(self._source)
            self._pulled = len(self._buffer)
            self._exhausted = True
        else:
            for _ in range(limit):
                if not self._admit():
                    break

    def _admit(self) -> bool:
        if self._exhausted:
            return False
        try:
            item = next(self._source)
        except StopIteration:
            self._exhausted = True
            return False
        self._pulled += 1
        self._buffer.append(item)
        return True

    def __iter__(self) -> "BufferedPipeline[T]":
        return self

    def __next__(self) -> T:
        if not self._buffer:
            # Only reachable once the source is drained as well
            self._exhausted = True
            raise StopIteration
        item = self._buffer.popleft()
        self._admit()
        return item

    def _source_hint(self) -> Tuple[int, Optional[int]]:
        if hasattr(self._source, 'size_hint'):
            return self._source.size_hint()
        if self._total is not None:
            remaining = max(self._total - self._pulled, 0)
            return remaining, remaining
        return operator.length_hint(self._source), None

    def __len__(self) -> int:
        """Number of items currently buffered"""
        return len(self._buffer)

    def size_hint(self) -> Tuple[int, Optional[int]]:
        """Bounds on the number of items left, buffered ones included"""
        if self._exhausted:
            lower, upper = 0, 0
        else:
            lower, upper = self._source_hint()
        queued = len(self._buffer)
        return lower + queued, None if upper is None else upper + queued

    def __length_hint__(self) -> int:
        return self.size_hint()[0]
