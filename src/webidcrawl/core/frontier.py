# src/webidcrawl/core/frontier.py
from collections import deque
from typing import Deque, Iterable, Set

from ..models.frontier_model import FrontierItem


class FrontierEmpty(Exception):
    """Raised by Frontier.dequeue when no item is pending."""


class Frontier:
    """
    FIFO work queue gated by a visited set.

    An identifier is marked visited the moment it is first enqueued and is
    never queued again for the rest of the run.
    """

    def __init__(self):
        self._queue: Deque[FrontierItem] = deque()
        self._visited: Set[str] = set()

    def enqueue(self, item: FrontierItem) -> bool:
        """
        Queue an item unless its identifier was already seen.

        Returns:
            bool: True if the item was queued
        """
        if item.identifier in self._visited:
            return False
        self._visited.add(item.identifier)
        self._queue.append(item)
        return True

    def enqueue_all(self, items: Iterable[FrontierItem]) -> int:
        """Queue several items, returning how many were new."""
        return sum(1 for item in items if self.enqueue(item))

    def dequeue(self) -> FrontierItem:
        if not self._queue:
            raise FrontierEmpty()
        return self._queue.popleft()

    def is_visited(self, identifier: str) -> bool:
        return identifier in self._visited

    @property
    def visited_count(self) -> int:
        return len(self._visited)

    def __len__(self) -> int:
        return len(self._queue)

    def __bool__(self) -> bool:
        return bool(self._queue)
