# src/webidcrawl/core/scheduler.py
import asyncio
from typing import Iterable, Optional, Protocol, Set
import logfire

from ..models.frontier_model import CrawlSummary, FrontierItem, ItemOutcome, WorkerResult
from .frontier import Frontier

MAX_CONCURRENT_REQUESTS = 100


class Worker(Protocol):
    async def process(self, item: FrontierItem) -> WorkerResult:
        ...


class BoundedScheduler:
    """
    Drains the frontier with at most `max_concurrent` workers in flight.

    A single dispatcher coroutine owns the frontier, the visited set and the
    in-flight counter. Worker tasks report back through a completion queue;
    every completion frees one slot which the dispatcher refills before
    waiting again. The run ends when the frontier is empty and no worker is
    in flight.
    """

    def __init__(self, worker: Worker, max_concurrent: int = MAX_CONCURRENT_REQUESTS):
        if max_concurrent < 1:
            raise ValueError("max_concurrent must be at least 1")
        self.worker = worker
        self.max_concurrent = max_concurrent
        self.logger = logfire
        self._frontier = Frontier()
        self._in_flight = 0
        self.summary = CrawlSummary()

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def frontier(self) -> Frontier:
        return self._frontier

    async def run(self, seeds: Iterable[str]) -> CrawlSummary:
        """
        Crawl from the given seeds until the frontier is exhausted.

        Args:
            seeds: Identifiers queued at depth 0, in order; duplicates are dropped

        Returns:
            CrawlSummary with per-outcome counters
        """
        self.summary.seeded += self._frontier.enqueue_all(
            FrontierItem(identifier=seed, depth=0) for seed in seeds if seed
        )
        self.logger.info(
            "Crawling started",
            seeds=self.summary.seeded,
            max_concurrent=self.max_concurrent
        )

        completions: asyncio.Queue = asyncio.Queue()
        tasks: Set[asyncio.Task] = set()

        try:
            while True:
                self._drain(completions, tasks)
                if self._in_flight == 0:
                    break

                task = await completions.get()
                tasks.discard(task)
                self._in_flight -= 1
                self._complete(task)
        finally:
            for task in tasks:
                task.cancel()

        self.summary.visited = self._frontier.visited_count
        self.logger.info(
            "Crawled {accepted} WebIDs",
            accepted=self.summary.accepted,
            ignored=self.summary.ignored,
            fetch_failed=self.summary.fetch_failed,
            parse_failed=self.summary.parse_failed,
            visited=self.summary.visited
        )
        return self.summary

    def _drain(self, completions: asyncio.Queue, tasks: Set[asyncio.Task]) -> None:
        while self._frontier and self._in_flight < self.max_concurrent:
            item = self._frontier.dequeue()
            self._in_flight += 1
            if self._in_flight > self.summary.peak_in_flight:
                self.summary.peak_in_flight = self._in_flight
            task = asyncio.create_task(self._execute(item))
            task.add_done_callback(completions.put_nowait)
            tasks.add(task)

    async def _execute(self, item: FrontierItem) -> WorkerResult:
        try:
            return await self.worker.process(item)
        except Exception as e:
            self.logger.error(
                "Error processing WebID",
                url=item.identifier,
                error=str(e)
            )
            return WorkerResult(item=item, outcome=ItemOutcome.ERROR)

    def _complete(self, task: asyncio.Task) -> None:
        result: Optional[WorkerResult] = None
        if not task.cancelled():
            result = task.result()
        if result is None:
            self.summary.errors += 1
            return

        self.summary.record(result)
        self._frontier.enqueue_all(result.neighbors)
        self.summary.visited = self._frontier.visited_count
