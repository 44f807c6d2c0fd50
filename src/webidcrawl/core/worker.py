# src/webidcrawl/core/worker.py
import time
from typing import List, Optional, Protocol
import logfire

from ..exceptions import CorpusWriteError, ParseError, TransportError
from ..models.frontier_model import DepthResetPolicy, FrontierItem, ItemOutcome, WorkerResult
from ..models.profile_model import ProfileDocument
from ..storage.corpus import CorpusStore
from ..utils.logging import CrawlMetrics
from .fetcher import FetchResponse
from .parser import extract_profile, parse_graph, to_turtle

MAX_DEPTH = 3


class Fetcher(Protocol):
    async def fetch(self, uri: str) -> FetchResponse:
        ...


def next_depth(
    depth: int,
    accepted: bool,
    policy: DepthResetPolicy = DepthResetPolicy.ACCEPTED_ONLY
) -> int:
    """
    Depth assigned to a neighbor discovered from a document at `depth`.

    Neighbors of an accepted profile restart at 0, so chains of valid
    profiles can be followed indefinitely while chains of invalid ones stop
    after `MAX_DEPTH` hops. The `ALWAYS` policy resets every neighbor.
    """
    if policy == DepthResetPolicy.ALWAYS or accepted:
        return 0
    return depth + 1


class ProfileWorker:
    """
    Fetch-and-validate unit of work for one frontier item.

    Every failure is local to the item: fetch and parse errors end the item
    without neighbor expansion, corpus write errors are logged and the item
    still counts as accepted.
    """

    def __init__(
        self,
        fetcher: Fetcher,
        corpus: CorpusStore,
        max_depth: int = MAX_DEPTH,
        depth_policy: DepthResetPolicy = DepthResetPolicy.ACCEPTED_ONLY,
        metrics: Optional[CrawlMetrics] = None
    ):
        self.fetcher = fetcher
        self.corpus = corpus
        self.max_depth = max_depth
        self.depth_policy = depth_policy
        self.metrics = metrics
        self.logger = logfire

    async def process(self, item: FrontierItem) -> WorkerResult:
        """
        Fetch, parse and validate one WebID.

        Args:
            item: Frontier item to process

        Returns:
            WorkerResult with the outcome and the proposed neighbors
        """
        started = time.monotonic()
        try:
            return await self._process(item)
        finally:
            if self.metrics:
                self.metrics.processing_time.record(time.monotonic() - started)

    async def _process(self, item: FrontierItem) -> WorkerResult:
        try:
            response = await self.fetcher.fetch(item.identifier)
        except TransportError as e:
            self.logger.info("Fetch failed", url=item.identifier, error=str(e))
            self._count_failure()
            return WorkerResult(item=item, outcome=ItemOutcome.FETCH_FAILED)

        try:
            graph = parse_graph(response.body, base_uri=response.url, content_type=response.content_type)
        except ParseError as e:
            self.logger.info("Parse failed", url=item.identifier, error=str(e))
            self._count_failure()
            return WorkerResult(item=item, outcome=ItemOutcome.PARSE_FAILED)

        profile = extract_profile(graph, item.identifier)

        accepted = profile.has_issuer
        persisted = False
        if accepted:
            self.logger.info("Discovered WebID", url=item.identifier, depth=item.depth)
            if self.metrics:
                self.metrics.accepted.add(1)
            persisted = await self._persist(
                item.identifier,
                to_turtle(response.body, graph, response.content_type)
            )
        else:
            self.logger.info("Ignored (no OIDC issuer)", url=item.identifier, depth=item.depth)
            if self.metrics:
                self.metrics.ignored.add(1)

        return WorkerResult(
            item=item,
            outcome=ItemOutcome.ACCEPTED if accepted else ItemOutcome.IGNORED,
            persisted=persisted,
            neighbors=self.expand(item, profile, accepted)
        )

    def expand(self, item: FrontierItem, profile: ProfileDocument, accepted: bool) -> List[FrontierItem]:
        """Neighbor candidates of `item`, empty once the depth ceiling is reached."""
        if item.depth >= self.max_depth or not profile.has_neighbors:
            return []
        depth = next_depth(item.depth, accepted, self.depth_policy)
        return [FrontierItem(identifier=friend, depth=depth) for friend in profile.knows]

    async def _persist(self, identifier: str, body: bytes) -> bool:
        try:
            await self.corpus.write(identifier, body)
        except CorpusWriteError as e:
            self.logger.warning("Could not persist WebID", url=identifier, error=str(e))
            return False
        return True

    def _count_failure(self) -> None:
        if self.metrics:
            self.metrics.failed.add(1)
