from pathlib import Path
from typing import List, Optional, Sequence
import logfire

from webidcrawl.config.settings import Settings, settings as default_settings
from webidcrawl.core.catalog import CatalogClient
from webidcrawl.core.fetcher import ProfileFetcher
from webidcrawl.core.scheduler import BoundedScheduler
from webidcrawl.core.seeds import SeedAssembler, SeedSet
from webidcrawl.core.worker import Fetcher, ProfileWorker
from webidcrawl.export.profiles import ExportReport, ProfileExporter
from webidcrawl.models.frontier_model import CrawlSummary
from webidcrawl.storage.corpus import CorpusStore
from webidcrawl.utils.logging import CrawlMetrics


class CrawlerApp:
    """Main application class for the WebID crawler."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        seeds: Sequence[str] = (),
        seed_file: Optional[Path] = None,
        fetcher: Optional[Fetcher] = None,
        catalog: Optional[CatalogClient] = None
    ):
        self.settings = settings or default_settings
        self.logger = logfire
        self.cli_seeds = list(seeds)
        self.seed_file = seed_file
        self.corpus: Optional[CorpusStore] = None
        self.scheduler: Optional[BoundedScheduler] = None
        self._fetcher = fetcher
        self._catalog = catalog

    @property
    def summary(self) -> Optional[CrawlSummary]:
        """Live counters of the current run, also valid after interruption."""
        return self.scheduler.summary if self.scheduler else None

    def init_corpus(self) -> CorpusStore:
        """Open the corpus directory, creating it when configured to."""
        with logfire.span('init_corpus'):
            corpus_settings = self.settings.corpus
            self.corpus = CorpusStore(corpus_settings.directory, corpus_settings.suffix)
            if corpus_settings.create_if_missing:
                self.corpus.ensure_directory()
            self.logger.info("Corpus ready", directory=str(corpus_settings.directory))
            return self.corpus

    async def assemble_seeds(self) -> SeedSet:
        catalog = self._catalog or CatalogClient(
            self.settings.catalog.location,
            timeout=self.settings.catalog.timeout
        )
        assembler = SeedAssembler(
            self.corpus,
            catalog=catalog,
            explicit=self.settings.get_seeds() + self.cli_seeds,
            seed_file=self.seed_file
        )
        return await assembler.assemble()

    async def run_crawler(self, seeds: List[str]) -> CrawlSummary:
        """Run the bounded crawl over the assembled seeds."""
        with logfire.span('run_crawler'):
            crawler_settings = self.settings.crawler
            if self._fetcher is not None:
                return await self._crawl(self._fetcher, seeds)

            async with ProfileFetcher(
                accept_header=crawler_settings.accept_header,
                timeout=crawler_settings.request_timeout,
                user_agent=crawler_settings.user_agent,
                max_connections=crawler_settings.max_concurrent_requests
            ) as fetcher:
                return await self._crawl(fetcher, seeds)

    async def _crawl(self, fetcher: Fetcher, seeds: List[str]) -> CrawlSummary:
        crawler_settings = self.settings.crawler
        worker = ProfileWorker(
            fetcher,
            self.corpus,
            max_depth=crawler_settings.max_depth,
            depth_policy=crawler_settings.depth_reset_policy,
            metrics=CrawlMetrics()
        )
        self.scheduler = BoundedScheduler(
            worker,
            max_concurrent=crawler_settings.max_concurrent_requests
        )
        return await self.scheduler.run(seeds)

    async def run(self) -> CrawlSummary:
        """Main application execution flow."""
        with logfire.span('app_run'):
            try:
                self.init_corpus()
                seed_set = await self.assemble_seeds()
                if self.cli_seeds:
                    self.logger.info("Added seeds from CLI arguments", count=len(self.cli_seeds))
                summary = await self.run_crawler(seed_set.merged())
                self.logger.info("Application completed successfully")
                return summary
            except Exception as e:
                self.logger.error("Application failed", error=str(e))
                raise

    async def export(self) -> ExportReport:
        """Compact the corpus for downstream consumers."""
        corpus = self.corpus or self.init_corpus()
        exporter = ProfileExporter(corpus, self.settings.export.output_dir)
        return await exporter.export()
