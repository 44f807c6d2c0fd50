# src/webidcrawl/core/seeds.py
from pathlib import Path
from typing import List, Optional, Sequence
import logfire
from pydantic import BaseModel, Field

from ..storage.corpus import CorpusStore
from .catalog import CatalogClient


class SeedSet(BaseModel):
    """Seeds collected per source, merged in priority order."""

    corpus: List[str] = Field(default_factory=list)
    catalog: List[str] = Field(default_factory=list)
    explicit: List[str] = Field(default_factory=list)

    def merged(self) -> List[str]:
        """Corpus, then catalog, then explicit seeds; first occurrence wins."""
        seen = set()
        ordered = []
        for identifier in [*self.corpus, *self.catalog, *self.explicit]:
            if identifier not in seen:
                seen.add(identifier)
                ordered.append(identifier)
        return ordered


def read_seed_file(path: Path) -> List[str]:
    """One identifier per line; blank lines and '#' comments are skipped."""
    seeds = []
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line and not line.startswith("#"):
            seeds.append(line)
    return seeds


class SeedAssembler:
    """
    Collects the initial frontier from the corpus, the catalog and
    explicitly supplied identifiers.
    """

    def __init__(
        self,
        corpus: CorpusStore,
        catalog: Optional[CatalogClient] = None,
        explicit: Sequence[str] = (),
        seed_file: Optional[Path] = None
    ):
        self.corpus = corpus
        self.catalog = catalog
        self.explicit = list(explicit)
        self.seed_file = seed_file
        self.logger = logfire

    async def assemble(self) -> SeedSet:
        """
        Gather seeds from every source.

        Returns:
            SeedSet with one list per source

        Raises:
            CorpusUnavailableError: if the corpus cannot be listed
        """
        with logfire.span('assemble_seeds'):
            seeds = SeedSet(
                corpus=self.corpus.list_identifiers(),
                catalog=await self.catalog.fetch_catalog() if self.catalog else [],
                explicit=self.explicit + self._seed_file_entries()
            )
            self.logger.info(
                "Seeds assembled",
                corpus=len(seeds.corpus),
                catalog=len(seeds.catalog),
                explicit=len(seeds.explicit)
            )
            return seeds

    def _seed_file_entries(self) -> List[str]:
        if self.seed_file is None:
            return []
        try:
            return read_seed_file(self.seed_file)
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning(
                "Seed file unreadable, continuing without it",
                path=str(self.seed_file),
                error=str(e)
            )
            return []
