# src/webidcrawl/models/frontier_model.py
from enum import Enum
from typing import List
from pydantic import BaseModel, Field


class DepthResetPolicy(str, Enum):
    """When a discovered neighbor starts again from depth zero."""
    ACCEPTED_ONLY = 'accepted_only'
    ALWAYS = 'always'


class ItemOutcome(str, Enum):
    """Enumeration of possible results of processing one frontier item."""
    ACCEPTED = 'accepted'
    IGNORED = 'ignored'
    FETCH_FAILED = 'fetch_failed'
    PARSE_FAILED = 'parse_failed'
    ERROR = 'error'


class FrontierItem(BaseModel):
    """A WebID waiting for a crawl attempt."""

    model_config = {'frozen': True}

    identifier: str = Field(..., min_length=1)
    depth: int = Field(default=0, ge=0)


class WorkerResult(BaseModel):
    """What a worker learned from one frontier item."""

    item: FrontierItem
    outcome: ItemOutcome
    persisted: bool = False
    neighbors: List[FrontierItem] = Field(default_factory=list)

    @property
    def accepted(self) -> bool:
        return self.outcome == ItemOutcome.ACCEPTED


class CrawlSummary(BaseModel):
    """Counters reported at the end of a crawl run."""

    accepted: int = Field(default=0, ge=0)
    ignored: int = Field(default=0, ge=0)
    fetch_failed: int = Field(default=0, ge=0)
    parse_failed: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    persist_failed: int = Field(default=0, ge=0)
    seeded: int = Field(default=0, ge=0)
    visited: int = Field(default=0, ge=0)
    peak_in_flight: int = Field(default=0, ge=0)

    @property
    def processed(self) -> int:
        return (
            self.accepted + self.ignored + self.fetch_failed
            + self.parse_failed + self.errors
        )

    def record(self, result: WorkerResult) -> None:
        """Add one worker result to the counters."""
        if result.outcome == ItemOutcome.ACCEPTED:
            self.accepted += 1
            if not result.persisted:
                self.persist_failed += 1
        elif result.outcome == ItemOutcome.IGNORED:
            self.ignored += 1
        elif result.outcome == ItemOutcome.FETCH_FAILED:
            self.fetch_failed += 1
        elif result.outcome == ItemOutcome.PARSE_FAILED:
            self.parse_failed += 1
        else:
            self.errors += 1
