"""Errors raised by the crawler and its collaborators."""
from typing import Optional


class WebIdCrawlError(Exception):
    """Base class for crawler errors."""


class TransportError(WebIdCrawlError):
    """A profile could not be fetched (network error or non-2xx status)."""

    def __init__(self, url: str, message: str, status: Optional[int] = None):
        super().__init__(f"{url}: {message}")
        self.url = url
        self.status = status


class ParseError(WebIdCrawlError):
    """A fetched body is not a parseable RDF document."""


class CorpusError(WebIdCrawlError):
    """Base class for corpus store failures."""


class CorpusUnavailableError(CorpusError):
    """The corpus directory cannot be listed at all."""


class CorpusEntryNotFound(CorpusError):
    """No corpus entry exists for an identifier."""


class CorpusReadError(CorpusError):
    """A corpus entry exists but cannot be read."""


class CorpusWriteError(CorpusError):
    """An accepted document could not be persisted."""


class CatalogError(WebIdCrawlError):
    """The catalog of known WebIDs could not be loaded."""
