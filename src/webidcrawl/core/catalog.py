# src/webidcrawl/core/catalog.py
import json
from pathlib import Path
from typing import Any, List, Optional
import httpx
import logfire

from ..exceptions import CatalogError


def identifiers_from_catalog(data: Any) -> List[str]:
    """
    Pull WebIDs out of a catalog document.

    Accepts a plain list of strings, an object with a ``webids`` list, or a
    JSON-LD document whose ``@graph`` entries carry ``@id``.
    """
    if isinstance(data, dict):
        if "webids" in data:
            data = data["webids"]
            if not isinstance(data, list):
                raise CatalogError(f"'webids' must be a list, not {type(data).__name__}")
        elif "@graph" in data:
            graph = data["@graph"]
            if not isinstance(graph, list):
                raise CatalogError(f"'@graph' must be a list, not {type(graph).__name__}")
            data = [entry.get("@id") for entry in graph if isinstance(entry, dict)]
        else:
            raise CatalogError("Catalog object has neither 'webids' nor '@graph'")

    if not isinstance(data, list):
        raise CatalogError(f"Unexpected catalog type: {type(data).__name__}")

    return [item for item in data if isinstance(item, str) and item]


class CatalogClient:
    """Best-effort loader for a catalog of known WebIDs."""

    def __init__(
        self,
        location: Optional[str],
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.location = location
        self.timeout = timeout
        self._transport = transport
        self.logger = logfire

    async def fetch_catalog(self) -> List[str]:
        """
        Load the catalog.

        Returns:
            List of identifiers; empty when no location is configured or
            anything goes wrong
        """
        if not self.location:
            return []

        try:
            data = await self._load()
            identifiers = identifiers_from_catalog(data)
        except (CatalogError, httpx.HTTPError, httpx.InvalidURL, OSError, ValueError) as e:
            self.logger.warning(
                "Catalog unavailable, continuing without it",
                location=self.location,
                error=str(e)
            )
            return []

        self.logger.info(
            "Catalog loaded",
            location=self.location,
            identifiers=len(identifiers)
        )
        return identifiers

    async def _load(self) -> Any:
        if self.location.startswith(("http://", "https://")):
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport
            ) as client:
                response = await client.get(
                    self.location,
                    headers={"Accept": "application/json, application/ld+json"}
                )
                response.raise_for_status()
                return response.json()

        return json.loads(Path(self.location).read_text(encoding="utf-8"))
