import asyncio
from typing import Dict, Iterable, List, Optional

from webidcrawl.core.fetcher import FetchResponse
from webidcrawl.exceptions import TransportError

ISSUER = "https://login.example/"


def profile_ttl(issuer: Optional[str] = None, knows: Iterable[str] = (), name: str = "Someone") -> str:
    """Minimal Turtle profile for the subject <#me>."""
    lines = [
        "@prefix foaf: <http://xmlns.com/foaf/0.1/> .",
        "@prefix solid: <http://www.w3.org/ns/solid/terms#> .",
        "",
        f'<#me> a foaf:Person ; foaf:name "{name}"',
    ]
    if issuer:
        lines.append(f"    ; solid:oidcIssuer <{issuer}>")
    for friend in knows:
        lines.append(f"    ; foaf:knows <{friend}>")
    lines.append("    .")
    return "\n".join(lines) + "\n"


def webid(name: str) -> str:
    return f"https://{name}.example/profile#me"


class FakeFetcher:
    """In-memory transport; identifiers missing from `documents` fail like a 404."""

    def __init__(
        self,
        documents: Dict[str, str],
        delay: float = 0.0,
        content_types: Optional[Dict[str, str]] = None
    ):
        self.documents = documents
        self.content_types = content_types or {}
        self.delay = delay
        self.calls: List[str] = []
        self.in_flight = 0
        self.peak = 0

    async def fetch(self, uri: str) -> FetchResponse:
        self.calls.append(uri)
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
            document = self.documents.get(uri)
            if document is None:
                raise TransportError(uri, "HTTP 404", status=404)
            return FetchResponse(
                url=uri.split("#", 1)[0],
                status=200,
                headers={"content-type": self.content_types.get(uri, "text/turtle")},
                body=document.encode("utf-8"),
            )
        finally:
            self.in_flight -= 1
