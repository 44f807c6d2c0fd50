# src/webidcrawl/core/fetcher.py
from typing import Dict, Optional
import httpx
import logfire
from pydantic import BaseModel, Field

from ..exceptions import TransportError


class FetchResponse(BaseModel):
    """A successful profile fetch."""

    url: str
    status: int
    headers: Dict[str, str] = Field(default_factory=dict)
    body: bytes = b""

    @property
    def content_type(self) -> Optional[str]:
        return self.headers.get("content-type")


class ProfileFetcher:
    """
    Async HTTP transport for profile documents.

    Use as an async context manager so the underlying connection pool is
    closed when the crawl ends.
    """

    def __init__(
        self,
        accept_header: str = "text/turtle",
        timeout: float = 30.0,
        user_agent: str = "webidcrawl/0.1",
        max_connections: int = 100,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.logger = logfire
        self.accept_header = accept_header
        self.timeout = timeout
        self.user_agent = user_agent
        self.max_connections = max_connections
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "ProfileFetcher":
        self._client = httpx.AsyncClient(
            headers={
                "Accept": self.accept_header,
                "User-Agent": self.user_agent,
            },
            timeout=self.timeout,
            follow_redirects=True,
            limits=httpx.Limits(max_connections=self.max_connections),
            transport=self._transport,
        )
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def fetch(self, uri: str) -> FetchResponse:
        """
        Fetch one profile document.

        Args:
            uri: WebID to dereference

        Returns:
            FetchResponse with the final (post-redirect) URL

        Raises:
            TransportError: on network errors, timeouts and non-2xx responses
        """
        if self._client is None:
            raise RuntimeError("ProfileFetcher used outside of its context")

        try:
            response = await self._client.get(uri)
        except httpx.HTTPError as e:
            raise TransportError(uri, f"{type(e).__name__}: {e}") from e
        except httpx.InvalidURL as e:
            raise TransportError(uri, f"invalid URL: {e}") from e

        if not response.is_success:
            raise TransportError(
                uri,
                f"HTTP {response.status_code}",
                status=response.status_code
            )

        return FetchResponse(
            url=str(response.url),
            status=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=response.content,
        )
