"""
Scryfall API client.

The only code path allowed to send requests to Scryfall. Every request
takes a token from the shared "scryfall" rate limiter first; responses are
returned as parsed JSON without reshaping. Errors are logged and raised,
never retried.

API Documentation: https://scryfall.com/docs/api
"""
from typing import Any, Optional
from urllib.parse import quote

import httpx
import structlog

from tradebinder.core.rate_limiter import TokenBucket

logger = structlog.get_logger()


class ScryfallError(Exception):
    """Base exception for Scryfall API errors."""
    pass


class UpstreamError(ScryfallError):
    """Scryfall answered with a non-success status."""

    def __init__(self, status: int, body: str, url: str | None = None):
        self.status = status
        self.body = body
        self.url = url
        super().__init__(f"Scryfall request failed: {status}")


class ScryfallRequestError(ScryfallError):
    """The request never produced a usable response (network, timeout, bad JSON)."""
    pass


class ScryfallClient:
    """
    Rate-limited client for the Scryfall card catalog.

    Provides search, lookup by id, printings and lookup by name. The client
    knows nothing about caching; see CardService for that.
    """

    BASE_URL = "https://api.scryfall.com"
    USER_AGENT = "TradeBinder/1.0 (+local)"

    def __init__(
        self,
        limiter: TokenBucket,
        base_url: str = BASE_URL,
        user_agent: str = USER_AGENT,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize the Scryfall client.

        Args:
            limiter: Token bucket gating every outbound request.
            base_url: Scryfall API root.
            user_agent: Identifying User-Agent sent with every request.
            timeout: Request timeout in seconds.
            http_client: Pre-built client to use instead of creating one
                (tests pass one backed by httpx.MockTransport).
        """
        self.limiter = limiter
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._client = http_client

    @property
    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self.headers,
            )
        return self._client

    async def _request(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """
        Make one rate-limited GET request and return the decoded JSON body.

        Raises:
            UpstreamError: Scryfall returned a non-2xx status.
            ScryfallRequestError: Transport failure or an undecodable body.
        """
        await self.limiter.acquire()
        client = await self._get_client()
        url = f"{self.base_url}{path}"

        try:
            response = await client.get(url, params=params, headers=self.headers)
        except httpx.TransportError as e:
            logger.error("Scryfall request failed", url=url, error=str(e))
            raise ScryfallRequestError(f"Scryfall request failed: {e}") from e

        if not response.is_success:
            body = response.text
            logger.warning(
                "Scryfall error",
                url=str(response.request.url),
                status=response.status_code,
                body=body[:500],
            )
            raise UpstreamError(response.status_code, body, url=str(response.request.url))

        try:
            return response.json()
        except ValueError as e:
            logger.error("Scryfall returned invalid JSON", url=url, error=str(e))
            raise ScryfallRequestError(f"Invalid JSON from Scryfall: {e}") from e

    async def search(self, q: str, page: int = 1) -> dict:
        """Full-text card search using Scryfall's query syntax."""
        return await self._request("/cards/search", params={"q": q, "page": page})

    async def named(self, exact: Optional[str] = None, fuzzy: Optional[str] = None) -> dict:
        """Look up a single card by exact or fuzzy name (exactly one of them)."""
        if bool(exact) == bool(fuzzy):
            raise ValueError("Provide exactly one of 'exact' or 'fuzzy'")
        params = {"exact": exact} if exact else {"fuzzy": fuzzy}
        return await self._request("/cards/named", params=params)

    async def by_id(self, card_id: str) -> dict:
        """Fetch a single card by Scryfall id."""
        return await self._request(f"/cards/{quote(card_id, safe='')}")

    async def prints(self, card_id: str) -> dict:
        """Fetch every printing of the card with the given id."""
        return await self._request(f"/cards/{quote(card_id, safe='')}/prints")

    async def aclose(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
