"""HTTP plumbing shared by the pool data providers."""

from typing import Any

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = structlog.get_logger(__name__)

DEFAULT_USER_AGENT = "slippage-sentinel/0.1 (+https://daydreams.systems)"


class HttpPoolSource:
    """Base class for providers backed by a JSON-over-HTTP API."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        session: httpx.AsyncClient | None = None,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float | None = 30.0,
        max_attempts: int = 2,
    ) -> None:
        """Initialize HTTP pool source.

        Args:
            base_url: Provider API base URL
            session: Optional httpx client session
            user_agent: User-Agent header sent with every request
            timeout: Per-request timeout in seconds, None to disable
            max_attempts: Attempts per request on network errors
        """
        self.base_url = base_url.rstrip("/")
        self._owned_session: httpx.AsyncClient | None = None
        if session is None:
            session = self._owned_session = httpx.AsyncClient()
        self.session = session
        self.user_agent = user_agent
        self.timeout = timeout
        self.max_attempts = max_attempts

    async def aclose(self) -> None:
        """Close the HTTP session if this source created it."""
        if self._owned_session is not None:
            await self._owned_session.aclose()
            self._owned_session = None

    def _retrying(self) -> AsyncRetrying:
        """Build a fresh retry controller for one request."""
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=0.5, min=0.5, max=5),
            retry=retry_if_exception_type((httpx.NetworkError, httpx.TimeoutException)),
            reraise=True,
        )

    async def _get_json(self, endpoint: str) -> Any | None:
        """GET an endpoint and decode the JSON body.

        Args:
            endpoint: API endpoint path relative to the base URL

        Returns:
            Decoded JSON body, or None on a non-2xx status or transport error
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {"user-agent": self.user_agent}

        try:
            async for attempt in self._retrying():
                with attempt:
                    response = await self.session.get(
                        url, headers=headers, timeout=self.timeout
                    )
        except httpx.HTTPError as e:
            logger.warning(
                "Pool provider request failed",
                provider=self.name,
                endpoint=endpoint,
                error=str(e),
            )
            return None

        if not response.is_success:
            logger.warning(
                "Pool provider returned error status",
                provider=self.name,
                endpoint=endpoint,
                status_code=response.status_code,
            )
            return None

        return response.json()
