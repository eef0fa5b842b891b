"""
Remote feed client for the city data portal.

One GET per call, no retries: a transport failure is fatal to the dataset
run that issued it.
"""

import httpx
from typing import Optional
from core.config import settings
from core.exceptions import TransportError
import logging

logger = logging.getLogger(__name__)


class FeedClient:
    """
    Fetch raw JSON payloads from SODA endpoints.

    Attributes:
        max_idle_connections: Keep-alive connection cap (default: 10)
        idle_timeout: Seconds an idle keep-alive connection is kept
        connect_timeout: Seconds allowed for TCP connect and TLS handshake
        response_timeout: Seconds allowed to wait for response data
    """

    def __init__(
        self,
        max_idle_connections: Optional[int] = None,
        idle_timeout: Optional[float] = None,
        connect_timeout: Optional[float] = None,
        response_timeout: Optional[float] = None
    ):
        self.max_idle_connections = max_idle_connections if max_idle_connections is not None else settings.FEED_MAX_IDLE_CONNECTIONS
        self.idle_timeout = idle_timeout if idle_timeout is not None else settings.FEED_IDLE_TIMEOUT
        self.connect_timeout = connect_timeout if connect_timeout is not None else settings.FEED_CONNECT_TIMEOUT
        self.response_timeout = response_timeout if response_timeout is not None else settings.FEED_RESPONSE_TIMEOUT

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(
                self.response_timeout,
                connect=self.connect_timeout,
                pool=self.connect_timeout
            ),
            limits=httpx.Limits(
                max_keepalive_connections=self.max_idle_connections,
                keepalive_expiry=self.idle_timeout
            ),
            # Feeds are compact JSON; ask for an uncompressed body
            headers={"Accept-Encoding": "identity"}
        )

    async def fetch(self, url: str, limit: int) -> bytes:
        """
        Fetch up to `limit` records from a feed.

        Returns:
            The raw response body

        Raises:
            TransportError: Connection/timeout failure or non-2xx status
        """
        params = {"$limit": limit}

        try:
            async with self._client() as client:
                response = await client.get(url, params=params)
        except httpx.HTTPError as e:
            raise TransportError(
                f"Failed to fetch feed {url}",
                context={"feed_url": url, "limit": limit},
                original_exception=e
            )

        if response.status_code < 200 or response.status_code >= 300:
            raise TransportError(
                f"Feed returned HTTP {response.status_code}",
                context={
                    "feed_url": url,
                    "status_code": response.status_code,
                    "response_body": response.text[:500]
                }
            )

        logger.info(f"Received {len(response.content)} bytes from {url}")
        return response.content
