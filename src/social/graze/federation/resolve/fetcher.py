"""HTTP transport used by discovery.

Discovery only depends on the :class:`Fetcher` protocol; :class:`HttpFetcher`
is the aiohttp implementation used outside of tests.
"""

from dataclasses import dataclass
import logging
from typing import Optional, Protocol

from aiohttp import ClientSession, ClientTimeout, hdrs

from social.graze.federation.app.config import Settings, get_settings

logger = logging.getLogger(__name__)

DISCOVERY_ACCEPT = (
    "application/xrd+xml, application/xml;q=0.9, text/html;q=0.8, */*;q=0.5"
)


@dataclass
class FetchResponse:
    url: str
    status: int
    body: str

    @property
    def success(self) -> bool:
        return 200 <= self.status < 300


class FetchError(Exception):
    """A document was fetched but the server answered with a non-success status."""

    def __init__(self, url: str, status: int) -> None:
        self.url = url
        self.status = status
        super().__init__(f"Failed to fetch {url}: {status}")


class Fetcher(Protocol):
    async def get(self, url: str) -> FetchResponse: ...


class HttpFetcher:
    """Fetch discovery documents with a shared aiohttp client session.

    Transport errors and timeouts are raised unchanged; the caller decides
    whether to retry.
    """

    def __init__(self, session: ClientSession, settings: Optional[Settings] = None):
        self._session = session
        self._settings = settings or get_settings()

    async def get(self, url: str) -> FetchResponse:
        headers = {
            hdrs.USER_AGENT: self._settings.user_agent,
            hdrs.ACCEPT: DISCOVERY_ACCEPT,
        }
        timeout = ClientTimeout(total=self._settings.fetch_timeout)
        async with self._session.get(url, headers=headers, timeout=timeout) as resp:
            body = await resp.text()
            logger.debug("GET %s: %s", url, resp.status)
            return FetchResponse(url=url, status=resp.status, body=body)
