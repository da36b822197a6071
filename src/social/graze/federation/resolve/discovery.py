"""Federation handle discovery.

Resolves a handle (``user@pod``) to a verified :class:`Person` by chaining the
pod's host-meta, the account's WebFinger document and its hCard profile page.
"""

import asyncio
from dataclasses import dataclass
import logging
from typing import Any, Callable, Dict, Optional, TypeVar

import sentry_sdk

from social.graze.federation.app.config import Settings, get_settings
from social.graze.federation.model.person import Person, Profile
from social.graze.federation.resolve.documents import (
    DocumentError,
    HCard,
    HostMeta,
    WebFinger,
)
from social.graze.federation.resolve.fetcher import FetchError, Fetcher, FetchResponse
from social.graze.federation.resolve.handle import (
    clean_handle,
    host_meta_url,
    webfinger_url,
)

logger = logging.getLogger(__name__)

D = TypeVar("D")


class DiscoveryError(Exception):
    """Discovery of a handle failed; no partial result is available.

    The failing URL (if any) and the handle are kept for diagnostics, and the
    underlying failure is chained as ``__cause__``. Handle mismatches also
    carry the expected and actual handles.
    """

    def __init__(
        self,
        message: str,
        handle: str,
        url: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.handle = handle
        self.url = url
        self.expected = expected
        self.actual = actual


@dataclass
class DiscoverySession:
    """State of a single resolution.

    ``ssl`` only governs the host-meta request and may be switched off once.
    The parsed WebFinger and hCard documents are cached for the session.
    """

    handle: str
    ssl: bool = True
    webfinger: Optional[WebFinger] = None
    hcard: Optional[HCard] = None

    def downgrade(self) -> bool:
        """Switch host-meta to plain HTTP.

        Returns:
            True if the session was downgraded, False if it already was
        """
        if not self.ssl:
            return False
        self.ssl = False
        return True


class Discovery:
    """Fetch and verify all discovery documents of one handle.

    Concurrent reads of the same document share a single request.
    """

    def __init__(
        self, fetcher: Fetcher, account: str, settings: Optional[Settings] = None
    ) -> None:
        self.fetcher = fetcher
        self.settings = settings or get_settings()
        self.session = DiscoverySession(handle=clean_handle(account))
        self._webfinger_lock = asyncio.Lock()
        self._hcard_lock = asyncio.Lock()

    @property
    def handle(self) -> str:
        return self.session.handle

    async def fetch(self) -> Person:
        """Resolve the handle to a verified Person.

        Returns:
            Person with its embedded Profile

        Raises:
            DiscoveryError: If any document cannot be fetched or parsed, or the
                WebFinger document names a different account
        """
        logger.info("Fetch data for %s", self.handle)
        try:
            webfinger = await self.webfinger()

            actual = clean_handle(webfinger.acct_uri)
            if actual != self.handle:
                raise DiscoveryError(
                    f"Handle does not match: Wanted {self.handle} but got {actual}",
                    handle=self.handle,
                    expected=self.handle,
                    actual=actual,
                )

            hcard = await self.hcard()
        except DiscoveryError as e:
            sentry_sdk.capture_exception(e)
            raise

        return Person(self._person_data(webfinger, hcard))

    async def webfinger(self) -> WebFinger:
        async with self._webfinger_lock:
            if self.session.webfinger is None:
                url = await self._webfinger_url_from_host_meta()
                response = await self._get(lambda: url)
                self.session.webfinger = self._parse(WebFinger.from_xml, response)
            return self.session.webfinger

    async def hcard(self) -> HCard:
        async with self._hcard_lock:
            if self.session.hcard is None:
                webfinger = await self.webfinger()
                response = await self._get(lambda: webfinger.hcard_url)
                self.session.hcard = self._parse(HCard.from_html, response)
            return self.session.hcard

    async def _webfinger_url_from_host_meta(self) -> str:
        # host-meta is tried over https first, then once over http
        response = await self._get(
            lambda: host_meta_url(self.handle, self.session.ssl), http_fallback=True
        )
        host_meta = self._parse(HostMeta.from_xml, response)
        return webfinger_url(
            host_meta.webfinger_template_url,
            self.handle,
            acct_prefix=self.settings.legacy_acct_prefix,
        )

    async def _get(
        self, url_for: Callable[[], str], http_fallback: bool = False
    ) -> FetchResponse:
        """Fetch a document, downgrading host-meta to http once on failure.

        The URL is rebuilt on every attempt so a downgrade takes effect.
        """
        while True:
            url = url_for()
            logger.info("Fetching %s for %s", url, self.handle)
            try:
                response = await self.fetcher.get(url)
                if not response.success:
                    raise FetchError(url, response.status)
                return response
            except Exception as e:
                if (
                    http_fallback
                    and self.settings.http_fallback
                    and self.session.downgrade()
                ):
                    logger.warning(
                        "Retry with http: %s for %s: %s: %s",
                        url,
                        self.handle,
                        type(e).__name__,
                        e,
                    )
                    continue
                raise DiscoveryError(
                    f"Failed to fetch {url} for {self.handle}: {type(e).__name__}: {e}",
                    handle=self.handle,
                    url=url,
                ) from e

    def _parse(self, parser: Callable[[str], D], response: FetchResponse) -> D:
        try:
            return parser(response.body)
        except DocumentError as e:
            raise DiscoveryError(
                f"Failed to parse {response.url} for {self.handle}: {e}",
                handle=self.handle,
                url=response.url,
            ) from e

    def _person_data(self, webfinger: WebFinger, hcard: HCard) -> Dict[str, Any]:
        return {
            "guid": hcard.guid or webfinger.guid,
            "diaspora_handle": self.handle,
            "url": webfinger.seed_url,
            "public_key": hcard.public_key or webfinger.public_key,
            "profile": Profile(self._profile_data(hcard)),
        }

    def _profile_data(self, hcard: HCard) -> Dict[str, Any]:
        return {
            "diaspora_handle": self.handle,
            "first_name": hcard.first_name,
            "last_name": hcard.last_name,
            "image_url": hcard.photo_large_url,
            "image_url_medium": hcard.photo_medium_url,
            "image_url_small": hcard.photo_small_url,
            "searchable": hcard.searchable,
        }


async def discover(
    fetcher: Fetcher, account: str, settings: Optional[Settings] = None
) -> Person:
    """Resolve ``account`` to a verified Person using a fresh discovery session."""
    return await Discovery(fetcher, account, settings).fetch()
