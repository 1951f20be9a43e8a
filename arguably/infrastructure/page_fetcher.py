"""Source Page Fetcher — downloads a cited URL so the rater can read it.

Invariants:
    - Never raises: every network or HTTP failure becomes PageContent.failed(reason)
    - Bounded by a total timeout (page_fetch_timeout_seconds)
    - Only http(s) URLs whose host resolves to public addresses are requested,
      checked again on every redirect hop (at most MAX_REDIRECTS)
    - At most max_bytes of the body are read; the rest is never downloaded
    - Extraction delegated to core/page_content.py (pure)

Design Decisions:
    - Redirects followed by hand so each Location is vetted before it is requested
    - Resolver injectable so tests run against MockTransport without DNS
"""

import asyncio
import ipaddress
import logging
import socket
from collections.abc import Awaitable, Callable

import httpx

from arguably.core.page_content import PageContent, extract_page_content

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; SourceRatingBot/1.0)"
_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"
MAX_REDIRECTS = 5
DEFAULT_MAX_BYTES = 1_000_000

Resolver = Callable[[str, int], Awaitable[list[str]]]


class BlockedURLError(Exception):
    """URL points at a scheme or host the fetcher must not contact."""


async def resolve_host(host: str, port: int) -> list[str]:
    loop = asyncio.get_running_loop()
    infos = await loop.getaddrinfo(host, port, type=socket.SOCK_STREAM)
    return [info[4][0] for info in infos]


class PageFetcher:
    """Fetches pages over HTTP. Transport and resolver can be injected for tests."""

    def __init__(
        self,
        timeout_seconds: float = 10.0,
        max_chars: int = 4000,
        transport: httpx.AsyncBaseTransport | None = None,
        resolver: Resolver = resolve_host,
        max_bytes: int = DEFAULT_MAX_BYTES,
    ):
        self.timeout_seconds = timeout_seconds
        self.max_chars = max_chars
        self.max_bytes = max_bytes
        self._transport = transport
        self._resolver = resolver

    async def fetch(self, url: str) -> PageContent:
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds,
                follow_redirects=False,
                headers={"User-Agent": USER_AGENT, "Accept": _ACCEPT},
                transport=self._transport,
            ) as client:
                return await self._fetch_following_redirects(client, httpx.URL(url))
        except BlockedURLError as e:
            logger.warning(f"Page fetch blocked: {url}: {e}")
            return PageContent.failed(f"blocked: {e}")
        except httpx.TimeoutException:
            logger.warning(f"Page fetch timed out: {url}")
            return PageContent.failed("timeout")
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning(f"Page fetch failed: {url}: {e}")
            return PageContent.failed(str(e) or type(e).__name__)

    async def _fetch_following_redirects(
        self, client: httpx.AsyncClient, url: httpx.URL,
    ) -> PageContent:
        for _ in range(MAX_REDIRECTS + 1):
            await self._ensure_public(url)
            async with client.stream("GET", url) as response:
                if response.is_redirect:
                    url = response.url.join(response.headers["location"])
                    continue
                if response.status_code >= 400:
                    return PageContent.failed(f"HTTP {response.status_code}")
                body = await self._read_capped(response)
                return extract_page_content(
                    body.decode(response.encoding or "utf-8", errors="replace"),
                    self.max_chars,
                )
        return PageContent.failed("too many redirects")

    async def _read_capped(self, response: httpx.Response) -> bytes:
        chunks: list[bytes] = []
        size = 0
        async for chunk in response.aiter_bytes():
            chunks.append(chunk)
            size += len(chunk)
            if size >= self.max_bytes:
                logger.info(
                    f"Page body capped at {self.max_bytes} bytes: {response.url}",
                )
                break
        return b"".join(chunks)[: self.max_bytes]

    async def _ensure_public(self, url: httpx.URL) -> None:
        if url.scheme not in ("http", "https"):
            raise BlockedURLError(f"scheme {url.scheme!r} not allowed")
        host = url.host
        if not host:
            raise BlockedURLError("missing host")
        try:
            addresses = [str(ipaddress.ip_address(host))]
        except ValueError:
            try:
                addresses = await self._resolver(host, url.port or 443)
            except OSError as e:
                raise BlockedURLError(f"cannot resolve {host}: {e}") from e
        if not addresses:
            raise BlockedURLError(f"cannot resolve {host}")
        for address in addresses:
            if not ipaddress.ip_address(address.split("%", 1)[0]).is_global:
                raise BlockedURLError(f"{host} resolves to non-public address {address}")
