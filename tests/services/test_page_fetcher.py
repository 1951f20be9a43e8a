"""Page fetcher — never raises; failures become PageContent.failed."""

import httpx
import pytest

from arguably.infrastructure.page_fetcher import USER_AGENT, PageFetcher

from tests.services.fake_network import public_resolver, resolver_returning


def _fetcher(handler, max_chars=4000, resolver=public_resolver, max_bytes=1_000_000):
    return PageFetcher(
        timeout_seconds=1.0,
        max_chars=max_chars,
        transport=httpx.MockTransport(handler),
        resolver=resolver,
        max_bytes=max_bytes,
    )


def _never_called(request):
    raise AssertionError(f"unexpected request to {request.url}")


async def test_fetch_extracts_content_and_sends_user_agent():
    seen = {}

    def handler(request):
        seen["ua"] = request.headers["user-agent"]
        return httpx.Response(200, text="<title>Hello</title><p>Body text</p>")

    page = await _fetcher(handler).fetch("https://example.org")
    assert page.success
    assert page.title == "Hello"
    assert "Body text" in page.text
    assert seen["ua"] == USER_AGENT


async def test_http_error_status_is_failure():
    page = await _fetcher(lambda r: httpx.Response(403)).fetch("https://example.org")
    assert not page.success
    assert page.error == "HTTP 403"


async def test_timeout_is_failure():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    page = await _fetcher(handler).fetch("https://example.org")
    assert page.error == "timeout"


async def test_connection_error_is_failure():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    page = await _fetcher(handler).fetch("https://example.org")
    assert not page.success
    assert page.error == "refused"


async def test_text_truncated_to_max_chars():
    page = await _fetcher(
        lambda r: httpx.Response(200, text="<p>" + "z" * 100 + "</p>"), max_chars=20,
    ).fetch("https://example.org")
    assert page.text == "z" * 20 + "..."


@pytest.mark.parametrize("url", [
    "http://169.254.169.254/latest/meta-data/",
    "http://127.0.0.1:8000/admin",
    "http://10.0.0.7/",
    "http://[::1]/",
    "ftp://example.org/file",
])
async def test_non_public_targets_are_never_requested(url):
    page = await _fetcher(_never_called).fetch(url)
    assert not page.success
    assert page.error.startswith("blocked")


async def test_hostname_resolving_to_private_address_is_blocked():
    resolver = resolver_returning("192.168.1.20")
    page = await _fetcher(_never_called, resolver=resolver).fetch("https://intranet.example.org")
    assert page.error.startswith("blocked")
    assert resolver.seen == ["intranet.example.org"]


async def test_redirect_to_private_address_is_blocked():
    requested = []

    def handler(request):
        requested.append(str(request.url))
        return httpx.Response(302, headers={"location": "http://127.0.0.1/secret"})

    page = await _fetcher(handler).fetch("https://example.org/start")
    assert page.error.startswith("blocked")
    assert requested == ["https://example.org/start"]


async def test_public_redirect_is_followed():
    def handler(request):
        if request.url.path == "/old":
            return httpx.Response(301, headers={"location": "/new"})
        return httpx.Response(200, text="<title>Moved</title><p>here</p>")

    page = await _fetcher(handler).fetch("https://example.org/old")
    assert page.success
    assert page.title == "Moved"


async def test_redirect_loop_gives_up():
    page = await _fetcher(
        lambda r: httpx.Response(302, headers={"location": "/again"}),
    ).fetch("https://example.org/again")
    assert page.error == "too many redirects"


async def test_oversized_body_stops_reading_at_byte_cap():
    chunk = b"<p>" + b"a" * 65_533 + b"</p>"
    sent = []

    async def body():
        for _ in range(100):
            sent.append(len(chunk))
            yield chunk

    page = await _fetcher(
        lambda r: httpx.Response(200, content=body()), max_bytes=200_000,
    ).fetch("https://example.org/huge")
    assert page.success
    assert page.text.endswith("...")
    assert sum(sent) < 100 * len(chunk)
    assert sum(sent) <= 200_000 + 2 * len(chunk)
