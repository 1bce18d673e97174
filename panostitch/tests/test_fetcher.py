import asyncio

import aiohttp
import pytest

from ..errors import CancellationError, NetworkError
from ..fetcher import RateLimitedFetcher
from ..limiter import RateLimiter
from .helpers import MockResponse, MockSession, RaisingResponse, dummy_image_bytes


URL = "https://cbk0.google.com/cbk?output=tile&panoid=fake&zoom=1&x=0&y=0"


@pytest.mark.asyncio
async def test_fetch_returns_body():
    body = dummy_image_bytes()
    session = MockSession(lambda url: MockResponse(200, body))
    fetcher = RateLimitedFetcher(session, RateLimiter(0.01))

    assert await fetcher.fetch(URL) == body
    assert session.calls == [URL]


@pytest.mark.parametrize("status", [204, 206])
@pytest.mark.asyncio
async def test_fetch_accepts_any_2xx(status):
    session = MockSession(lambda url: MockResponse(status, b"ok"))
    fetcher = RateLimitedFetcher(session, RateLimiter(0.01))

    assert await fetcher.fetch(URL) == b"ok"


@pytest.mark.parametrize("status", [301, 404, 500, 503])
@pytest.mark.asyncio
async def test_fetch_non_2xx_is_network_error(status):
    response = MockResponse(status, b"error page")
    session = MockSession(lambda url: response)
    fetcher = RateLimitedFetcher(session, RateLimiter(0.01))

    with pytest.raises(NetworkError) as excinfo:
        await fetcher.fetch(URL)

    assert excinfo.value.status == status
    assert not response.read_called


@pytest.mark.asyncio
async def test_fetch_wraps_transport_error():
    cause = aiohttp.ClientConnectionError("Network error")
    session = MockSession(lambda url: RaisingResponse(cause))
    fetcher = RateLimitedFetcher(session, RateLimiter(0.01))

    with pytest.raises(NetworkError) as excinfo:
        await fetcher.fetch(URL)

    assert excinfo.value.__cause__ is cause
    assert excinfo.value.status is None


@pytest.mark.asyncio
async def test_fetch_wraps_timeout():
    session = MockSession(lambda url: RaisingResponse(asyncio.TimeoutError()))
    fetcher = RateLimitedFetcher(session, RateLimiter(0.01), timeout=5)

    with pytest.raises(NetworkError, match="timed out"):
        await fetcher.fetch(URL)


@pytest.mark.asyncio
async def test_cancelled_wait_issues_no_request():
    session = MockSession(lambda url: MockResponse(200, b"x"))
    fetcher = RateLimitedFetcher(session, RateLimiter(10))
    await fetcher.fetch(URL)

    cancel = asyncio.Event()
    asyncio.get_running_loop().call_later(0.05, cancel.set)

    with pytest.raises(CancellationError):
        await fetcher.fetch(URL, cancel)
    assert len(session.calls) == 1


@pytest.mark.asyncio
async def test_fetches_share_the_limiter():
    session = MockSession(lambda url: MockResponse(200, b"x"))
    fetcher = RateLimitedFetcher(session, RateLimiter(0.05))
    loop = asyncio.get_running_loop()

    start = loop.time()
    for _ in range(4):
        await fetcher.fetch(URL)

    assert loop.time() - start >= 3 * 0.05 - 1e-6
