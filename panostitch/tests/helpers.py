"""
Shared helpers for the panostitch tests.
"""
from io import BytesIO

from PIL import Image

from ..errors import NetworkError


def dummy_image_bytes(size=(8, 8), color=(255, 0, 0), format="PNG"):
    """
    Generate encoded image bytes for testing.

    PNG is the default so solid colours survive decoding unchanged.
    """
    buf = BytesIO()
    Image.new("RGB", size, color).save(buf, format=format)
    return buf.getvalue()


def dummy_image(size=(8, 8), color=(255, 0, 0)):
    """Return a solid PIL Image."""
    return Image.new("RGB", size, color)


class FakeFetcher:
    """
    Stand-in for RateLimitedFetcher.

    Returns `body(url)` for each URL and records every URL requested. URLs in
    `fail_on` raise NetworkError instead.
    """

    def __init__(self, body=None, fail_on=()):
        self.body = body or (lambda url: dummy_image_bytes())
        self.fail_on = set(fail_on)
        self.calls = []

    async def fetch(self, url, cancel=None):
        self.calls.append(url)
        if url in self.fail_on:
            raise NetworkError(f"HTTP 500 for {url}", status=500)
        return self.body(url)


class MockResponse:
    def __init__(self, status=200, body=b""):
        self.status = status
        self.body = body
        self.read_called = False

    async def read(self):
        self.read_called = True
        return self.body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


class RaisingResponse:
    def __init__(self, error):
        self.error = error

    async def __aenter__(self):
        raise self.error

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        pass


class MockSession:
    """Minimal aiohttp.ClientSession replacement: `get` returns `responder(url)`."""

    def __init__(self, responder):
        self.responder = responder
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append(url)
        return self.responder(url)
