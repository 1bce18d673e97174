"""
HTTP GET behind a shared rate limiter.
"""
import asyncio
from typing import Optional

import aiohttp
from aiohttp import ClientTimeout

from .constants import REQUEST_TIMEOUT
from .errors import NetworkError
from .limiter import RateLimiter


class RateLimitedFetcher:
    """
    Fetch response bodies, waiting on `limiter` before every request.

    Any non-2xx status is a hard failure: the body is not read and a
    `NetworkError` carrying the status is raised.

    Args:
        session (aiohttp.ClientSession): The active HTTP session.
        limiter (RateLimiter): Limiter shared by every fetch of the run.
        timeout (float): Per-request timeout in seconds.
    """

    def __init__(self, session: aiohttp.ClientSession, limiter: RateLimiter, timeout: float = REQUEST_TIMEOUT):
        self.session = session
        self.limiter = limiter
        self.timeout = timeout

    async def fetch(self, url: str, cancel: Optional[asyncio.Event] = None) -> bytes:
        """
        Wait for admission, GET `url` and return the body.

        Raises:
            CancellationError: `cancel` was set while waiting for admission.
            NetworkError: the request failed or returned a non-2xx status.
        """
        await self.limiter.wait(cancel)

        try:
            async with self.session.get(url, timeout=ClientTimeout(self.timeout)) as response:
                if not 200 <= response.status < 300:
                    raise NetworkError(f"HTTP {response.status} for {url}", status=response.status)
                return await response.read()

        except aiohttp.ClientError as error:
            raise NetworkError(f"request to {url} failed: {error}") from error
        except asyncio.TimeoutError as error:
            raise NetworkError(f"request to {url} timed out after {self.timeout}s") from error
