"""
Token bucket rate limiter for asyncio.

The bucket starts full with `burst` tokens and gains one token every
`interval` seconds, never holding more than `burst`. Each admitted request
spends one token. Waiting is done by suspending on the event loop, so the
wait can be aborted either by cancelling the awaiting task or by setting an
`asyncio.Event` passed as `cancel`.
"""
import asyncio
from typing import Optional

from .errors import CancellationError


class RateLimiter:
    """
    Admit at most one request per `interval` seconds, bursting up to `burst`.

    >>> limiter = RateLimiter(0.2)
    >>> await limiter.wait()   # first call is immediate
    >>> await limiter.wait()   # second call waits ~0.2s
    """

    def __init__(self, interval: float, burst: int = 1):
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        if burst < 1:
            raise ValueError(f"burst must be at least 1, got {burst}")

        self.interval = interval
        self.burst = burst
        self._tokens = float(burst)
        self._updated: Optional[float] = None

    def _refill(self, now: float) -> None:
        if self._updated is not None:
            elapsed = now - self._updated
            self._tokens = min(float(self.burst), self._tokens + elapsed / self.interval)
        self._updated = now

    def delay(self) -> float:
        """Seconds until a token is available (0 when one is available now)."""
        self._refill(asyncio.get_running_loop().time())
        if self._tokens >= 1:
            return 0.0
        return (1 - self._tokens) * self.interval

    async def wait(self, cancel: Optional[asyncio.Event] = None) -> None:
        """
        Block until the bucket admits one request, then spend its token.

        Args:
            cancel (asyncio.Event | None): When set while waiting, the wait is
                abandoned and no token is spent.

        Raises:
            CancellationError: `cancel` was set before admission.
        """
        while True:
            if cancel is not None and cancel.is_set():
                raise CancellationError("rate limiter wait cancelled")

            delay = self.delay()
            if delay == 0:
                self._tokens -= 1
                return

            if cancel is None:
                await asyncio.sleep(delay)
                continue

            try:
                await asyncio.wait_for(cancel.wait(), timeout=delay)
            except asyncio.TimeoutError:
                continue
