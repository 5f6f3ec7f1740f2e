"""Token-bucket rate limiting with adaptive tuning from server headers.

The Client keeps two independent limiters: one for reads (GET) and one for
writes (every other verb). After each successful response the limiter that
admitted the request is re-sized from the server's advertised budget:

    X-RateLimit-Replenish-Rate: tokens granted per replenish window
    X-RateLimit-Replenish-Time: window length in seconds
    X-RateLimit-Remaining:      tokens left in the current window

Each limiter owns one aiolimiter.AsyncLimiter, resized in place on every
retune. Waiting on it suspends only the calling task, and cancelling that
task interrupts the wait.
"""
import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from aiolimiter import AsyncLimiter

logger = logging.getLogger(__name__)

# Reads refill faster and burst higher than writes
READ_INTERVAL = 0.1
READ_BURST = 20
WRITE_INTERVAL = 1.0
WRITE_BURST = 5

REPLENISH_RATE_HEADER = "X-RateLimit-Replenish-Rate"
REPLENISH_TIME_HEADER = "X-RateLimit-Replenish-Time"
REMAINING_HEADER = "X-RateLimit-Remaining"


@dataclass(frozen=True)
class RateLimitInfo:
    """Rate limit budget advertised by the CloudConnexa API.

    Attributes:
        replenish_rate: Tokens granted per replenish window
        replenish_time: Length of the replenish window in seconds
        remaining: Tokens left in the current window
    """
    replenish_rate: int
    replenish_time: int
    remaining: int

    @property
    def interval(self) -> float:
        """Seconds between successive token grants."""
        return self.replenish_time / self.replenish_rate

    @property
    def burst(self) -> int:
        """Bucket capacity, floored at 1 so the limiter can always admit."""
        return max(self.remaining, 1)

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> Optional["RateLimitInfo"]:
        """Parse the three rate limit headers.

        Returns None when any header is missing, is not an integer, or
        describes a non-positive window.
        """
        try:
            rate = int(headers[REPLENISH_RATE_HEADER])
            period = int(headers[REPLENISH_TIME_HEADER])
            remaining = int(headers[REMAINING_HEADER])
        except (KeyError, TypeError, ValueError):
            return None

        if rate <= 0 or period <= 0:
            return None

        return cls(replenish_rate=rate, replenish_time=period, remaining=remaining)


class RateLimiter:
    """Reconfigurable token bucket shared by every caller of one request class.

    One AsyncLimiter lives for the lifetime of the RateLimiter. Retuning
    changes its refill rate and capacity in place, so the bucket keeps the
    tokens already spent and a server-advertised budget of zero stays zero.

    Attributes:
        name: Label used in log messages ("read" or "write")
    """

    def __init__(self, interval: float, burst: int, name: str = "limiter"):
        _check_bucket(interval, burst)
        self.name = name
        self._interval = float(interval)
        self._burst = int(burst)
        self._limiter = AsyncLimiter(max_rate=self._burst, time_period=self._burst * self._interval)

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def burst(self) -> int:
        return self._burst

    @property
    def rate(self) -> float:
        """Sustained tokens per second."""
        return 1.0 / self._interval

    def configure(self, interval: float, burst: int, remaining: Optional[int] = None) -> None:
        """Change the refill interval and capacity of the bucket in place.

        The current fill level carries over, clamped to the new capacity.
        When ``remaining`` is given, no more than that many tokens are left
        available afterwards.
        Tasks already waiting are rescheduled against the new refill rate.
        No await happens here, so other tasks on the event loop observe the
        old configuration or the new one, never a mix.
        """
        _check_bucket(interval, burst)
        self._interval = float(interval)
        self._burst = int(burst)

        limiter = self._limiter
        if limiter._level:
            # Drain what the old rate has refilled up to now
            limiter.has_capacity()
        limiter.max_rate = self._burst
        limiter.time_period = self._burst * self._interval
        limiter._rate_per_sec = 1.0 / self._interval
        level = min(limiter._level, float(self._burst))
        if remaining is not None:
            level = max(level, float(self._burst - max(remaining, 0)))
        limiter._level = level
        if limiter._waiters:
            limiter._wake_next()

    async def acquire(self) -> None:
        """Wait until the bucket admits one request.

        There is no timeout; wrap the call in ``asyncio.wait_for()`` or cancel
        the task to bound the wait. CancelledError propagates unchanged.
        """
        if not self._limiter.has_capacity():
            logger.debug(f"{self.name} limiter exhausted, waiting for a token")
        await self._limiter.acquire()

    def update_from_headers(self, headers: Mapping[str, str]) -> Optional[RateLimitInfo]:
        """Retune the bucket from response headers, if all three are present.

        Returns:
            The parsed budget, or None if the limiter was left unchanged
        """
        info = RateLimitInfo.from_headers(headers)
        if info is None:
            return None

        self.configure(info.interval, info.burst, info.remaining)
        logger.debug(
            f"{self.name} limiter tuned: interval={info.interval:.3f}s, "
            f"burst={info.burst} (remaining={info.remaining})"
        )
        return info

    def __repr__(self) -> str:
        return f"RateLimiter(name={self.name!r}, interval={self._interval}, burst={self._burst})"


def _check_bucket(interval: float, burst: int) -> None:
    if interval <= 0:
        raise ValueError(f"interval must be positive, got {interval}")
    if burst < 1:
        raise ValueError(f"burst must be at least 1, got {burst}")


def default_read_limiter() -> RateLimiter:
    return RateLimiter(READ_INTERVAL, READ_BURST, name="read")


def default_write_limiter() -> RateLimiter:
    return RateLimiter(WRITE_INTERVAL, WRITE_BURST, name="write")
