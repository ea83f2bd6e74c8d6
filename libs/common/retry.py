"""Retry handler with fixed or exponential backoff.

Used for readiness gates such as waiting for the search engine at startup.
Request-path engine calls are never retried.
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional

import structlog

logger = structlog.get_logger("retry_handler")


class RetryConfig:
    """Configuration for retry behavior.

    ``max_attempts=None`` retries until the operation succeeds.
    """

    def __init__(
        self,
        max_attempts: Optional[int] = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        retryable_exceptions: tuple = (Exception,)
    ):
        if max_attempts is not None and max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.retryable_exceptions = retryable_exceptions

    @classmethod
    def fixed_interval(
        cls,
        interval: float,
        retryable_exceptions: tuple = (Exception,)
    ) -> "RetryConfig":
        """Unbounded attempts separated by a constant delay."""
        return cls(
            max_attempts=None,
            base_delay=interval,
            max_delay=interval,
            exponential_base=1.0,
            jitter=False,
            retryable_exceptions=retryable_exceptions,
        )


class RetryHandler:
    """Handles retry logic with backoff."""

    def __init__(
        self,
        config: RetryConfig,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    ):
        self.config = config
        self._sleep = sleep

    async def execute_with_retry(
        self,
        func: Callable[..., Awaitable[Any]],
        *args,
        operation_name: str = "unknown",
        **kwargs
    ) -> Any:
        """Await ``func(*args, **kwargs)`` until it succeeds or attempts run out."""
        attempt = 0
        while True:
            attempt += 1
            try:
                result = await func(*args, **kwargs)
            except self.config.retryable_exceptions as e:
                if self.config.max_attempts is not None and attempt >= self.config.max_attempts:
                    logger.error(
                        "Operation failed after all retries",
                        operation=operation_name,
                        attempts=attempt,
                        error=str(e)
                    )
                    raise

                delay = self._calculate_delay(attempt - 1)
                logger.warning(
                    "Operation failed, retrying",
                    operation=operation_name,
                    attempt=attempt,
                    total_attempts=self.config.max_attempts,
                    delay_seconds=delay,
                    error=str(e)
                )
                await self._sleep(delay)
                continue

            if attempt > 1:
                logger.info(
                    "Operation succeeded after retry",
                    operation=operation_name,
                    attempt=attempt
                )
            return result

    def _calculate_delay(self, attempt: int) -> float:
        """Calculate delay for the given zero-based attempt."""
        delay = self.config.base_delay * (self.config.exponential_base ** attempt)
        delay = min(delay, self.config.max_delay)

        if self.config.jitter:
            jitter_range = delay * 0.1
            delay += random.uniform(-jitter_range, jitter_range)

        return max(delay, 0.0)
