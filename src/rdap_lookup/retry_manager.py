"""
Retry Manager for the RDAP lookup client.

This module wraps an arbitrary async operation with bounded retries and
exponential backoff. Every failure counts as retryable; when the budget is
exhausted the error from the final attempt is re-raised unchanged.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

from .audit_logger import AuditLogger
from .config import ClientConfig

T = TypeVar("T")

COMPONENT = "retry"


class RetryManager:
    """
    Manages retry logic with exponential backoff.

    The same manager drives the bootstrap refresh and the RDAP query; callers
    only vary the operation and, optionally, the retry budget.
    """

    def __init__(
        self,
        config: ClientConfig,
        logger: Optional[AuditLogger] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the retry manager.

        Args:
            config: Client configuration providing max_retries and retry_delay_seconds
            logger: Optional sink receiving one entry per failed attempt
            sleep: Coroutine used to wait between attempts
        """
        self._config = config
        self._logger = logger
        self._sleep = sleep

    @property
    def max_retries(self) -> int:
        return self._config.max_retries

    def _calculate_delay(self, attempt: int) -> float:
        """
        Calculate wait time with exponential backoff.

        Args:
            attempt: The failed attempt index (0-indexed)

        Returns:
            base_delay * 2^attempt, in seconds
        """
        return self._config.retry_delay_seconds * (2 ** attempt)

    async def execute_with_retry(
        self,
        operation: Callable[[], Awaitable[T]],
        max_retries: Optional[int] = None,
    ) -> T:
        """
        Execute an operation with retry logic and exponential backoff.

        Args:
            operation: The async operation to execute
            max_retries: Retry budget; defaults to the configured max_retries

        Returns:
            The result of the first successful attempt

        Raises:
            Exception: The error raised by the final attempt
        """
        retries = self._config.max_retries if max_retries is None else max_retries
        if retries < 0:
            raise ValueError(f"max_retries must not be negative: {retries}")

        # Total attempts = 1 initial + retries
        max_attempts = retries + 1

        for attempt in range(max_attempts):
            try:
                return await operation()
            except Exception as e:
                if self._logger:
                    self._logger.log_error(
                        COMPONENT,
                        f"Attempt {attempt + 1} failed",
                        error=e,
                        additional_data={
                            "attempt": attempt + 1,
                            "max_attempts": max_attempts,
                        },
                    )

                if attempt + 1 >= max_attempts:
                    raise

                delay = self._calculate_delay(attempt)
                if self._logger:
                    self._logger.info(
                        COMPONENT,
                        f"Retrying in {delay * 1000:.0f}ms",
                        {"attempt": attempt + 1, "delay_seconds": delay},
                    )
                await self._sleep(delay)

        # Unreachable: the loop either returns or re-raises
        raise RuntimeError("retry loop exited without a result")
