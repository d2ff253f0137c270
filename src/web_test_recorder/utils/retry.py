"""
Retry utilities with linear backoff.
"""

import asyncio
import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Tuple, Type, TypeVar
import logging

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetryConfig:
    """
    Configuration for retry behavior.

    The wait after failed attempt ``n`` is ``n * delay_step_ms``. Nothing is
    waited after the final attempt.

    Attributes:
        max_attempts: Maximum number of attempts
        delay_step_ms: Backoff increment per attempt
        retry_on: Exception types to retry on
        on_retry: Callback function called on each retry
        sleep: Coroutine used to wait between attempts
    """
    max_attempts: int = 2
    delay_step_ms: int = 1000
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    on_retry: Optional[Callable[[int, BaseException], None]] = None
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep

    def delay_for(self, attempt: int) -> int:
        """Backoff in ms after the given 1-based attempt."""
        return attempt * self.delay_step_ms


def retry(
    max_attempts: int = 2,
    delay_step_ms: int = 1000,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Wrap a coroutine function in retry_async with a fixed RetryConfig.

    Example:
        >>> @retry(max_attempts=3, retry_on=(TimeoutError,))
        ... async def fetch_data():
        ...     ...
    """
    config = RetryConfig(
        max_attempts=max_attempts,
        delay_step_ms=delay_step_ms,
        retry_on=retry_on,
    )

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return await retry_async(func, config, *args, **kwargs)
        return wrapper

    return decorator


async def retry_async(
    func: Callable[..., Awaitable[T]],
    config: RetryConfig,
    *args: Any,
    **kwargs: Any,
) -> T:
    """
    Await ``func(*args, **kwargs)`` up to ``config.max_attempts`` times.

    Exceptions outside ``config.retry_on`` propagate immediately. When every
    attempt fails, the exception from the final attempt is raised.
    """
    attempt = 1
    while True:
        try:
            return await func(*args, **kwargs)
        except config.retry_on as e:
            if attempt >= config.max_attempts:
                raise

            delay_ms = config.delay_for(attempt)
            logger.warning(
                f"Attempt {attempt}/{config.max_attempts} failed: {e}. "
                f"Retrying in {delay_ms}ms..."
            )
            if config.on_retry:
                config.on_retry(attempt, e)
            await config.sleep(delay_ms / 1000)
            attempt += 1
