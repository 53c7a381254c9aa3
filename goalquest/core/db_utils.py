"""
Database utilities for connection management and error handling
"""
import asyncio
import functools
import logging
from typing import Callable, Any, TypeVar, cast, Awaitable

from sqlalchemy.exc import InterfaceError, OperationalError

logger = logging.getLogger(__name__)

# Define a type variable for the return type of the decorated function
T = TypeVar('T')

# Errors raised when the connection itself is unusable; anything else is a real failure
RETRYABLE_ERRORS = (OperationalError, InterfaceError, ConnectionError)

def with_db_retry(
    max_retries: int = 3,
    retry_delay: float = 0.5
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorator that retries database reads on connection errors.

    Args:
        max_retries: Maximum number of retries before giving up
        retry_delay: Base delay between retries in seconds (doubled on each attempt)

    Returns:
        Decorated function with retry logic
    """
    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            attempt = 0
            while True:
                try:
                    return await func(*args, **kwargs)
                except RETRYABLE_ERRORS as e:
                    attempt += 1
                    if attempt > max_retries:
                        logger.error(
                            f"{func.__name__} failed after {max_retries} retries: {e}"
                        )
                        raise
                    delay = retry_delay * (2 ** (attempt - 1))  # Exponential backoff
                    logger.warning(
                        f"Database connection error in {func.__name__}: {str(e)}. "
                        f"Retrying in {delay:.2f}s... (Attempt {attempt}/{max_retries})"
                    )
                    await asyncio.sleep(delay)

        return cast(Callable[..., Awaitable[T]], wrapper)

    return decorator
