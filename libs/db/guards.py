"""Translate database connectivity failures into StoreUnavailableError."""

import functools
from typing import Awaitable, Callable, TypeVar

from sqlalchemy.exc import InterfaceError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from libs.common.errors import StoreUnavailableError
from libs.common.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")

STORE_FAILURES = (OperationalError, InterfaceError, PoolTimeoutError)


def store_guard(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
    """Decorate an async data-access function.

    Only connectivity-class errors are converted; constraint violations and
    the service's own typed errors pass through untouched. No retry here,
    that is the caller's call.
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except STORE_FAILURES as exc:
            logger.error("Store unavailable in %s: %s", func.__qualname__, exc)
            raise StoreUnavailableError("The catalog store is unavailable") from exc

    return wrapper
