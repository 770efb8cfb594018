"""Two-variant result type returned across every public boundary.

Expected failures (not found, invalid input, illegal transitions, backend
errors) are values, not exceptions. Callers branch with ``isinstance``.
"""

import decimal
import functools
import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union

from donations.domain.errors import DomainError, ErrorCode

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Success(Generic[T]):
    """Operation completed; ``data`` holds its value (``None`` for unit)."""

    data: T


@dataclass(frozen=True)
class Failure:
    """Operation failed with a user-presentable message."""

    message: str
    code: ErrorCode | None = None
    field_errors: Mapping[str, str] = field(default_factory=dict)


Result = Union[Success[T], Failure]


def failure_from(error: DomainError) -> Failure:
    return Failure(message=error.message, code=error.code)


def map_success(result: "Result[Any]", func: Callable[[Any], Any]) -> "Result[Any]":
    """Apply ``func`` to the data of a Success; pass a Failure through."""
    if isinstance(result, Failure):
        return result
    return Success(func(result.data))


def as_result(
    fallback: str,
    catch: tuple[type[BaseException], ...] = (Exception,),
) -> Callable[[Callable[..., Awaitable[Any]]], Callable[..., Awaitable[Any]]]:
    """Convert exceptions raised by an async callable into ``Failure``.

    Domain errors keep their code and message. Exceptions listed in
    ``catch`` become a backend failure carrying the exception's own message,
    or ``fallback`` when it has none. Decimal signals only stringify to their
    class list, so they always use ``fallback``. Anything else propagates.
    """

    def decorator(func: Callable[..., Awaitable[Any]]) -> Callable[..., Awaitable[Any]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return await func(*args, **kwargs)
            except DomainError as exc:
                return failure_from(exc)
            except catch as exc:
                logger.exception("%s failed", func.__qualname__)
                message = "" if isinstance(exc, decimal.DecimalException) else str(exc)
                return Failure(
                    message=message or fallback,
                    code=ErrorCode.BACKEND_ERROR,
                )

        return wrapper

    return decorator
