"""Exception handling utilities for best-effort analytics.

Collaborator calls that may fail are run through attempt(), which turns
their result into an explicit outcome:

- Ok(value) when the call returned normally
- Unavailable(reason, error) when it raised

Public engine operations collapse Unavailable to their documented default
with Outcome.value_or(). KeyboardInterrupt and SystemExit always propagate.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from groupstats.errors import GroupStatsError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful collaborator call."""

    value: T

    @property
    def is_available(self) -> bool:
        return True

    def value_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Unavailable:
    """Failed collaborator call.

    Attributes:
        reason: Short description of the operation that failed.
        error: The exception raised, None when the data source is simply absent.
    """

    reason: str
    error: BaseException | None = None

    @property
    def is_available(self) -> bool:
        return False

    def value_or(self, default: T) -> T:
        return default


Outcome = Ok[T] | Unavailable


def attempt(
    operation_name: str,
    func: Callable[..., T],
    *args: Any,
    log_level: int = logging.DEBUG,
    **kwargs: Any,
) -> Ok[T] | Unavailable:
    """Run func and capture its result or failure as an outcome.

    Errors from the groupstats hierarchy are expected unavailability and
    logged at log_level; anything else is logged at WARNING with traceback.

    Args:
        operation_name: Name of the operation for logging.
        func: Callable to run.
        *args: Positional arguments for func.
        log_level: Logging level for expected (GroupStatsError) failures.
        **kwargs: Keyword arguments for func.

    Returns:
        Ok wrapping the return value, or Unavailable wrapping the exception.

    Example:
        outcome = attempt("avatar lookup", roster.resolve_avatars, usernames)
        avatars = outcome.value_or({})
    """
    try:
        return Ok(func(*args, **kwargs))
    except (KeyboardInterrupt, SystemExit):
        raise
    except GroupStatsError as e:
        logger.log(log_level, "%s unavailable: %s", operation_name, e)
        return Unavailable(operation_name, e)
    except Exception as e:
        logger.warning("%s failed: %s", operation_name, e, exc_info=True)
        return Unavailable(operation_name, e)
