"""Explicit result values for calls to unreliable third-party services."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, Sequence, TypeVar

from src.utils.logger import get_logger

log = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class FetchResult(Generic[T]):
    """Outcome of one upstream call: a value, or an error description."""

    value: Optional[T] = None
    error: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    @classmethod
    def success(cls, value: T) -> "FetchResult[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str, status_code: Optional[int] = None) -> "FetchResult[T]":
        return cls(error=error, status_code=status_code)


Attempt = Callable[[], Awaitable[FetchResult[T]]]


async def first_success(
    attempts: Sequence[tuple[str, Attempt[T]]],
    fallback: Optional[T] = None,
) -> Optional[T]:
    """Run named attempts strictly in order and return the first ok value.

    Later attempts are never started once one succeeds. When every attempt
    fails, ``fallback`` is returned.
    """
    for name, attempt in attempts:
        result = await attempt()
        if result.ok:
            log.debug("attempt succeeded", attempt=name)
            return result.value
        log.warning(
            "attempt failed",
            attempt=name,
            error=result.error,
            status_code=result.status_code,
        )
    return fallback
