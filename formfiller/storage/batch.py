"""Result type for groups of independent save operations."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
import logging
from typing import Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BatchFailure(Generic[T]):
    key: str
    item: T
    error: Exception


@dataclass(slots=True)
class BatchResult(Generic[T]):
    succeeded: list[T] = field(default_factory=list)
    failed: list[BatchFailure[T]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    def failed_keys(self) -> list[str]:
        return [failure.key for failure in self.failed]


def run_batch(
    items: Iterable[T],
    operation: Callable[[T], object],
    key: Callable[[T], str] = str,
) -> BatchResult[T]:
    """Run ``operation`` once per item; retry or rollback is left to the caller."""
    result: BatchResult[T] = BatchResult()
    for item in items:
        try:
            operation(item)
        except Exception as exc:
            logger.warning("Save failed for %s: %s", key(item), exc)
            result.failed.append(BatchFailure(key=key(item), item=item, error=exc))
        else:
            result.succeeded.append(item)
    return result
