"""Retry-with-backoff as an explicit, independently testable function.

``with_retry`` never raises for failures of ``op``: it returns a
``RetryOutcome`` holding either the value or the last error, plus the
attempt count and the delays it slept. Callers decide what to raise.
"""

from __future__ import annotations

import enum
import logging
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorClass(enum.Enum):
    FATAL = "fatal"
    TRANSIENT = "transient"


@dataclass
class RetryOutcome(Generic[T]):
    value: Optional[T] = None
    error: Optional[BaseException] = None
    error_class: Optional[ErrorClass] = None
    attempts: int = 0
    delays: List[float] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exhausted(self) -> bool:
        """True when every attempt failed with a transient error."""
        return self.error is not None and self.error_class is ErrorClass.TRANSIENT


def backoff_delay(
    attempt: int, base_delay: float, jitter: Callable[[], float] = random.random
) -> float:
    """``base * 2^(attempt-1)`` plus jitter in ``[0, base)``.

    Jitter stays below ``base_delay`` so consecutive delays strictly increase.
    """
    return base_delay * (2 ** (attempt - 1)) + jitter() * base_delay


def with_retry(
    op: Callable[[], T],
    *,
    max_attempts: int,
    classify: Callable[[BaseException], ErrorClass],
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
    jitter: Callable[[], float] = random.random,
) -> RetryOutcome[T]:
    outcome: RetryOutcome[T] = RetryOutcome()
    for attempt in range(1, max(1, max_attempts) + 1):
        outcome.attempts = attempt
        try:
            outcome.value = op()
            outcome.error = None
            outcome.error_class = None
            return outcome
        except Exception as exc:
            outcome.error = exc
            outcome.error_class = classify(exc)

        if outcome.error_class is ErrorClass.FATAL:
            logger.error(f"Attempt {attempt} failed with a non-retryable error: {outcome.error}")
            return outcome
        if attempt >= max_attempts:
            break

        delay = backoff_delay(attempt, base_delay, jitter)
        outcome.delays.append(delay)
        logger.warning(
            f"Attempt {attempt}/{max_attempts} failed ({outcome.error}); retrying in {delay:.2f}s"
        )
        sleep(delay)

    logger.error(f"Giving up after {outcome.attempts} attempts: {outcome.error}")
    return outcome
