"""Bounded retry for LLM-backed operations.

Provides retry_with_steering() -- a generic retry loop that validates
results and, optionally, steers the model with the failure diagnosis
before the next attempt.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

from digital_twin.exceptions import RetryExhaustedError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryResult(Generic[T]):
    """Result of a retry-guarded operation.

    Attributes:
        value: The successful result value.
        attempts: Total attempts (1 = first try succeeded).
        history: Brief log of failure diagnoses (None if first try succeeded).
    """

    value: T
    attempts: int
    history: list[str] | None = None


def retry_with_steering(
    *,
    attempt: Callable[[], T],
    validate: Callable[[T], tuple[bool, str | None]],
    steer: Callable[[str], None] | None = None,
    max_retries: int = 3,
) -> RetryResult[T]:
    """Execute an operation with validation and optional steering.

    Flow:
        1. result = attempt()
        2. (ok, diagnosis) = validate(result)
        3. If ok: return RetryResult
        4. If attempts >= max_retries: raise RetryExhaustedError
        5. steer(diagnosis), if given
        6. Goto 1

    Args:
        attempt: Callable that produces a result (e.g. LLM call + parse).
        validate: Callable taking the result, returns (ok, diagnosis).
            diagnosis is None on success, a string on failure.
        steer: Optional callable taking a diagnosis string, injects
            feedback for the next attempt.
        max_retries: Maximum total attempts (default 3).

    Returns:
        RetryResult with the successful value, attempt count, and history.

    Raises:
        ValueError: If max_retries is less than 1.
        RetryExhaustedError: If all attempts fail validation.
    """
    if max_retries < 1:
        raise ValueError(f"max_retries must be at least 1, got {max_retries}")

    history: list[str] = []
    last_diagnosis = "validation failed"
    result = None

    for attempt_num in range(1, max_retries + 1):
        result = attempt()
        ok, diagnosis = validate(result)

        if ok:
            return RetryResult(
                value=result,
                attempts=attempt_num,
                history=history if history else None,
            )

        # Failed -- record and steer
        last_diagnosis = diagnosis or "validation failed"
        history.append(last_diagnosis)

        if steer is not None and attempt_num < max_retries:
            steer(last_diagnosis)

    raise RetryExhaustedError(
        attempts=max_retries,
        last_diagnosis=last_diagnosis,
        last_result=result,
    )
