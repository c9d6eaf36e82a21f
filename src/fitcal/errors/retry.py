"""Retry with exponential backoff for coroutine operations.

Built on tenacity's AsyncRetrying. The delay before retry ``n`` is
``min(base_delay * backoff_multiplier ** (n - 1), max_delay)``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from fitcal.config.settings import RetryOverride
from fitcal.errors.taxonomy import CalorieTrackingError, create_error_from_exception

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class RetryConfig:
    """Attempt budget and backoff policy for one kind of operation."""

    max_attempts: int
    base_delay_ms: int
    max_delay_ms: int
    backoff_multiplier: float
    retryable_errors: tuple[str, ...] = ()

    def delay_ms(self, attempt: int) -> float:
        """Delay after failed attempt number ``attempt`` (1-based)."""
        return min(
            self.base_delay_ms * self.backoff_multiplier ** (attempt - 1),
            self.max_delay_ms,
        )

    def with_overrides(self, override: Optional[RetryOverride]) -> "RetryConfig":
        """Copy with any non-None fields of ``override`` applied."""
        if override is None:
            return self
        changes = {
            name: getattr(override, name)
            for name in ("max_attempts", "base_delay_ms", "max_delay_ms", "backoff_multiplier")
            if getattr(override, name) is not None
        }
        return replace(self, **changes)


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "storage": RetryConfig(
        max_attempts=3,
        base_delay_ms=500,
        max_delay_ms=5000,
        backoff_multiplier=2,
        retryable_errors=("storage", "timeout", "network"),
    ),
    "calculation": RetryConfig(
        max_attempts=2,
        base_delay_ms=100,
        max_delay_ms=1000,
        backoff_multiplier=2,
        retryable_errors=("calculation", "overflow", "timeout"),
    ),
    # Validation failures are never transient
    "validation": RetryConfig(
        max_attempts=1,
        base_delay_ms=0,
        max_delay_ms=0,
        backoff_multiplier=1,
        retryable_errors=(),
    ),
}


@dataclass
class OperationResult(Generic[T]):
    """Outcome of an operation run through ``retry_operation``."""

    success: bool
    data: Optional[T] = None
    error: Optional[CalorieTrackingError] = None
    retry_count: int = 0
    warnings: list[str] = field(default_factory=list)


def is_retryable(error: BaseException, config: RetryConfig) -> bool:
    """Whether a failed attempt should be retried under ``config``.

    CalorieTrackingErrors flagged non-retryable never are. Otherwise the
    error's category name and message are matched case-insensitively
    against ``config.retryable_errors``.
    """
    haystacks = [str(error).lower()]
    if isinstance(error, CalorieTrackingError):
        if not error.retryable:
            return False
        haystacks.append(error.category.value.lower())
    return any(
        keyword.lower() in haystack
        for keyword in config.retryable_errors
        for haystack in haystacks
    )


async def retry_operation(
    operation: Callable[[], Awaitable[T]],
    config: RetryConfig,
    operation_name: str = "operation",
    sleep: SleepFunc = asyncio.sleep,
) -> OperationResult[T]:
    """Await ``operation`` until it succeeds or the attempt budget runs out.

    Args:
        operation: Zero-argument coroutine function
        config: Attempt budget, backoff and retryable keywords
        operation_name: Label used in warnings
        sleep: Coroutine used to wait between attempts (seconds)

    Returns:
        OperationResult with data on success or a CalorieTrackingError on failure
    """
    warnings: list[str] = []
    attempts = 0

    def _record_retry(retry_state: RetryCallState) -> None:
        delay_ms = round(retry_state.next_action.sleep * 1000)
        warnings.append(
            f"{operation_name} failed (attempt {retry_state.attempt_number}), "
            f"retrying in {delay_ms}ms"
        )
        logger.debug(warnings[-1])

    retrying = AsyncRetrying(
        sleep=sleep,
        stop=stop_after_attempt(max(1, config.max_attempts)),
        wait=wait_exponential(
            multiplier=config.base_delay_ms / 1000,
            exp_base=config.backoff_multiplier,
            min=0,
            max=config.max_delay_ms / 1000,
        ),
        retry=retry_if_exception(lambda exc: is_retryable(exc, config)),
        before_sleep=_record_retry,
        reraise=True,
    )

    try:
        async for attempt in retrying:
            with attempt:
                attempts = attempt.retry_state.attempt_number
                data = await operation()
    except Exception as exc:
        return OperationResult(
            success=False,
            error=create_error_from_exception(exc, operation_name),
            retry_count=config.max_attempts,
            warnings=warnings,
        )

    if attempts > 1:
        warnings.append(f"{operation_name} succeeded after {attempts - 1} retries")
    return OperationResult(
        success=True,
        data=data,
        retry_count=attempts - 1,
        warnings=warnings,
    )
