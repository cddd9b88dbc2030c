# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

"""Resilience utilities (timeouts, retries, circuit breaker)."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from parkingslot.shared.config.settings import ResilienceConfig
from parkingslot.shared.logging import logger

T = TypeVar("T")


class CircuitOpenError(RuntimeError):
    pass


@dataclass
class CircuitBreaker:
    """Simple in-memory circuit breaker."""

    failure_threshold: int
    reset_timeout: float
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    def __post_init__(self) -> None:
        self._failures = 0
        self._opened_at: float | None = None

    @classmethod
    def from_config(cls, config: ResilienceConfig) -> CircuitBreaker:
        return cls(
            failure_threshold=config.circuit_fail_threshold,
            reset_timeout=config.circuit_reset_timeout,
        )

    @property
    def is_open(self) -> bool:
        return self._opened_at is not None

    def allow(self) -> bool:
        if self._opened_at is None:
            return True
        if self.clock() - self._opened_at >= self.reset_timeout:
            logger.info("breaker: half-open state")
            self._opened_at = None
            self._failures = 0
            return True
        logger.warning("breaker: open state refusing call")
        return False

    def on_success(self) -> None:
        self._failures = 0
        self._opened_at = None

    def on_failure(self) -> None:
        self._failures += 1
        if self._failures >= self.failure_threshold:
            self._opened_at = self.clock()
            logger.error("breaker: opening circuit after failures")


def _log_retry(state: RetryCallState) -> None:
    outcome = state.outcome
    error = outcome.exception() if outcome is not None else None
    wait = state.next_action.sleep if state.next_action is not None else 0.0
    logger.warning(
        f"resilience: attempt={state.attempt_number} failed with {type(error).__name__}, "
        f"retrying in {wait:.2f}s"
    )


async def resilient_call(  # noqa: UP047
    func: Callable[..., Awaitable[T]],
    *args: Any,
    config: ResilienceConfig,
    breaker: CircuitBreaker | None = None,
    timeout: float | None = None,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    **kwargs: Any,
) -> T:
    """Execute call with retries, timeout, and optional circuit breaker."""

    breaker = breaker or CircuitBreaker.from_config(config)

    if not breaker.allow():
        raise CircuitOpenError("Circuit breaker is open")

    timeout = timeout or config.default_timeout

    retry = AsyncRetrying(
        stop=stop_after_attempt(config.max_retries + 1),
        wait=wait_exponential(
            multiplier=config.backoff_base,
            max=config.backoff_cap,
        ),
        retry=retry_if_exception_type(retry_on),
        before_sleep=_log_retry,
        reraise=True,
    )

    try:
        async for attempt in retry:
            with attempt:
                logger.debug(
                    f"resilience: attempt={attempt.retry_state.attempt_number} "
                    f"func={getattr(func, '__name__', 'call')}"
                )
                result = await asyncio.wait_for(func(*args, **kwargs), timeout=timeout)
                breaker.on_success()
                return result
    except RetryError as exc:
        breaker.on_failure()
        last_exc = exc.last_attempt.exception()
        if last_exc is None:
            raise RuntimeError("resilience: retry failed without exception") from exc
        raise last_exc from exc
    except retry_on:
        breaker.on_failure()
        raise
    raise RuntimeError("resilience: reached unexpected branch")


__all__ = ["CircuitBreaker", "CircuitOpenError", "resilient_call"]
