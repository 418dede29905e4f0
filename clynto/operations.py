"""Asynchronous operations with explicit loading state, retry and cancellation."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from .config import RetryConfig
from .constants import DEFAULT_RETRY_ATTEMPTS
from .exceptions import TransientError
from .utils.retry import compute_backoff

logger = logging.getLogger(__name__)

T = TypeVar("T")


class OperationState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"


class AsyncOperation(Generic[T]):
    """Runs ``factory`` once, retrying on :class:`TransientError`.

    ``state`` tells "not started yet" (pending) apart from "loading"
    (running) and from a finished call, so callers never mistake an
    in-flight request for an empty result. Any other exception fails the
    operation on the first attempt.
    """

    def __init__(
        self,
        factory: Callable[[], Awaitable[T]],
        *,
        name: str = "operation",
        max_attempts: int = DEFAULT_RETRY_ATTEMPTS,
        backoff: Optional[Callable[[int], float]] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._factory = factory
        self.name = name
        self.max_attempts = max_attempts
        self._backoff = backoff or compute_backoff
        self._sleep = sleep
        self._task: Optional[asyncio.Task] = None
        self.state = OperationState.PENDING
        self.attempts = 0
        self.result: Optional[T] = None
        self.error: Optional[BaseException] = None

    @classmethod
    def from_config(
        cls, factory: Callable[[], Awaitable[T]], retry: RetryConfig, **kwargs
    ) -> "AsyncOperation[T]":
        return cls(
            factory,
            max_attempts=retry.max_attempts,
            backoff=lambda attempt: compute_backoff(attempt, retry.base, retry.jitter),
            **kwargs,
        )

    @property
    def is_loading(self) -> bool:
        return self.state is OperationState.RUNNING

    @property
    def is_done(self) -> bool:
        return self.state in (
            OperationState.SUCCEEDED,
            OperationState.FAILED,
            OperationState.CANCELLED,
        )

    async def _attempt_loop(self) -> T:
        while True:
            self.attempts += 1
            try:
                return await self._factory()
            except TransientError as exc:
                if self.attempts >= self.max_attempts:
                    raise
                delay = self._backoff(self.attempts)
                logger.warning(
                    f"{self.name} attempt {self.attempts} failed: {exc}; retrying in {delay:.2f}s"
                )
                await self._sleep(delay)

    async def run(self) -> T:
        """Execute the operation and return its result.

        Raises:
            RuntimeError: If the operation was already started.
            asyncio.CancelledError: If :meth:`cancel` was called meanwhile.
        """
        if self.state is not OperationState.PENDING:
            raise RuntimeError(f"{self.name} already {self.state.value}")

        self.state = OperationState.RUNNING
        self._task = asyncio.ensure_future(self._attempt_loop())
        try:
            self.result = await self._task
        except asyncio.CancelledError:
            self.state = OperationState.CANCELLED
            logger.info(f"{self.name} cancelled after {self.attempts} attempt(s)")
            raise
        except Exception as exc:
            self.state = OperationState.FAILED
            self.error = exc
            logger.error(f"{self.name} failed after {self.attempts} attempt(s): {exc}")
            raise
        self.state = OperationState.SUCCEEDED
        return self.result

    def cancel(self) -> bool:
        """Cancel an in-flight run. Returns ``False`` if nothing was running."""
        if self._task is None or self._task.done():
            if self.state is OperationState.PENDING:
                self.state = OperationState.CANCELLED
                return True
            return False
        self._task.cancel()
        return True
