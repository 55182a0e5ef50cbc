import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional, TypeVar

from datagen.utils.app_exceptions import (
    AppBaseException,
    GenerationError,
    OperationTimeoutError,
)
from datagen.utils.logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Bounded retry with a fresh timeout window per attempt.

    `degrade(prompt, attempt)` returns the prompt to use on a given attempt
    (attempt 0 is the first try), so each retry can send a simpler request.
    Only generation failures and timeouts are retried; anything else
    propagates on the first occurrence.
    """

    max_attempts: int
    attempt_timeout: float
    degrade: Optional[Callable[[str, int], str]] = None
    backoff_seconds: float = 0.0

    async def run(
        self,
        operation: Callable[[str], Awaitable[T]],
        prompt: str,
        description: str = "operation",
    ) -> T:
        last_error: Optional[AppBaseException] = None

        for attempt in range(self.max_attempts):
            attempt_prompt = self.degrade(prompt, attempt) if self.degrade else prompt

            if attempt > 0 and self.backoff_seconds > 0:
                await asyncio.sleep(self.backoff_seconds * (2 ** (attempt - 1)))

            try:
                return await asyncio.wait_for(
                    operation(attempt_prompt), timeout=self.attempt_timeout
                )
            except asyncio.TimeoutError:
                last_error = OperationTimeoutError(
                    f"{description} did not respond within {self.attempt_timeout:g} seconds"
                )
            except (GenerationError, OperationTimeoutError) as e:
                last_error = e

            logger.warning(
                "Attempt failed",
                operation=description,
                attempt=attempt + 1,
                max_attempts=self.max_attempts,
                error=last_error.detail,
            )

        logger.error(
            "All attempts exhausted",
            operation=description,
            attempts=self.max_attempts,
        )
        raise last_error
