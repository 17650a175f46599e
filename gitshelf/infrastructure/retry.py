"""Fixed-delay retry policy shared by the fetch and delete loops."""
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

from gitshelf.infrastructure.exceptions import RetryExhaustedError
from gitshelf.infrastructure.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class RetryPolicy:
    """Run an operation up to ``max_attempts`` times with a constant delay between attempts."""

    def __init__(
        self,
        max_attempts: int,
        delay: float,
        retry_on: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.max_attempts = max_attempts
        self.delay = delay
        self.retry_on = retry_on
        self.sleep = sleep

    def call(self, operation: Callable[[], T], description: Optional[str] = None) -> T:
        """
        Call ``operation`` until it succeeds or attempts run out

        Args:
            operation: Zero-argument callable
            description: Label used in log events

        Returns:
            Whatever ``operation`` returns

        Raises:
            RetryExhaustedError: If every attempt raised one of ``retry_on``
        """
        last_error: Optional[BaseException] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                return operation()
            except self.retry_on as e:
                last_error = e
                logger.debug(
                    "retry_attempt_failed",
                    operation=description,
                    attempt=attempt,
                    max_attempts=self.max_attempts,
                    error=str(e),
                )
                if attempt == self.max_attempts:
                    break
                self.sleep(self.delay)

        raise RetryExhaustedError(self.max_attempts, last_error)
