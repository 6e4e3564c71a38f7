"""
Error handler with retry logic for external collaborators.

Implements exponential backoff for asynchronous calls the engine does not
control, such as fetching the product catalog.
"""

import asyncio
import logging
from datetime import datetime
from typing import Any, Awaitable, Callable, Optional

from facet_search.config.engine_config import RetryConfig


# Configure logging
logger = logging.getLogger(__name__)


class ErrorHandler:
    """
    Error handler with retry logic and diagnostic logging.

    Attributes:
        config: Retry configuration
    """

    def __init__(
        self,
        max_retries: int = 3,
        backoff_base_seconds: float = 0.5,
        config: Optional[RetryConfig] = None
    ):
        """
        Initialize error handler with retry configuration.

        Args:
            max_retries: Maximum number of attempts (default: 3)
            backoff_base_seconds: Delay before the first retry (default: 0.5)
            config: Full retry configuration, overrides the other arguments
        """
        self.config = config or RetryConfig(
            max_retries=max_retries,
            backoff_base_seconds=backoff_base_seconds
        )

    async def retry_with_backoff(
        self,
        operation: Callable[..., Awaitable[Any]],
        *args,
        **kwargs
    ) -> Any:
        """
        Execute operation with exponential backoff retry logic.

        Attempts the operation up to max_retries times, sleeping an
        exponentially growing delay between attempts. Every failure is
        logged with its context.

        Args:
            operation: Async callable to execute
            *args: Positional arguments for the operation
            **kwargs: Keyword arguments for the operation

        Returns:
            Result from successful operation execution

        Raises:
            Exception: The last exception encountered if all retries are exhausted
        """
        attempts = max(1, self.config.max_retries)
        name = getattr(operation, '__name__', repr(operation))
        last_exception = None

        for attempt in range(attempts):
            try:
                logger.debug(f"Attempt {attempt + 1}/{attempts} for operation {name}")
                result = await operation(*args, **kwargs)
                if attempt > 0:
                    logger.info(f"Operation {name} succeeded on attempt {attempt + 1}")
                return result

            except Exception as e:
                last_exception = e
                self._log_error(
                    operation_name=name,
                    attempt=attempt + 1,
                    max_attempts=attempts,
                    error=e
                )

                # If this was the last attempt, don't wait
                if attempt == attempts - 1:
                    logger.error(
                        f"Operation {name} failed after {attempts} attempts. "
                        f"Final error: {str(e)}"
                    )
                    break

                backoff_delay = self.config.get_backoff_delay(attempt)
                logger.info(f"Waiting {backoff_delay:.1f}s before retry...")
                await asyncio.sleep(backoff_delay)

        raise last_exception

    def _log_error(
        self,
        operation_name: str,
        attempt: int,
        max_attempts: int,
        error: Exception
    ) -> None:
        """
        Log error with timestamp, context, and diagnostic data.

        Args:
            operation_name: Name of the operation that failed
            attempt: Current attempt number
            max_attempts: Maximum number of attempts
            error: The exception that occurred
        """
        context = {
            'timestamp': datetime.now().isoformat(),
            'operation': operation_name,
            'attempt': f"{attempt}/{max_attempts}",
            'error_type': type(error).__name__,
            'error_message': str(error),
        }

        logger.warning(
            f"Operation failed: {operation_name} | "
            f"Attempt: {attempt}/{max_attempts} | "
            f"Error: {type(error).__name__}: {str(error)}"
        )
        logger.debug(f"Full error context: {context}")
