"""
Long-running operation handling.

Channel API calls such as provisionCloudIdentity and entitlements.create
return a google.longrunning.Operation instead of the resource itself.
LongRunningOperation tracks that operation through an explicit state machine:

    PENDING -> SUCCEEDED (response) | FAILED (error)

and can block until a terminal state is reached.
"""

import logging
import time
from enum import Enum
from typing import Callable, Optional

from channel_common.exceptions import (
    OperationFailedException,
    OperationTimeoutException,
)

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0
POLL_MULTIPLIER = 1.5
MAX_POLL_INTERVAL = 20.0

TYPE_KEY = "@type"


class OperationState(str, Enum):
    """Lifecycle states of a long-running operation."""

    PENDING = "PENDING"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


class LongRunningOperation:
    """
    Handle on an in-flight remote operation.

    Args:
        operation: Operation resource as returned by the API
        refresh: Callable taking the operation name and returning the
            latest operation resource (e.g. operations.get)
        description: Human-readable name used in logs and errors
        poll_interval: Initial delay between polls, in seconds
        sleep: Sleep function, injectable for tests
        clock: Monotonic clock function, injectable for tests
    """

    def __init__(
        self,
        operation: dict,
        refresh: Callable[[str], dict],
        description: str = "operation",
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = operation.get("name", "")
        self.description = description
        self._refresh = refresh
        self._poll_interval = poll_interval
        self._sleep = sleep
        self._clock = clock
        self._operation = operation
        self.state = self._state_of(operation)

    @staticmethod
    def _state_of(operation: dict) -> OperationState:
        if not operation.get("done"):
            return OperationState.PENDING
        if operation.get("error"):
            return OperationState.FAILED
        return OperationState.SUCCEEDED

    @property
    def done(self) -> bool:
        return self.state is not OperationState.PENDING

    @property
    def metadata(self) -> dict:
        return self._operation.get("metadata", {})

    @property
    def error(self) -> Optional[dict]:
        if self.state is OperationState.FAILED:
            return self._operation["error"]
        return None

    def poll(self) -> OperationState:
        """Refresh the operation once if it is still pending."""
        if self.done:
            return self.state

        self._operation = self._refresh(self.name)
        self.state = self._state_of(self._operation)
        logger.debug("%s %s is %s", self.description, self.name, self.state.value)
        return self.state

    def result(self, timeout: Optional[float] = None) -> dict:
        """
        Block until the operation finishes and return its resource.

        Args:
            timeout: Maximum seconds to wait; None waits indefinitely

        Returns:
            The resource produced by the operation

        Raises:
            OperationFailedException: If the operation finished with an error
            OperationTimeoutException: If the timeout elapsed first
        """
        deadline = None if timeout is None else self._clock() + timeout
        interval = self._poll_interval

        if not self.done:
            logger.info("Waiting for %s %s", self.description, self.name)

        while self.poll() is OperationState.PENDING:
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise OperationTimeoutException(
                        f"{self.description} {self.name} did not finish within {timeout}s",
                        operation_name=self.name,
                        timeout=timeout,
                    )
                interval = min(interval, remaining)
            self._sleep(interval)
            interval = min(interval * POLL_MULTIPLIER, MAX_POLL_INTERVAL)

        if self.state is OperationState.FAILED:
            error = self.error
            logger.error(
                "%s %s failed: %s", self.description, self.name, error.get("message")
            )
            raise OperationFailedException(
                f"{self.description} failed: {error.get('message', 'unknown error')}",
                operation_name=self.name,
                error=error,
            )

        response = dict(self._operation.get("response", {}))
        response.pop(TYPE_KEY, None)
        return response
