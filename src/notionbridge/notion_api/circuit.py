"""Closed / open / half-open circuit breaker for the request executor.

The breaker counts upstream failures (timeouts, internal errors and
service-unavailable responses) of whole :meth:`AsyncNotionTransport.execute`
calls, after retries.  Client errors such as ``404`` or ``400`` mean the
API answered, so they count as successes.

* **closed** -- calls pass.  ``failure_threshold`` consecutive failures
  open the circuit.
* **open** -- calls are rejected with
  :class:`~notionbridge.errors.ServiceUnavailableError` until
  ``recovery_timeout`` seconds have passed since the last failure.
* **half_open** -- calls pass again.  ``success_threshold`` successes
  close the circuit; any failure re-opens it.
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum

from notionbridge.errors import NotionError, ServiceUnavailableError
from notionbridge.observability import get_logger

log = get_logger("notionbridge.circuit")


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


def is_upstream_failure(error: BaseException) -> bool:
    """Whether *error* says the API itself is unhealthy."""
    if not isinstance(error, NotionError):
        return False
    return error.retryable or isinstance(error, ServiceUnavailableError)


class CircuitBreaker:
    """Failure-counting gate in front of the Notion API.

    Parameters
    ----------
    failure_threshold:
        Consecutive failures that open a closed circuit.
    recovery_timeout:
        Seconds an open circuit waits after its last failure before
        letting calls through again.
    success_threshold:
        Successes in the half-open state that close the circuit.
    clock:
        Monotonic clock in seconds.  Tests inject a fake.
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 30.0,
        success_threshold: int = 3,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if failure_threshold < 1:
            raise ValueError(f"failure_threshold must be >= 1, got {failure_threshold}")
        if success_threshold < 1:
            raise ValueError(f"success_threshold must be >= 1, got {success_threshold}")
        if recovery_timeout < 0:
            raise ValueError(f"recovery_timeout must be >= 0, got {recovery_timeout}")
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.success_threshold = success_threshold
        self._clock = clock
        self._state = CircuitState.CLOSED
        self._failures = 0
        self._successes = 0
        self._last_failure_at: float | None = None

    @property
    def state(self) -> CircuitState:
        return self._state

    @property
    def failure_count(self) -> int:
        return self._failures

    def before_call(self, path: str = "") -> None:
        """Admit or reject a call.

        An open circuit whose recovery timeout has elapsed moves to
        half-open and admits the call.

        Raises
        ------
        ServiceUnavailableError
            While the circuit is open.
        """
        if self._state is not CircuitState.OPEN:
            return
        elapsed = self._clock() - (self._last_failure_at or 0.0)
        if elapsed >= self.recovery_timeout:
            self._transition(CircuitState.HALF_OPEN)
            self._successes = 0
            return
        raise ServiceUnavailableError(
            "Circuit breaker is open",
            context={
                "path": path,
                "retry_in_seconds": round(self.recovery_timeout - elapsed, 3),
            },
        )

    def record_success(self) -> None:
        if self._state is CircuitState.HALF_OPEN:
            self._successes += 1
            if self._successes >= self.success_threshold:
                self._transition(CircuitState.CLOSED)
                self._reset_counts()
            return
        self._failures = 0

    def record_failure(self) -> None:
        self._failures += 1
        self._last_failure_at = self._clock()
        if self._state is CircuitState.HALF_OPEN or self._failures >= self.failure_threshold:
            self._transition(CircuitState.OPEN)

    def record(self, error: BaseException | None) -> None:
        """Record the outcome of one call; ``None`` means it succeeded."""
        if error is not None and is_upstream_failure(error):
            self.record_failure()
        else:
            self.record_success()

    def force_open(self) -> None:
        self._last_failure_at = self._clock()
        self._transition(CircuitState.OPEN)

    def force_close(self) -> None:
        self._transition(CircuitState.CLOSED)
        self._reset_counts()

    # -- internals ---------------------------------------------------------

    def _reset_counts(self) -> None:
        self._failures = 0
        self._successes = 0

    def _transition(self, new_state: CircuitState) -> None:
        if new_state is self._state:
            return
        log.warning(
            "Circuit state changed",
            extra={
                "extra_fields": {
                    "from_state": self._state.value,
                    "to_state": new_state.value,
                    "failures": self._failures,
                }
            },
        )
        self._state = new_state

    def __repr__(self) -> str:
        return (
            f"CircuitBreaker(state={self._state.value!r}, failures={self._failures}, "
            f"failure_threshold={self.failure_threshold})"
        )
