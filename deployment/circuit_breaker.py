"""
Circuit breaker for chat-completion calls.
Stops hammering a provider that keeps failing and lets the sidebar
report "temporarily unavailable" instead of hanging on every request.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"  # Normal operation
    OPEN = "open"  # Failing, reject requests
    HALF_OPEN = "half_open"  # Testing if provider recovered


class CircuitOpenError(Exception):
    """Raised when the circuit is open and the call was not attempted."""

    def __init__(self, message: str, retry_after: float = 0.0):
        super().__init__(message)
        self.retry_after = retry_after


@dataclass
class CircuitBreaker:
    """
    Circuit breaker for provider calls.

    States:
    - CLOSED: requests pass through
    - OPEN: too many consecutive failures, requests rejected immediately
    - HALF_OPEN: reset timeout elapsed, a few trial requests allowed

    Usage:
        breaker = CircuitBreaker(name="llm", failure_threshold=3)
        response = breaker.call(client.chat.completions.create, **kwargs)
    """

    name: str = "llm"
    failure_threshold: int = 3
    reset_timeout: float = 30.0
    half_open_max_calls: int = 2

    state: CircuitState = field(default=CircuitState.CLOSED)
    failures: int = field(default=0)
    successes: int = field(default=0)
    last_failure_time: Optional[float] = field(default=None)
    half_open_calls: int = field(default=0)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def retry_after(self) -> float:
        """Seconds until an open circuit lets a trial request through."""
        if self.state != CircuitState.OPEN or self.last_failure_time is None:
            return 0.0
        return max(0.0, self.reset_timeout - (time.time() - self.last_failure_time))

    def call(self, fn: Callable, *args, **kwargs) -> Any:
        """
        Execute fn with circuit breaker protection.

        Raises:
            CircuitOpenError: If the circuit rejects the call
            Exception: Whatever fn raised
        """
        with self._lock:
            if not self._should_allow_request():
                wait = self.retry_after
                raise CircuitOpenError(
                    f"Circuit '{self.name}' is {self.state.value}. Wait {wait:.0f}s",
                    retry_after=wait,
                )
            if self.state == CircuitState.HALF_OPEN:
                self.half_open_calls += 1

        try:
            result = fn(*args, **kwargs)
        except Exception:
            with self._lock:
                self._record_failure()
            raise

        with self._lock:
            self._record_success()
        return result

    def reset(self) -> None:
        """Force the circuit back to CLOSED."""
        with self._lock:
            self._transition_to_closed()

    def get_stats(self) -> dict:
        """Get circuit breaker statistics."""
        return {
            "name": self.name,
            "state": self.state.value,
            "failures": self.failures,
            "successes": self.successes,
            "last_failure_time": self.last_failure_time,
            "half_open_calls": self.half_open_calls,
        }

    def _should_allow_request(self) -> bool:
        if self.state == CircuitState.CLOSED:
            return True

        if self.state == CircuitState.OPEN:
            if (
                self.last_failure_time
                and (time.time() - self.last_failure_time) >= self.reset_timeout
            ):
                self._transition_to_half_open()
                return True
            return False

        return self.half_open_calls < self.half_open_max_calls

    def _transition_to_open(self):
        logger.warning(f"Circuit '{self.name}' OPEN: {self.failures} failures in succession")
        self.state = CircuitState.OPEN
        self.last_failure_time = time.time()

    def _transition_to_half_open(self):
        logger.info(f"Circuit '{self.name}' transitioning to HALF_OPEN")
        self.state = CircuitState.HALF_OPEN
        self.half_open_calls = 0
        self.successes = 0

    def _transition_to_closed(self):
        if self.state != CircuitState.CLOSED:
            logger.info(f"Circuit '{self.name}' CLOSED: provider recovered")
        self.state = CircuitState.CLOSED
        self.failures = 0
        self.successes = 0
        self.half_open_calls = 0

    def _record_success(self):
        self.failures = 0

        if self.state == CircuitState.HALF_OPEN:
            self.successes += 1
            if self.successes >= self.half_open_max_calls:
                self._transition_to_closed()

    def _record_failure(self):
        self.failures += 1
        self.last_failure_time = time.time()

        if self.state == CircuitState.HALF_OPEN:
            self._transition_to_open()
        elif self.failures >= self.failure_threshold:
            self._transition_to_open()
