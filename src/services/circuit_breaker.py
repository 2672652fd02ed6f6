"""
Circuit Breaker guarding the external LLM completion API.

When the LLM keeps failing, calls fail fast so support requests go straight
to the rule-based classifier instead of waiting on timeouts.

State transition rules:
- CLOSED → OPEN: at least 5 failures in the last 10 requests.
- OPEN → HALF_OPEN: after 30 seconds.
- HALF_OPEN → CLOSED: 1 successful call.
- HALF_OPEN → OPEN: 1 failed call.
"""

import asyncio
import time
from enum import Enum
from typing import Callable, Any, Optional
from collections import deque
from dataclasses import dataclass

from src.core.logging import logger


class CircuitState(Enum):
    CLOSED = "closed"       # Normal state - requests are allowed
    OPEN = "open"           # Open state - requests fail immediately
    HALF_OPEN = "half_open" # Half-open state - limited probing requests allowed


@dataclass
class CircuitBreakerConfig:
    """Circuit Breaker configuration."""
    failure_threshold: int = 5        # Failure count before transitioning to OPEN
    success_threshold: int = 1        # Successes required to transition to CLOSED
    window_size: int = 10             # Window size for failure rate calculation
    timeout_seconds: float = 30.0     # Time to stay OPEN before trying HALF_OPEN
    half_open_max_calls: int = 1      # Max concurrent calls allowed in HALF_OPEN


class CircuitBreakerOpenError(Exception):
    """Raised when a call is attempted while the circuit is OPEN."""
    def __init__(self, retry_after: float):
        self.retry_after = retry_after
        super().__init__(f"Circuit is OPEN. Retry after {retry_after:.1f} seconds")


class CircuitBreaker:
    """
    Circuit Breaker implementation.

    Usage example:
    ```python
    cb = get_circuit_breaker("llm")

    try:
        result = await cb.call(llm_client.classify, request)
    except CircuitBreakerOpenError as e:
        logger.warning(f"Circuit open, retry after {e.retry_after}s")
    ```
    """

    def __init__(self, name: str, config: Optional[CircuitBreakerConfig] = None):
        self.name = name
        self.config = config or CircuitBreakerConfig()

        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time: Optional[float] = None
        self._opened_at: Optional[float] = None

        # Track recent call results (True = success, False = failure)
        self._recent_results: deque = deque(maxlen=self.config.window_size)

        self._lock = asyncio.Lock()
        self._half_open_calls = 0

    @property
    def state(self) -> CircuitState:
        """Return the current state, applying automatic transitions as needed."""
        if self._state == CircuitState.OPEN:
            if self._opened_at and time.time() - self._opened_at >= self.config.timeout_seconds:
                self._transition(CircuitState.HALF_OPEN)
                self._half_open_calls = 0
        return self._state

    def _retry_after(self) -> float:
        if not self._opened_at:
            return self.config.timeout_seconds
        return max(0.0, self.config.timeout_seconds - (time.time() - self._opened_at))

    def _transition(self, new_state: CircuitState) -> None:
        if new_state != self._state:
            logger.info(f"Circuit '{self.name}' {self._state.value} -> {new_state.value}")
        self._state = new_state

    async def call(self, func: Callable, *args, **kwargs) -> Any:
        """
        Call an async function through the Circuit Breaker.

        Raises:
            CircuitBreakerOpenError: When the circuit is OPEN, or HALF_OPEN
                with its probe slots already taken.
        """
        async with self._lock:
            state = self.state
            if state == CircuitState.OPEN:
                raise CircuitBreakerOpenError(self._retry_after())
            if state == CircuitState.HALF_OPEN:
                if self._half_open_calls >= self.config.half_open_max_calls:
                    raise CircuitBreakerOpenError(0.0)
                self._half_open_calls += 1

        try:
            result = await func(*args, **kwargs)
        except Exception:
            await self._on_failure()
            raise

        await self._on_success()
        return result

    async def _on_success(self) -> None:
        async with self._lock:
            self._success_count += 1
            self._recent_results.append(True)

            if self._state == CircuitState.HALF_OPEN:
                self._half_open_calls = max(0, self._half_open_calls - 1)
                if self._success_count >= self.config.success_threshold:
                    self._transition(CircuitState.CLOSED)
                    self._opened_at = None
                    self._recent_results.clear()

    async def _on_failure(self) -> None:
        async with self._lock:
            self._failure_count += 1
            self._last_failure_time = time.time()
            self._recent_results.append(False)

            if self._state == CircuitState.HALF_OPEN or self._should_open():
                self._transition(CircuitState.OPEN)
                self._opened_at = time.time()
                self._success_count = 0
                self._half_open_calls = 0

    def _should_open(self) -> bool:
        """True if at least `failure_threshold` of the last `window_size` calls failed."""
        failures = sum(1 for r in self._recent_results if not r)
        return failures >= self.config.failure_threshold

    def get_status(self) -> dict:
        """
        Return the current Circuit Breaker status.

        Returns:
            {
                "name": str,
                "state": str,
                "failure_count": int,
                "success_count": int,
                "recent_failure_rate": float,
                "opened_at": Optional[float],
                "retry_after": Optional[float]
            }
        """
        state = self.state  # triggers automatic state transition checks

        failure_rate = 0.0
        if self._recent_results:
            failures = sum(1 for r in self._recent_results if not r)
            failure_rate = failures / len(self._recent_results)

        retry_after = None
        if state == CircuitState.OPEN and self._opened_at:
            retry_after = self._retry_after()

        return {
            "name": self.name,
            "state": state.value,
            "failure_count": self._failure_count,
            "success_count": self._success_count,
            "recent_failure_rate": failure_rate,
            "opened_at": self._opened_at,
            "retry_after": retry_after
        }

    def reset(self) -> None:
        """Reset Circuit Breaker state and counters."""
        self._state = CircuitState.CLOSED
        self._failure_count = 0
        self._success_count = 0
        self._last_failure_time = None
        self._opened_at = None
        self._recent_results.clear()
        self._half_open_calls = 0


# Global Circuit Breaker instances registry
_circuit_breakers: dict[str, CircuitBreaker] = {}


def get_circuit_breaker(name: str) -> CircuitBreaker:
    """
    Get a Circuit Breaker instance by name (or create one if missing).
    """
    if name not in _circuit_breakers:
        _circuit_breakers[name] = CircuitBreaker(name)
    return _circuit_breakers[name]


def find_circuit_breaker(name: str) -> Optional[CircuitBreaker]:
    """Look up a registered Circuit Breaker without creating one."""
    return _circuit_breakers.get(name)
