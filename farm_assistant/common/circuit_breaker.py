# farm_assistant/common/circuit_breaker.py
"""
Circuit breaker for the external HTTP APIs (Gemini, Open-Meteo).

The breaker only fails fast while a service is known to be down; it never
retries or queues a call on the caller's behalf.
"""
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from farm_assistant.common.logger import get_logger

logger = get_logger(__name__)


class CircuitState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerError(Exception):
    """Raised when a call is rejected because the circuit is open"""
    pass


class CircuitBreaker:
    """
    Args:
        name: service name used in logs and status
        failure_threshold: consecutive failures before the circuit opens
        success_threshold: successes in HALF_OPEN before it closes again
        timeout: seconds an open circuit waits before letting a probe through
        clock: time source, replaceable in tests
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        success_threshold: int = 1,
        timeout: float = 60,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.success_threshold = success_threshold
        self.timeout = timeout
        self._clock = clock

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.success_count = 0
        self.opened_at: Optional[float] = None
        self._lock = threading.RLock()

        logger.info(
            f"Circuit breaker '{name}' ready: failure_threshold={failure_threshold}, timeout={timeout}s"
        )

    def call(self, func: Callable, *args, **kwargs) -> Any:
        with self._lock:
            if self.state == CircuitState.OPEN:
                waited = self._clock() - self.opened_at
                if waited >= self.timeout:
                    logger.info(f"Circuit breaker '{self.name}' half-open, letting a probe through")
                    self.state = CircuitState.HALF_OPEN
                    self.success_count = 0
                else:
                    logger.warning(f"Circuit breaker '{self.name}' is open, rejecting call")
                    raise CircuitBreakerError(
                        f"{self.name} is unavailable, retry after {int(self.timeout - waited)}s"
                    )

        try:
            result = func(*args, **kwargs)
        except Exception:
            self._on_failure()
            raise
        self._on_success()
        return result

    def _on_success(self):
        with self._lock:
            self.failure_count = 0
            if self.state == CircuitState.HALF_OPEN:
                self.success_count += 1
                if self.success_count >= self.success_threshold:
                    logger.info(f"Circuit breaker '{self.name}' closed, service recovered")
                    self.state = CircuitState.CLOSED
                    self.success_count = 0

    def _on_failure(self):
        with self._lock:
            self.failure_count += 1
            if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
                if self.state != CircuitState.OPEN:
                    logger.error(
                        f"Circuit breaker '{self.name}' opening "
                        f"(failures: {self.failure_count}/{self.failure_threshold})"
                    )
                self.state = CircuitState.OPEN
                self.opened_at = self._clock()
                self.success_count = 0

    def reset(self):
        with self._lock:
            logger.info(f"Circuit breaker '{self.name}' manually reset")
            self.state = CircuitState.CLOSED
            self.failure_count = 0
            self.success_count = 0
            self.opened_at = None

    def get_status(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "name": self.name,
                "state": self.state.value,
                "failure_count": self.failure_count,
            }


def gemini_breaker() -> CircuitBreaker:
    return CircuitBreaker("gemini_api", failure_threshold=5, timeout=60)


def weather_breaker() -> CircuitBreaker:
    return CircuitBreaker("open_meteo_api", failure_threshold=3, timeout=30)
