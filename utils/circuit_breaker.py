import time
from enum import Enum
from typing import Optional, Callable, Any, Awaitable, Tuple, Type

from utils.logger import setup_logger

logger = setup_logger(__name__)


class CircuitState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitBreakerOpenError(Exception):
    pass


class CircuitBreaker:
    """Stops calling a flaky collaborator after repeated failures.

    Closed: calls go through and failures are counted. Open: calls are
    rejected with ``CircuitBreakerOpenError`` until ``recovery_timeout_seconds``
    have passed. Half-open: one call is let through; success closes the
    circuit, failure reopens it.
    """

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        recovery_timeout_seconds: float = 60,
        counted_exceptions: Tuple[Type[BaseException], ...] = (Exception,),
    ):
        self.name = name
        self.failure_threshold = failure_threshold
        self.recovery_timeout_seconds = recovery_timeout_seconds
        self.counted_exceptions = counted_exceptions

        self.state = CircuitState.CLOSED
        self.failure_count = 0
        self.opened_at: Optional[float] = None
        self._half_open_in_flight = False

    def call(self, func: Callable, *args, **kwargs) -> Any:
        self.allow_request()
        try:
            result = func(*args, **kwargs)
        except self.counted_exceptions:
            self.record_failure()
            raise
        except BaseException:
            self._half_open_in_flight = False
            raise
        self.record_success()
        return result

    async def call_async(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        self.allow_request()
        try:
            result = await func(*args, **kwargs)
        except self.counted_exceptions:
            self.record_failure()
            raise
        except BaseException:
            # cancelled or uncounted: the trial slot must not stay taken
            self._half_open_in_flight = False
            raise
        self.record_success()
        return result

    def allow_request(self):
        if self.state == CircuitState.CLOSED:
            return

        if self.state == CircuitState.OPEN and self._cooled_down():
            self._transition(CircuitState.HALF_OPEN)
            self._half_open_in_flight = True
            return

        if self.state == CircuitState.HALF_OPEN and not self._half_open_in_flight:
            self._half_open_in_flight = True
            return

        logger.warning(
            "Circuit not closed, rejecting call",
            extra={"circuit_breaker": self.name, "state": self.state.value, "failure_count": self.failure_count}
        )
        raise CircuitBreakerOpenError(f"circuit {self.name} is open")

    def record_success(self):
        self._half_open_in_flight = False
        if self.state != CircuitState.CLOSED:
            self._transition(CircuitState.CLOSED)
        self.failure_count = 0
        self.opened_at = None

    def record_failure(self):
        self._half_open_in_flight = False
        self.failure_count += 1

        if self.state == CircuitState.HALF_OPEN or self.failure_count >= self.failure_threshold:
            self.opened_at = time.monotonic()
            if self.state != CircuitState.OPEN:
                self._transition(CircuitState.OPEN)

    def reset(self):
        self._half_open_in_flight = False
        self._transition(CircuitState.CLOSED)
        self.failure_count = 0
        self.opened_at = None

    def get_state(self) -> dict:
        retry_in = None
        if self.state == CircuitState.OPEN and self.opened_at is not None:
            retry_in = max(0.0, self.recovery_timeout_seconds - (time.monotonic() - self.opened_at))

        return {
            "name": self.name,
            "state": self.state.value,
            "failure_count": self.failure_count,
            "failure_threshold": self.failure_threshold,
            "retry_in_seconds": round(retry_in, 1) if retry_in is not None else None,
        }

    def _cooled_down(self) -> bool:
        if self.opened_at is None:
            return True
        return time.monotonic() - self.opened_at >= self.recovery_timeout_seconds

    def _transition(self, state: CircuitState):
        if state == self.state:
            return

        log = logger.error if state == CircuitState.OPEN else logger.info
        log(
            f"Circuit {self.name}: {self.state.value} -> {state.value}",
            extra={
                "circuit_breaker": self.name,
                "from_state": self.state.value,
                "to_state": state.value,
                "failure_count": self.failure_count,
            }
        )
        self.state = state


narrative_circuit_breaker = CircuitBreaker(name="narrative_llm", failure_threshold=5, recovery_timeout_seconds=60)

metadata_circuit_breaker = CircuitBreaker(name="metadata_llm", failure_threshold=3, recovery_timeout_seconds=30)
