from __future__ import annotations

import threading
import time
from typing import Any, Callable, Optional, Tuple

from app_platform.config.breaker import BreakerConfig
from app_platform.errors.taxonomy import ServiceUnavailableError


class CircuitBreaker:
    """Circuit breaker guarding calls to a flaky upstream.

    States: CLOSED -> OPEN -> HALF_OPEN -> CLOSED
    - failure_threshold: failures to OPEN within window_seconds
    - half_open_after_s: time to transition OPEN -> HALF_OPEN
    Only one probe call is admitted while HALF_OPEN.
    """

    def __init__(
        self,
        *,
        failure_threshold: int = 5,
        window_seconds: int = 30,
        half_open_after_s: int = 15,
        name: str = "upstream",
    ) -> None:
        self._lock = threading.Lock()
        self._state = "CLOSED"  # CLOSED | OPEN | HALF_OPEN
        self._failures: list[Tuple[float, str]] = []  # (ts_monotonic, error type)
        self._opened_at: float = 0.0
        self._probe_inflight = False
        self._threshold = max(1, int(failure_threshold))
        self._window_s = float(window_seconds)
        self._half_open_after = float(half_open_after_s)
        self._name = name

    @classmethod
    def from_config(cls, config: BreakerConfig, *, name: str = "upstream") -> "CircuitBreaker":
        return cls(
            failure_threshold=config.failure_threshold,
            window_seconds=config.window_seconds,
            half_open_after_s=config.half_open_after_seconds,
            name=name,
        )

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    def _prune(self, now: float) -> None:
        cutoff = now - self._window_s
        self._failures = [p for p in self._failures if p[0] >= cutoff]

    def allow_call(self) -> bool:
        now = time.monotonic()
        with self._lock:
            if self._state == "OPEN":
                if (now - self._opened_at) >= self._half_open_after and not self._probe_inflight:
                    self._state = "HALF_OPEN"
                    self._probe_inflight = True
                    return True
                return False
            if self._state == "HALF_OPEN":
                return not self._probe_inflight
            return True

    def on_success(self) -> None:
        with self._lock:
            self._state = "CLOSED"
            self._probe_inflight = False
            self._failures.clear()

    def on_failure(self, exc: Optional[BaseException] = None) -> None:
        now = time.monotonic()
        key = type(exc).__name__ if exc is not None else "generic"
        with self._lock:
            self._failures.append((now, key))
            self._prune(now)
            if self._state == "HALF_OPEN" or len(self._failures) >= self._threshold:
                self._state = "OPEN"
                self._opened_at = now
                self._probe_inflight = False

    def wrap_call(self, fn: Callable[[], Any]) -> Any:
        """Run ``fn`` once under the breaker; failures are never retried here."""

        if not self.allow_call():
            raise ServiceUnavailableError(f"{self._name} circuit open", code="BREAKER_OPEN")
        try:
            result = fn()
        except Exception as exc:  # noqa: BLE001 - recorded then re-raised
            self.on_failure(exc)
            raise
        self.on_success()
        return result

    def snapshot(self) -> dict:
        with self._lock:
            return {
                "name": self._name,
                "state": self._state,
                "failures": len(self._failures),
                "window_s": self._window_s,
                "half_open_after_s": self._half_open_after,
            }
