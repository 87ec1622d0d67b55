"""
Health checks for deployment readiness.

Provides:
- /health/live: Liveness probe (process is running)
- /health/ready: Readiness probe (orchestration can accept tasks)

Readiness never depends on the inference service itself; its last known
availability is reported for information only.
"""

import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .availability import AvailabilityMonitor


@dataclass
class HealthStatus:
    """Health status response."""

    status: str  # "healthy", "unhealthy"
    timestamp: str
    ready: bool
    uptime_seconds: float
    backend: str  # "ollama", "stub"
    inference: str  # last known availability
    message: str


class HealthChecker:
    """
    Health checker for orchestration readiness.

    Invariant: health checks do NOT call the inference service.
    """

    def __init__(
        self,
        start_time: float,
        backend: str = "ollama",
        monitor: Optional[AvailabilityMonitor] = None,
    ):
        self.start_time = start_time
        self.backend = backend
        self.monitor = monitor

    def _inference_state(self) -> str:
        if self.monitor is None:
            return "unknown"
        return self.monitor.current.state.value

    def _status(self, ready: bool, message: str) -> HealthStatus:
        return HealthStatus(
            status="healthy" if ready else "unhealthy",
            timestamp=datetime.now(timezone.utc).isoformat(),
            ready=ready,
            uptime_seconds=time.time() - self.start_time,
            backend=self.backend,
            inference=self._inference_state(),
            message=message,
        )

    def check_live(self) -> HealthStatus:
        """Always healthy if this code runs."""
        return self._status(True, "Process is running")

    def check_ready(self) -> HealthStatus:
        """
        Ready when the task units and the inference boundary can be loaded.

        Not blocked by Ollama being down: tasks then fail with an explicit
        error message instead.
        """
        try:
            from orchestration.units import UNIT_TYPES
            from inference import InferenceBackend  # noqa: F401

            ready = len(UNIT_TYPES) == 4
            message = "Task units initialized" if ready else "Task units incomplete"
        except ImportError as e:
            ready = False
            message = f"Task unit initialization failed: {e}"

        return self._status(ready, message)

    @staticmethod
    def to_dict(status: HealthStatus) -> Dict[str, Any]:
        return asdict(status)
