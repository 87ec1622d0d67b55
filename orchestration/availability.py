"""
Process-wide inference availability.

AvailabilityMonitor owns the single AvailabilityStatus value. Readers use
`current`; writers go through refresh() or report(), which replace the whole
value. A refresh requested while another is in flight is dropped, so a
periodic timer can never pile up probes. Re-probing uses a fixed interval.
"""

import asyncio
import logging
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from inference import InferenceBackend, ModelInventory

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_S = 60.0


class Availability(str, Enum):
    CHECKING = "checking"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class AvailabilityStatus(BaseModel):
    state: Availability = Availability.CHECKING
    models: Optional[List[str]] = None
    required: List[str] = Field(default_factory=list)

    @property
    def available(self) -> bool:
        return self.state == Availability.AVAILABLE

    @property
    def missing(self) -> List[str]:
        return ModelInventory(installed=self.models or [], required=self.required).missing


class AvailabilityMonitor:
    """
    Narrow read/refresh interface around the availability status.

    All mutation happens from the event loop that owns the monitor, so the
    in-flight flag is the only guard needed.
    """

    def __init__(self, backend: InferenceBackend, interval_s: float = DEFAULT_INTERVAL_S):
        self.backend = backend
        self.interval_s = interval_s
        self._status = AvailabilityStatus(required=backend.catalog.required())
        self._in_flight = False
        self._loop_task: Optional[asyncio.Task] = None

    @property
    def current(self) -> AvailabilityStatus:
        return self._status

    @property
    def probing(self) -> bool:
        return self._in_flight

    async def refresh(self) -> AvailabilityStatus:
        """
        Probe the service and replace the status.

        Returns the current status untouched when a probe is already running.
        """
        if self._in_flight:
            logger.debug("Availability probe already in flight, skipping")
            return self._status

        self._in_flight = True
        try:
            available = await self.backend.probe_availability()
            inventory = await self.backend.inventory() if available else None
            self._status = AvailabilityStatus(
                state=Availability.AVAILABLE if available else Availability.UNAVAILABLE,
                models=inventory.installed if inventory is not None else None,
                required=inventory.required if inventory is not None else self.backend.catalog.required(),
            )
            logger.info("Inference availability: %s", self._status.state.value)
            if inventory is not None and not inventory.complete:
                logger.warning("Missing models (run: ollama pull <model>): %s", ", ".join(inventory.missing))
        finally:
            self._in_flight = False
        return self._status

    def report(self, available: bool) -> None:
        """Record the outcome of a probe made elsewhere (e.g. task pre-flight)."""
        models = self._status.models if available else None
        self._status = AvailabilityStatus(
            state=Availability.AVAILABLE if available else Availability.UNAVAILABLE,
            models=models,
            required=self._status.required,
        )

    async def run_periodic(self) -> None:
        """Probe now, then every interval_s seconds until cancelled."""
        while True:
            await self.refresh()
            await asyncio.sleep(self.interval_s)

    def start(self) -> None:
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self.run_periodic(), name="availability-monitor")

    async def stop(self) -> None:
        if self._loop_task is None:
            return
        self._loop_task.cancel()
        try:
            await self._loop_task
        except asyncio.CancelledError:
            pass
        self._loop_task = None
