"""
Ping monitor for the vRPA Manager
Probes every device on a fixed interval and records the results
"""

import asyncio
from contextlib import nullcontext
from datetime import datetime
from typing import Callable, ContextManager, List, Optional

import structlog

from vrpa.collectors.probers import Prober, build_prober
from vrpa.core.config import settings
from vrpa.core.errors import NotFoundError, TransientProbeFailure
from vrpa.repositories.base import Repositories
from vrpa.repositories.sql import open_repositories
from vrpa.schemas.common import utcnow
from vrpa.schemas.device import Device
from vrpa.schemas.ping import PingRecord
from vrpa.services.classifier import ProbeOutcome, classify
from vrpa.services.lifecycle import DeviceLifecycleManager

logger = structlog.get_logger(__name__)

RepositoriesFactory = Callable[[], ContextManager[Repositories]]

def fixed_repositories(repos: Repositories) -> RepositoriesFactory:
    """Factory that always hands out the same repositories, e.g. in-memory ones"""
    return lambda: nullcontext(repos)

class PingMonitor:
    """Recurring supervisor that pings all known devices.

    Each round probes every device concurrently. A probe that errors or times
    out is recorded as an ``unknown`` ping for that device only; it never ends
    the loop. ``stop`` keeps the next round from starting but lets probes
    already in flight finish.
    """

    def __init__(
        self,
        repositories_factory: RepositoriesFactory = open_repositories,
        prober: Optional[Prober] = None,
        interval: Optional[float] = None
    ):
        self.repositories_factory = repositories_factory
        self.prober = prober or build_prober()
        self.interval = settings.ping_interval_seconds if interval is None else interval
        self.running = False
        self.rounds_completed = 0
        self.last_round_at: Optional[datetime] = None
        self._task: Optional[asyncio.Task] = None
        self._wakeup: Optional[asyncio.Event] = None

    async def start(self):
        """Start the monitor loop in the background"""
        if self.running:
            return
        self.running = True
        self._wakeup = asyncio.Event()
        self._task = asyncio.create_task(self._monitor_loop())
        logger.info("Starting ping monitor", interval=self.interval)

    async def stop(self):
        """Stop scheduling rounds and wait for the current one to finish"""
        if not self.running:
            return
        self.running = False
        self._wakeup.set()
        if self._task:
            await self._task
            self._task = None
        await self.prober.close()
        logger.info("Ping monitor stopped", rounds_completed=self.rounds_completed)

    async def _monitor_loop(self):
        """Main monitor loop"""
        while self.running:
            try:
                await self.run_round()
            except Exception as e:
                logger.error("Error in ping round", error=str(e))
            try:
                await asyncio.wait_for(self._wakeup.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

    async def run_round(self) -> List[PingRecord]:
        """Ping every known device once"""
        with self.repositories_factory() as repos:
            devices = repos.devices.list()

        results = await asyncio.gather(*(self.ping_device(device) for device in devices))
        self.rounds_completed += 1
        self.last_round_at = utcnow()
        logger.info("Ping round completed", devices=len(devices))
        return [record for record in results if record is not None]

    async def ping_device(self, device: Device) -> Optional[PingRecord]:
        """Probe one device and record the classified result"""
        response_time = None
        try:
            result = await self.prober.probe(device.ip_address)
            status = classify(result.outcome)
            response_time = result.response_time
        except TransientProbeFailure as e:
            logger.warning("Probe failed", device_id=device.id, reason=e.reason)
            status = classify(ProbeOutcome.ERROR)
        except Exception as e:
            logger.error("Failed to ping device", device_id=device.id, name=device.name, error=str(e))
            status = classify(ProbeOutcome.ERROR)

        try:
            return await asyncio.to_thread(self._record, device.id, status, response_time)
        except NotFoundError:
            logger.info("Device removed before its ping was recorded", device_id=device.id)
        except Exception as e:
            logger.error("Failed to record ping", device_id=device.id, error=str(e))
        return None

    def _record(self, device_id, status, response_time) -> PingRecord:
        with self.repositories_factory() as repos:
            return DeviceLifecycleManager(repos).record_ping(device_id, status, response_time)

async def main():
    """Main entry point for running the monitor without the API"""
    from vrpa.core.logging import configure_logging
    configure_logging()

    monitor = PingMonitor()
    try:
        await monitor.start()
        await asyncio.Event().wait()
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("Received interrupt signal")
    finally:
        await monitor.stop()

if __name__ == "__main__":
    asyncio.run(main())
