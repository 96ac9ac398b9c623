"""
Reachability probers

A prober either returns a completed ProbeResult (reachable or unreachable) or
raises TransientProbeFailure when the probe itself could not finish.
"""

import asyncio
import errno
import random
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import aiohttp
import structlog

from vrpa.core.config import settings
from vrpa.core.errors import TransientProbeFailure
from vrpa.services.classifier import ProbeOutcome

logger = structlog.get_logger(__name__)

# Socket errors meaning the far side (or a router) answered with a refusal
_UNREACHABLE_ERRNOS = {errno.ECONNREFUSED, errno.EHOSTUNREACH, errno.ENETUNREACH}

@dataclass(frozen=True)
class ProbeResult:
    outcome: ProbeOutcome
    response_time: Optional[float] = None  # milliseconds

class Prober(ABC):
    """Probes a single network address"""

    @abstractmethod
    async def probe(self, address: str) -> ProbeResult:
        pass

    async def close(self):
        pass

class SimulatedProber(Prober):
    """Stand-in for a real network check, for demos and development.

    Addresses ending in a multiple of 10 are often offline, multiples of 7
    have intermittent probe failures, everything else is mostly online.
    """

    def __init__(self, rng: random.Random = None, delay_scale: float = None):
        self.rng = rng or random.Random()
        self.delay_scale = settings.simulated_delay_scale if delay_scale is None else delay_scale

    async def probe(self, address: str) -> ProbeResult:
        # Simulate network delay of 500-1500 ms
        await asyncio.sleep((self.rng.random() * 1000 + 500) / 1000 * self.delay_scale)

        try:
            last_octet = int(address.split(".")[3])
        except (IndexError, ValueError):
            last_octet = 0
        roll = self.rng.random()

        if last_octet % 10 == 0:
            if roll > 0.8:
                return ProbeResult(ProbeOutcome.UNREACHABLE)
            return ProbeResult(ProbeOutcome.REACHABLE, self.rng.random() * 50 + 10)
        if last_octet % 7 == 0:
            if roll > 0.7:
                raise TransientProbeFailure(address, "simulated timeout")
            return ProbeResult(ProbeOutcome.REACHABLE, self.rng.random() * 100 + 20)
        if roll > 0.95:
            return ProbeResult(ProbeOutcome.UNREACHABLE)
        return ProbeResult(ProbeOutcome.REACHABLE, self.rng.random() * 30 + 5)

class HttpProber(Prober):
    """Probes a device by issuing an HTTP HEAD request to its address.

    Any HTTP response, whatever the status code, proves the host is up.
    """

    def __init__(self, timeout: float = None, port: Optional[int] = None, session: aiohttp.ClientSession = None):
        self.timeout = aiohttp.ClientTimeout(total=timeout or settings.ping_timeout_seconds)
        self.port = port if port is not None else settings.probe_port
        self.session = session
        self._owns_session = session is None

    def _url(self, address: str) -> str:
        if self.port:
            return f"http://{address}:{self.port}/"
        return f"http://{address}/"

    async def probe(self, address: str) -> ProbeResult:
        if self.session is None:
            self.session = aiohttp.ClientSession()

        started = time.perf_counter()
        try:
            async with self.session.head(self._url(address), timeout=self.timeout, allow_redirects=False):
                elapsed = (time.perf_counter() - started) * 1000
                return ProbeResult(ProbeOutcome.REACHABLE, elapsed)
        except aiohttp.ClientConnectorError as e:
            if e.os_error is not None and e.os_error.errno in _UNREACHABLE_ERRNOS:
                return ProbeResult(ProbeOutcome.UNREACHABLE)
            raise TransientProbeFailure(address, str(e)) from e
        except asyncio.TimeoutError as e:
            raise TransientProbeFailure(address, "timeout") from e
        except aiohttp.ClientError as e:
            raise TransientProbeFailure(address, str(e)) from e

    async def close(self):
        if self.session and self._owns_session:
            await self.session.close()
            self.session = None

def build_prober(mode: str = None) -> Prober:
    mode = mode or settings.probe_mode
    if mode == "http":
        return HttpProber()
    if mode == "simulated":
        return SimulatedProber()
    raise ValueError(f"Unknown probe mode: {mode}")
