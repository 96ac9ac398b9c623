"""
Ping monitor control endpoints
"""

from fastapi import APIRouter, Depends

from vrpa.api.deps import get_current_user, get_monitor
from vrpa.collectors.ping_collector import PingMonitor
from vrpa.schemas.misc import MonitorStatus

router = APIRouter(dependencies=[Depends(get_current_user)])

def _status(monitor: PingMonitor) -> MonitorStatus:
    return MonitorStatus(
        running=monitor.running,
        interval_seconds=monitor.interval,
        rounds_completed=monitor.rounds_completed,
        last_round_at=monitor.last_round_at
    )

@router.get("/monitor", response_model=MonitorStatus)
async def get_monitor_status(monitor: PingMonitor = Depends(get_monitor)):
    return _status(monitor)

@router.post("/monitor/start", response_model=MonitorStatus)
async def start_monitor(monitor: PingMonitor = Depends(get_monitor)):
    """Start pinging all devices on the configured interval"""
    await monitor.start()
    return _status(monitor)

@router.post("/monitor/stop", response_model=MonitorStatus)
async def stop_monitor(monitor: PingMonitor = Depends(get_monitor)):
    """Stop scheduling ping rounds; a round already running completes"""
    await monitor.stop()
    return _status(monitor)
