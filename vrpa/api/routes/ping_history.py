"""
Ping history endpoints
"""

from fastapi import APIRouter, Depends, Query, status
from datetime import timedelta
from typing import Optional
import structlog

from vrpa.api.deps import get_current_user, get_lifecycle_manager, get_repositories
from vrpa.repositories.base import Repositories
from vrpa.schemas.common import utcnow
from vrpa.schemas.ping import PingCreate, PingListResponse, PingRecord
from vrpa.services.lifecycle import DeviceLifecycleManager

logger = structlog.get_logger(__name__)
router = APIRouter(dependencies=[Depends(get_current_user)])

@router.get("/ping-history", response_model=PingListResponse)
def get_ping_history(
    device_id: Optional[str] = Query(None),
    days: Optional[int] = Query(None, ge=1),
    repos: Repositories = Depends(get_repositories)
):
    """Get ping history, optionally for one device and a trailing window of days"""

    since = utcnow() - timedelta(days=days) if days else None
    pings = repos.pings.list(device_id=device_id, since=since)
    return PingListResponse(pings=pings, total=len(pings))

@router.post("/ping-history", response_model=PingRecord, status_code=status.HTTP_201_CREATED)
def create_ping(
    ping_data: PingCreate,
    manager: DeviceLifecycleManager = Depends(get_lifecycle_manager)
):
    """Record an externally produced ping result"""
    return manager.record_ping(ping_data.device_id, ping_data.status, ping_data.response_time)
