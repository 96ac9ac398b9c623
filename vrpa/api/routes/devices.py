"""
Device management and lifecycle endpoints
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status
from datetime import timedelta
import asyncio
from typing import Optional
import uuid
import structlog

from vrpa.api.deps import get_current_user, get_lifecycle_manager, get_monitor, get_repositories, load_device
from vrpa.collectors.ping_collector import PingMonitor
from vrpa.core.errors import VRPAError
from vrpa.repositories.base import Repositories
from vrpa.schemas.checkout import Checkout, CheckoutCreate, ReturnRequest, ScheduleCreate, ScheduledDeployment
from vrpa.schemas.common import utcnow
from vrpa.schemas.device import Device, DeviceCreate, DeviceListResponse, DeviceType, DeviceUpdate
from vrpa.schemas.misc import RenderedEmail
from vrpa.schemas.ping import PingRecord, UptimeReport
from vrpa.services.availability import checkout_status_text
from vrpa.services.email import render_email
from vrpa.services.lifecycle import DeviceLifecycleManager, device_locks
from vrpa.services.uptime import format_uptime, overall_uptime, uptime_history
from vrpa.services.validation import validate_checkout, validate_device, validate_return, validate_schedule

logger = structlog.get_logger(__name__)
router = APIRouter(dependencies=[Depends(get_current_user)])

@router.get("/devices", response_model=DeviceListResponse)
def get_devices(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
    status: Optional[str] = Query(None),
    checkout_status: Optional[str] = Query(None),
    repos: Repositories = Depends(get_repositories)
):
    """Get list of devices with filtering options"""

    devices = repos.devices.list()

    # Apply filters
    if status:
        devices = [d for d in devices if d.status.value == status]
    if checkout_status:
        devices = [d for d in devices if d.checkout_status.value == checkout_status]

    return DeviceListResponse(
        devices=devices[skip:skip + limit],
        total=len(devices),
        skip=skip,
        limit=limit
    )

@router.get("/devices/{device_id}", response_model=Device)
def get_device(device_id: str, repos: Repositories = Depends(get_repositories)):
    """Get a specific device by id"""
    return load_device(repos, device_id)

@router.post("/devices", response_model=Device, status_code=status.HTTP_201_CREATED)
def create_device(
    device_data: DeviceCreate,
    background_tasks: BackgroundTasks,
    repos: Repositories = Depends(get_repositories),
    monitor: PingMonitor = Depends(get_monitor)
):
    """Create a new device"""

    validate_device(device_data, repos)

    now = utcnow()
    device = Device(
        id=str(uuid.uuid4()),
        **device_data.model_dump(),
        created_at=now,
        updated_at=now
    )
    repos.devices.add(device)
    repos.commit()

    logger.info("Device created", device_id=device.id, name=device.name)

    # Immediately ping the new device
    if monitor.running:
        background_tasks.add_task(monitor.ping_device, device)
    return device

@router.put("/devices/{device_id}", response_model=Device)
def update_device(
    device_id: str,
    device_data: DeviceUpdate,
    repos: Repositories = Depends(get_repositories)
):
    """Update a device; provided fields are merged over the stored ones"""

    with device_locks.lock_for(device_id):
        device = load_device(repos, device_id)
        updated = device.model_copy(update={
            **device_data.model_dump(exclude_unset=True, exclude_none=True),
            "updated_at": utcnow()
        })
        if updated.type != DeviceType.CUSTOM:
            updated.custom_type = None
        validate_device(updated, repos, exclude_device_id=device_id)
        repos.devices.save(updated)
        repos.commit()

    logger.info("Device updated", device_id=device_id)
    return updated

@router.delete("/devices/{device_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_device(device_id: str, repos: Repositories = Depends(get_repositories)):
    """Delete a device together with its ping history"""

    with device_locks.lock_for(device_id):
        load_device(repos, device_id)
        removed_pings = repos.pings.delete_for_device(device_id)
        repos.devices.delete(device_id)
        repos.commit()
    device_locks.discard(device_id)

    logger.info("Device deleted", device_id=device_id, removed_pings=removed_pings)

@router.post("/devices/{device_id}/checkout", response_model=Checkout, status_code=status.HTTP_201_CREATED)
def checkout_device(
    device_id: str,
    checkout_data: CheckoutCreate,
    repos: Repositories = Depends(get_repositories),
    manager: DeviceLifecycleManager = Depends(get_lifecycle_manager)
):
    """Check a device out to a team member"""

    with device_locks.lock_for(device_id):
        device = load_device(repos, device_id)
        request = validate_checkout(device, checkout_data, repos)
        return manager.checkout(device_id, request)

@router.post("/devices/{device_id}/return", response_model=Device)
def return_device(
    device_id: str,
    return_data: Optional[ReturnRequest] = None,
    repos: Repositories = Depends(get_repositories),
    manager: DeviceLifecycleManager = Depends(get_lifecycle_manager)
):
    """Return a checked-out device"""

    with device_locks.lock_for(device_id):
        device = load_device(repos, device_id)
        actual_return_date = validate_return(device, return_data)
        return manager.return_device(device_id, actual_return_date)

@router.post("/devices/{device_id}/schedule", response_model=ScheduledDeployment, status_code=status.HTTP_201_CREATED)
def schedule_device(
    device_id: str,
    schedule_data: ScheduleCreate,
    repos: Repositories = Depends(get_repositories),
    manager: DeviceLifecycleManager = Depends(get_lifecycle_manager)
):
    """Reserve the device's next deployment slot"""

    with device_locks.lock_for(device_id):
        device = load_device(repos, device_id)
        request = validate_schedule(device, schedule_data, repos)
        return manager.schedule(device_id, request)

@router.delete("/devices/{device_id}/schedule", response_model=Device)
def cancel_schedule(device_id: str, manager: DeviceLifecycleManager = Depends(get_lifecycle_manager)):
    """Cancel the device's scheduled deployment"""
    return manager.cancel_schedule(device_id)

@router.get("/devices/{device_id}/status")
def get_device_status(device_id: str, repos: Repositories = Depends(get_repositories)):
    """Get current reachability and checkout state"""

    device = load_device(repos, device_id)
    return {
        "device_id": device.id,
        "status": device.status,
        "checkout_status": device.checkout_status,
        "status_text": checkout_status_text(device),
        "updated_at": device.updated_at
    }

def _load_for_ping(monitor: PingMonitor, device_id: str) -> Device:
    with monitor.repositories_factory() as repos:
        return load_device(repos, device_id)

@router.post("/devices/{device_id}/ping", response_model=PingRecord)
async def ping_device(device_id: str, monitor: PingMonitor = Depends(get_monitor)):
    """Probe a device right now and record the result"""

    device = await asyncio.to_thread(_load_for_ping, monitor, device_id)
    record = await monitor.ping_device(device)
    if record is None:
        raise VRPAError("Failed to record ping")
    return record

@router.get("/devices/{device_id}/uptime", response_model=UptimeReport)
def get_device_uptime(
    device_id: str,
    days: int = Query(30, ge=1, le=365),
    repos: Repositories = Depends(get_repositories)
):
    """Daily and overall uptime for the trailing ``days`` days"""

    load_device(repos, device_id)
    pings = repos.pings.list(device_id=device_id, since=utcnow() - timedelta(days=days))
    history = uptime_history(pings)
    overall = overall_uptime(history)

    return UptimeReport(
        device_id=device_id,
        days=days,
        overall_uptime=overall,
        overall_uptime_display=format_uptime(overall),
        history=history
    )

@router.get("/devices/{device_id}/email", response_model=RenderedEmail)
def get_device_email(device_id: str, repos: Repositories = Depends(get_repositories)):
    """Deployment email with the device's share link filled in"""

    device = load_device(repos, device_id)
    return RenderedEmail(device_id=device_id, body=render_email(repos.email_template.get(), device))
