"""
Checkout/schedule lifecycle manager

A device sits on two independent axes: possession (available or checked out)
and reservation (a pending scheduled deployment or none). The manager owns
every transition on both axes and the recording of ping results.

Callers are expected to check ``is_available``/``can_schedule`` first (see
``vrpa.services.validation``). The manager itself does not re-check: calling
``checkout`` on a checked-out device replaces the active checkout, and
``schedule`` always replaces the pending reservation.
"""

import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Callable, Dict, Optional

import structlog

from vrpa.core.config import settings
from vrpa.core.errors import NotFoundError
from vrpa.repositories.base import Repositories
from vrpa.schemas.checkout import Checkout, CheckoutRequest, ScheduledDeployment, ScheduleRequest
from vrpa.schemas.common import ensure_utc, utcnow
from vrpa.schemas.device import CheckoutStatus, Device, DeviceStatus
from vrpa.schemas.ping import PingRecord

logger = structlog.get_logger(__name__)

def new_id() -> str:
    return str(uuid.uuid4())

class DeviceLockRegistry:
    """Process-wide mutual exclusion per device id.

    Each transition is a read-modify-write of the whole device; holding the
    device's lock for its duration keeps concurrent requests and probes from
    overwriting each other's changes.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}

    def lock_for(self, device_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(device_id)
            if lock is None:
                lock = self._locks[device_id] = threading.RLock()
            return lock

    def discard(self, device_id: str) -> None:
        with self._guard:
            self._locks.pop(device_id, None)

device_locks = DeviceLockRegistry()

class DeviceLifecycleManager:
    """Applies state transitions to devices stored in ``repos``"""

    def __init__(
        self,
        repos: Repositories,
        clock: Callable[[], datetime] = utcnow,
        retention_days: Optional[int] = None,
        locks: DeviceLockRegistry = device_locks
    ):
        self.repos = repos
        self.clock = clock
        self.retention_days = settings.ping_retention_days if retention_days is None else retention_days
        self.locks = locks

    @contextmanager
    def _transition(self, device_id: str):
        with self.locks.lock_for(device_id):
            device = self.repos.devices.get(device_id)
            if device is None:
                raise NotFoundError("Device", device_id)
            try:
                yield device
                self.repos.commit()
            except Exception:
                self.repos.rollback()
                raise

    def checkout(self, device_id: str, request: CheckoutRequest) -> Checkout:
        """Hand the device to a team member"""
        with self._transition(device_id) as device:
            checkout = Checkout(
                id=new_id(),
                device_id=device_id,
                team_member_id=request.team_member_id,
                team_member_name=request.team_member_name,
                client_name=request.client_name,
                checkout_date=request.checkout_date,
                expected_return_date=request.expected_return_date,
                notes=request.notes,
                is_active=True
            )
            device.current_checkout = checkout
            device.checkout_status = CheckoutStatus.CHECKED_OUT
            device.updated_at = self.clock()
            self.repos.devices.save(device)

        logger.info("Device checked out", device_id=device_id,
                    checkout_id=checkout.id, team_member_id=checkout.team_member_id)
        return checkout

    def return_device(self, device_id: str, actual_return_date: Optional[datetime] = None) -> Device:
        """Close the current checkout.

        The closed checkout stays attached to the device as its most recent
        history entry. Without a current checkout nothing changes.
        """
        with self._transition(device_id) as device:
            if device.current_checkout is None:
                logger.info("Return ignored, device has no checkout", device_id=device_id)
                return device

            device.current_checkout = device.current_checkout.model_copy(update={
                "is_active": False,
                "actual_return_date": ensure_utc(actual_return_date) or self.clock(),
            })
            device.checkout_status = CheckoutStatus.AVAILABLE
            device.updated_at = self.clock()
            self.repos.devices.save(device)

        logger.info("Device returned", device_id=device_id, checkout_id=device.current_checkout.id)
        return device

    def schedule(self, device_id: str, request: ScheduleRequest) -> ScheduledDeployment:
        """Reserve the device's single future slot, replacing any earlier reservation"""
        with self._transition(device_id) as device:
            scheduled = ScheduledDeployment(
                id=new_id(),
                device_id=device_id,
                team_member_id=request.team_member_id,
                team_member_name=request.team_member_name,
                client_name=request.client_name,
                scheduled_date=request.scheduled_date,
                expected_end_date=request.expected_end_date,
                notes=request.notes,
                is_active=True
            )
            replaced = device.next_scheduled
            device.next_scheduled = scheduled
            device.updated_at = self.clock()
            self.repos.devices.save(device)

        logger.info("Device scheduled", device_id=device_id, schedule_id=scheduled.id,
                    replaced_schedule_id=replaced.id if replaced else None)
        return scheduled

    def cancel_schedule(self, device_id: str) -> Device:
        with self._transition(device_id) as device:
            device.next_scheduled = None
            device.updated_at = self.clock()
            self.repos.devices.save(device)

        logger.info("Device schedule cancelled", device_id=device_id)
        return device

    def record_ping(
        self,
        device_id: str,
        status: DeviceStatus,
        response_time: Optional[float] = None
    ) -> PingRecord:
        """Append a ping result and reflect it in the device's status.

        Records past the retention window are pruned on the way. The device's
        checkout state is left alone.
        """
        with self._transition(device_id) as device:
            now = self.clock()
            record = PingRecord(
                device_id=device_id,
                timestamp=now,
                status=status,
                response_time=response_time
            )
            self.repos.pings.append(record)
            self.repos.pings.prune_older_than(now - timedelta(days=self.retention_days))

            device.status = record.status
            device.updated_at = now
            self.repos.devices.save(device)

        logger.debug("Ping recorded", device_id=device_id, status=record.status.value,
                     response_time=response_time)
        return record
