"""
In-memory repository implementations, used by tests and embedded callers
"""
import threading
from datetime import datetime
from typing import Dict, List, Optional

from vrpa.repositories.base import (
    DeviceRepository,
    EmailTemplateRepository,
    PingHistoryRepository,
    Repositories,
    TeamMemberRepository,
)
from vrpa.schemas.device import Device
from vrpa.schemas.ping import PingRecord
from vrpa.schemas.team_member import TeamMember


class InMemoryDeviceRepository(DeviceRepository):

    def __init__(self):
        self._devices: Dict[str, Device] = {}

    def get(self, device_id: str) -> Optional[Device]:
        device = self._devices.get(device_id)
        return device.model_copy(deep=True) if device else None

    def list(self) -> List[Device]:
        devices = sorted(self._devices.values(), key=lambda d: d.created_at)
        return [d.model_copy(deep=True) for d in devices]

    def add(self, device: Device) -> Device:
        self._devices[device.id] = device.model_copy(deep=True)
        return device

    def save(self, device: Device) -> Device:
        self._devices[device.id] = device.model_copy(deep=True)
        return device

    def delete(self, device_id: str) -> bool:
        return self._devices.pop(device_id, None) is not None


class InMemoryTeamMemberRepository(TeamMemberRepository):

    def __init__(self):
        self._members: Dict[str, TeamMember] = {}

    def get(self, member_id: str) -> Optional[TeamMember]:
        return self._members.get(member_id)

    def list(self) -> List[TeamMember]:
        return list(self._members.values())

    def add(self, member: TeamMember) -> TeamMember:
        self._members[member.id] = member
        return member

    def save(self, member: TeamMember) -> TeamMember:
        self._members[member.id] = member
        return member

    def delete(self, member_id: str) -> bool:
        return self._members.pop(member_id, None) is not None


class InMemoryPingHistoryRepository(PingHistoryRepository):

    def __init__(self):
        self._records: List[PingRecord] = []
        self._lock = threading.Lock()

    def append(self, record: PingRecord) -> PingRecord:
        with self._lock:
            self._records.append(record)
        return record

    def list(self, device_id: Optional[str] = None, since: Optional[datetime] = None) -> List[PingRecord]:
        with self._lock:
            records = list(self._records)
        if device_id is not None:
            records = [r for r in records if r.device_id == device_id]
        if since is not None:
            records = [r for r in records if r.timestamp >= since]
        return sorted(records, key=lambda r: r.timestamp)

    def prune_older_than(self, cutoff: datetime) -> int:
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.timestamp >= cutoff]
            return before - len(self._records)

    def delete_for_device(self, device_id: str) -> int:
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.device_id != device_id]
            return before - len(self._records)


class InMemoryEmailTemplateRepository(EmailTemplateRepository):

    def __init__(self, template: str = ""):
        self._template = template

    def get(self) -> str:
        return self._template

    def put(self, template: str) -> str:
        self._template = template
        return template


class InMemoryRepositories(Repositories):
    """Writes are visible immediately; commit and rollback do nothing."""

    def __init__(self):
        self.devices = InMemoryDeviceRepository()
        self.team_members = InMemoryTeamMemberRepository()
        self.pings = InMemoryPingHistoryRepository()
        self.email_template = InMemoryEmailTemplateRepository()

    def commit(self) -> None:
        pass

    def rollback(self) -> None:
        pass
