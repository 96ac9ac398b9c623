"""
Repository Interfaces
=====================

Abstract interfaces for device, team member, ping history and email template
storage. The lifecycle manager and API only talk to these, so the same logic
runs against the SQL store or the in-memory store.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from vrpa.schemas.device import Device
from vrpa.schemas.ping import PingRecord
from vrpa.schemas.team_member import TeamMember


class DeviceRepository(ABC):
    """Abstract repository for device persistence operations."""

    @abstractmethod
    def get(self, device_id: str) -> Optional[Device]:
        """Return the device with ``device_id`` or None."""

    @abstractmethod
    def list(self) -> List[Device]:
        """Return all devices ordered by creation time."""

    @abstractmethod
    def add(self, device: Device) -> Device:
        """Insert a new device."""

    @abstractmethod
    def save(self, device: Device) -> Device:
        """
        Replace the stored device with ``device``.

        Args:
            device: Device entity with updated data

        Returns:
            Stored device entity
        """

    @abstractmethod
    def delete(self, device_id: str) -> bool:
        """Delete a device. Returns False if it did not exist."""


class TeamMemberRepository(ABC):
    """Abstract repository for team members."""

    @abstractmethod
    def get(self, member_id: str) -> Optional[TeamMember]:
        pass

    @abstractmethod
    def list(self) -> List[TeamMember]:
        pass

    @abstractmethod
    def add(self, member: TeamMember) -> TeamMember:
        pass

    @abstractmethod
    def save(self, member: TeamMember) -> TeamMember:
        pass

    @abstractmethod
    def delete(self, member_id: str) -> bool:
        pass


class PingHistoryRepository(ABC):
    """Append-only store of ping records."""

    @abstractmethod
    def append(self, record: PingRecord) -> PingRecord:
        pass

    @abstractmethod
    def list(self, device_id: Optional[str] = None, since: Optional[datetime] = None) -> List[PingRecord]:
        """
        Return ping records in ascending timestamp order.

        Args:
            device_id: Only records of this device
            since: Only records at or after this instant
        """

    @abstractmethod
    def prune_older_than(self, cutoff: datetime) -> int:
        """Delete records strictly older than ``cutoff``; returns the count removed."""

    @abstractmethod
    def delete_for_device(self, device_id: str) -> int:
        pass


class EmailTemplateRepository(ABC):
    """Holds the single email template string."""

    @abstractmethod
    def get(self) -> str:
        pass

    @abstractmethod
    def put(self, template: str) -> str:
        pass


class Repositories(ABC):
    """
    The set of repositories sharing one transaction.

    Mutations become durable on ``commit``; ``rollback`` discards them.
    """

    devices: DeviceRepository
    team_members: TeamMemberRepository
    pings: PingHistoryRepository
    email_template: EmailTemplateRepository

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass
