"""
SQLAlchemy Repository Implementations
=====================================

Concrete repositories backed by the tables in ``vrpa.models``. All of them
share one Session; nothing is committed until ``SqlRepositories.commit``.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy.orm import Session

from vrpa.database.connection import SessionLocal
from vrpa.models.device import Device as DeviceRow
from vrpa.models.email_template import EmailTemplate as EmailTemplateRow
from vrpa.models.ping_history import PingHistory as PingHistoryRow
from vrpa.models.team_member import TeamMember as TeamMemberRow
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

logger = structlog.get_logger(__name__)


def _device_from_row(row: DeviceRow) -> Device:
    return Device.model_validate({
        "id": row.id,
        "name": row.name,
        "type": row.type,
        "custom_type": row.custom_type,
        "ip_address": row.ip_address,
        "root_password": row.root_password,
        "sharefile_link": row.sharefile_link,
        "status": row.status,
        "checkout_status": row.checkout_status,
        "current_checkout": row.current_checkout,
        "next_scheduled": row.next_scheduled,
        "created_at": row.created_at,
        "updated_at": row.updated_at,
    })


def _apply_device(row: DeviceRow, device: Device) -> None:
    row.name = device.name
    row.type = device.type.value
    row.custom_type = device.custom_type
    row.ip_address = device.ip_address
    row.root_password = device.root_password
    row.sharefile_link = device.sharefile_link
    row.status = device.status.value
    row.checkout_status = device.checkout_status.value
    row.current_checkout = device.current_checkout.model_dump(mode="json") if device.current_checkout else None
    row.next_scheduled = device.next_scheduled.model_dump(mode="json") if device.next_scheduled else None
    row.created_at = device.created_at
    row.updated_at = device.updated_at


class SqlDeviceRepository(DeviceRepository):

    def __init__(self, session: Session):
        self.session = session

    def get(self, device_id: str) -> Optional[Device]:
        row = self.session.get(DeviceRow, device_id)
        return _device_from_row(row) if row else None

    def list(self) -> List[Device]:
        rows = self.session.query(DeviceRow).order_by(DeviceRow.created_at).all()
        return [_device_from_row(row) for row in rows]

    def add(self, device: Device) -> Device:
        row = DeviceRow(id=device.id)
        _apply_device(row, device)
        self.session.add(row)
        self.session.flush()
        return device

    def save(self, device: Device) -> Device:
        row = self.session.get(DeviceRow, device.id)
        if row is None:
            return self.add(device)
        _apply_device(row, device)
        self.session.flush()
        return device

    def delete(self, device_id: str) -> bool:
        row = self.session.get(DeviceRow, device_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True


class SqlTeamMemberRepository(TeamMemberRepository):

    def __init__(self, session: Session):
        self.session = session

    def get(self, member_id: str) -> Optional[TeamMember]:
        row = self.session.get(TeamMemberRow, member_id)
        return TeamMember.model_validate(row) if row else None

    def list(self) -> List[TeamMember]:
        rows = self.session.query(TeamMemberRow).order_by(TeamMemberRow.name).all()
        return [TeamMember.model_validate(row) for row in rows]

    def add(self, member: TeamMember) -> TeamMember:
        self.session.add(TeamMemberRow(**member.model_dump()))
        self.session.flush()
        return member

    def save(self, member: TeamMember) -> TeamMember:
        row = self.session.get(TeamMemberRow, member.id)
        if row is None:
            return self.add(member)
        row.name = member.name
        row.email = member.email
        self.session.flush()
        return member

    def delete(self, member_id: str) -> bool:
        row = self.session.get(TeamMemberRow, member_id)
        if row is None:
            return False
        self.session.delete(row)
        self.session.flush()
        return True


class SqlPingHistoryRepository(PingHistoryRepository):

    def __init__(self, session: Session):
        self.session = session

    def append(self, record: PingRecord) -> PingRecord:
        self.session.add(PingHistoryRow(
            device_id=record.device_id,
            timestamp=record.timestamp,
            status=record.status.value,
            response_time=record.response_time
        ))
        self.session.flush()
        return record

    def list(self, device_id: Optional[str] = None, since: Optional[datetime] = None) -> List[PingRecord]:
        query = self.session.query(PingHistoryRow)
        if device_id is not None:
            query = query.filter(PingHistoryRow.device_id == device_id)
        if since is not None:
            query = query.filter(PingHistoryRow.timestamp >= since)
        rows = query.order_by(PingHistoryRow.timestamp, PingHistoryRow.id).all()
        return [PingRecord.model_validate(row) for row in rows]

    def prune_older_than(self, cutoff: datetime) -> int:
        removed = self.session.query(PingHistoryRow).filter(
            PingHistoryRow.timestamp < cutoff
        ).delete(synchronize_session=False)
        if removed:
            logger.info("Pruned ping history", removed=removed, cutoff=cutoff.isoformat())
        return removed

    def delete_for_device(self, device_id: str) -> int:
        return self.session.query(PingHistoryRow).filter(
            PingHistoryRow.device_id == device_id
        ).delete(synchronize_session=False)


class SqlEmailTemplateRepository(EmailTemplateRepository):

    def __init__(self, session: Session):
        self.session = session

    def get(self) -> str:
        row = self.session.get(EmailTemplateRow, 1)
        return row.body if row else ""

    def put(self, template: str) -> str:
        row = self.session.get(EmailTemplateRow, 1)
        if row is None:
            self.session.add(EmailTemplateRow(id=1, body=template))
        else:
            row.body = template
        self.session.flush()
        return template


class SqlRepositories(Repositories):
    """Repositories bound to a single SQLAlchemy session."""

    def __init__(self, session: Session):
        self.session = session
        self.devices = SqlDeviceRepository(session)
        self.team_members = SqlTeamMemberRepository(session)
        self.pings = SqlPingHistoryRepository(session)
        self.email_template = SqlEmailTemplateRepository(session)

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


@contextmanager
def open_repositories():
    """Repositories over a fresh session from the application engine"""
    session = SessionLocal()
    try:
        yield SqlRepositories(session)
    finally:
        session.close()
