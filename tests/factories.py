"""
Builders for devices, requests and pings shared by the test modules
"""

import os
import sys
import uuid
from datetime import datetime, timedelta, timezone

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))
os.environ.setdefault("VRPA_DATABASE_URL", "sqlite://")

from vrpa.schemas.checkout import CheckoutRequest, ScheduleRequest
from vrpa.schemas.device import Device, DeviceType
from vrpa.schemas.ping import PingRecord
from vrpa.schemas.team_member import TeamMember

BASE_TIME = datetime(2026, 3, 1, 9, 0, tzinfo=timezone.utc)

class FixedClock:
    """Deterministic replacement for utcnow"""

    def __init__(self, now=BASE_TIME):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now

def make_device(**overrides) -> Device:
    data = {
        "id": str(uuid.uuid4()),
        "name": "KALI-HV-001",
        "type": DeviceType.HYPER_V,
        "ip_address": "192.168.1.100",
        "root_password": "toor",
        "sharefile_link": "https://share.example.com/d/abc123",
        "created_at": BASE_TIME,
        "updated_at": BASE_TIME,
    }
    data.update(overrides)
    return Device(**data)

def make_member(name="Sarah Johnson", email="sarah.johnson@company.com") -> TeamMember:
    return TeamMember(id=str(uuid.uuid4()), name=name, email=email)

def checkout_request(member: TeamMember = None, **overrides) -> CheckoutRequest:
    member = member or make_member()
    data = {
        "team_member_id": member.id,
        "team_member_name": member.name,
        "client_name": "Acme Corporation",
        "checkout_date": BASE_TIME,
        "expected_return_date": BASE_TIME + timedelta(days=4),
    }
    data.update(overrides)
    return CheckoutRequest(**data)

def schedule_request(member: TeamMember = None, **overrides) -> ScheduleRequest:
    member = member or make_member(name="Mike Chen", email="mike.chen@company.com")
    data = {
        "team_member_id": member.id,
        "team_member_name": member.name,
        "client_name": "Globex",
        "scheduled_date": BASE_TIME + timedelta(days=10),
        "expected_end_date": BASE_TIME + timedelta(days=14),
    }
    data.update(overrides)
    return ScheduleRequest(**data)

def ping(device_id, timestamp, status, response_time=None) -> PingRecord:
    return PingRecord(device_id=device_id, timestamp=timestamp, status=status, response_time=response_time)
