"""
Request validation run before any lifecycle transition or CRUD write

Every check here completes before state is touched; a failing request raises
``ValidationFailure`` (or ``ConflictError``) and leaves storage unchanged.
"""

import re
from datetime import datetime
from typing import Callable, Dict, Optional, Union

from vrpa.core.errors import ConflictError, NotFoundError, ValidationFailure
from vrpa.repositories.base import Repositories
from vrpa.schemas.checkout import CheckoutCreate, CheckoutRequest, ReturnRequest, ScheduleCreate, ScheduleRequest
from vrpa.schemas.common import ensure_utc, utcnow
from vrpa.schemas.device import Device, DeviceBase, DeviceType
from vrpa.schemas.team_member import TeamMemberCreate
from vrpa.services.availability import can_schedule, is_available, is_ip_conflict, is_valid_ip

_EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

def _raise_if(errors: Dict[str, str]) -> None:
    if errors:
        raise ValidationFailure(errors)

def validate_device(data: Union[DeviceBase, Device], repos: Repositories, exclude_device_id: Optional[str] = None) -> None:
    """Check a full device payload (create, or update merged over the stored device)"""
    errors = {}

    if not data.name.strip():
        errors["name"] = "Device name is required"

    if not data.ip_address.strip():
        errors["ip_address"] = "IP address is required"
    elif not is_valid_ip(data.ip_address):
        errors["ip_address"] = "Invalid IP address format"
    elif is_ip_conflict(data.ip_address, repos.devices.list(), exclude_device_id):
        errors["ip_address"] = "IP address already in use"

    if not data.root_password.strip():
        errors["root_password"] = "Root password is required"

    if not data.sharefile_link.strip():
        errors["sharefile_link"] = "Sharefile link is required"

    if data.type == DeviceType.CUSTOM and not (data.custom_type or "").strip():
        errors["custom_type"] = "Custom type name is required"

    _raise_if(errors)

def _team_member_name(repos: Repositories, member_id: str) -> str:
    member = repos.team_members.get(member_id)
    if member is None:
        raise NotFoundError("Team member", member_id)
    return member.name

def validate_checkout(
    device: Device,
    data: CheckoutCreate,
    repos: Repositories,
    clock: Callable[[], datetime] = utcnow
) -> CheckoutRequest:
    """Validate a checkout and resolve the team member's display name"""
    if not is_available(device):
        raise ConflictError(f"Device is already checked out to {device.current_checkout.team_member_name}")

    errors = {}
    checkout_date = ensure_utc(data.checkout_date) or clock()
    expected_return_date = ensure_utc(data.expected_return_date)

    if not data.team_member_id:
        errors["team_member_id"] = "Team member is required"
    if not data.client_name.strip():
        errors["client_name"] = "Client name is required"
    if expected_return_date is None:
        errors["expected_return_date"] = "Expected return date is required"
    elif expected_return_date <= checkout_date:
        errors["expected_return_date"] = "Return date must be after checkout date"
    _raise_if(errors)

    return CheckoutRequest(
        team_member_id=data.team_member_id,
        team_member_name=_team_member_name(repos, data.team_member_id),
        client_name=data.client_name.strip(),
        checkout_date=checkout_date,
        expected_return_date=expected_return_date,
        notes=(data.notes or "").strip() or None
    )

def validate_return(
    device: Device,
    data: Optional[ReturnRequest],
    clock: Callable[[], datetime] = utcnow
) -> datetime:
    """Resolve the actual return date, which may not precede the checkout date"""
    actual_return_date = ensure_utc(data.actual_return_date if data else None) or clock()

    checkout = device.current_checkout
    if checkout is not None and actual_return_date < checkout.checkout_date:
        raise ValidationFailure({"actual_return_date": "Return date cannot be before checkout date"})
    return actual_return_date

def validate_schedule(
    device: Device,
    data: ScheduleCreate,
    repos: Repositories,
    clock: Callable[[], datetime] = utcnow
) -> ScheduleRequest:
    """Validate a future reservation and resolve the team member's display name"""
    errors = {}
    scheduled_date = ensure_utc(data.scheduled_date)
    expected_end_date = ensure_utc(data.expected_end_date)

    if not data.team_member_id:
        errors["team_member_id"] = "Team member is required"
    if not data.client_name.strip():
        errors["client_name"] = "Client name is required"

    if scheduled_date is None:
        errors["scheduled_date"] = "Scheduled date is required"
    elif scheduled_date <= clock():
        errors["scheduled_date"] = "Scheduled date must be in the future"
    elif not can_schedule(device, scheduled_date):
        errors["scheduled_date"] = "Device is not available on this date"

    if expected_end_date is None:
        errors["expected_end_date"] = "Expected end date is required"
    elif scheduled_date is not None and expected_end_date <= scheduled_date:
        errors["expected_end_date"] = "End date must be after start date"
    _raise_if(errors)

    return ScheduleRequest(
        team_member_id=data.team_member_id,
        team_member_name=_team_member_name(repos, data.team_member_id),
        client_name=data.client_name.strip(),
        scheduled_date=scheduled_date,
        expected_end_date=expected_end_date,
        notes=(data.notes or "").strip() or None
    )

def validate_team_member(data: TeamMemberCreate) -> None:
    errors = {}
    if not data.name.strip():
        errors["name"] = "Name is required"
    if not data.email.strip():
        errors["email"] = "Email is required"
    elif not _EMAIL_PATTERN.fullmatch(data.email.strip()):
        errors["email"] = "Please enter a valid email address"
    _raise_if(errors)
