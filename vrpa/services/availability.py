"""
Device availability rules
"""

import re
from datetime import datetime
from typing import Iterable, Optional

from vrpa.schemas.common import ensure_utc
from vrpa.schemas.device import Device

_IPV4_PATTERN = re.compile(r"([0-9]{1,3}\.){3}[0-9]{1,3}")

def is_available(device: Device) -> bool:
    """True unless the device has an active checkout"""
    checkout = device.current_checkout
    return checkout is None or not checkout.is_active

def can_schedule(device: Device, proposed_start: datetime) -> bool:
    """Whether a reservation starting at ``proposed_start`` fits the device.

    Only the current checkout is consulted: starting exactly on its expected
    return date is allowed. The existing scheduled deployment is ignored since
    a new schedule replaces it.
    """
    if is_available(device):
        return True
    return ensure_utc(proposed_start) >= device.current_checkout.expected_return_date

def is_valid_ip(ip: str) -> bool:
    """Dotted-quad IPv4 address with every octet in 0..255"""
    if not ip or not _IPV4_PATTERN.fullmatch(ip):
        return False
    return all(0 <= int(part) <= 255 for part in ip.split("."))

def is_ip_conflict(ip: str, devices: Iterable[Device], exclude_device_id: Optional[str] = None) -> bool:
    """True if another device already uses ``ip``.

    The device being edited is excluded by id so it may keep its own address.
    """
    return any(
        device.ip_address == ip and device.id != exclude_device_id
        for device in devices
    )

def checkout_status_text(device: Device) -> str:
    if device.current_checkout and device.current_checkout.is_active:
        return f"Checked out to {device.current_checkout.team_member_name}"
    if device.next_scheduled and device.next_scheduled.is_active:
        return f"Scheduled for {device.next_scheduled.team_member_name}"
    return "Available"
