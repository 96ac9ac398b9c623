"""
Device Pydantic schemas
"""

from enum import Enum
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from vrpa.schemas.checkout import Checkout, ScheduledDeployment
from vrpa.schemas.common import ensure_utc

class DeviceType(str, Enum):
    HYPER_V = "Hyper-V"
    VMWARE = "VMWare"
    PHYSICAL = "Physical"
    CUSTOM = "Custom"

class DeviceStatus(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"
    UNKNOWN = "unknown"

class CheckoutStatus(str, Enum):
    AVAILABLE = "available"
    CHECKED_OUT = "checked-out"
    SCHEDULED = "scheduled"

class Device(BaseModel):
    """A tracked vRPA unit"""
    id: str
    name: str
    type: DeviceType
    custom_type: Optional[str] = Field(None, description="Label used when type is Custom")
    ip_address: str
    root_password: str
    sharefile_link: str
    status: DeviceStatus = DeviceStatus.UNKNOWN
    checkout_status: CheckoutStatus = CheckoutStatus.AVAILABLE
    current_checkout: Optional[Checkout] = None
    next_scheduled: Optional[ScheduledDeployment] = None
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

    @field_validator("created_at", "updated_at")
    @classmethod
    def _to_utc(cls, value):
        return ensure_utc(value)

class DeviceBase(BaseModel):
    """Base device schema"""
    name: str = Field("", description="Device name")
    type: DeviceType = Field(DeviceType.HYPER_V, description="Type of device")
    custom_type: Optional[str] = Field(None, description="Label used when type is Custom")
    ip_address: str = Field("", description="IPv4 address")
    root_password: str = Field("", description="Root credential")
    sharefile_link: str = Field("", description="Share link sent to clients")

class DeviceCreate(DeviceBase):
    """Schema for creating a device"""
    pass

class DeviceUpdate(BaseModel):
    """Schema for updating a device; provided fields are merged over the stored device"""
    name: Optional[str] = None
    type: Optional[DeviceType] = None
    custom_type: Optional[str] = None
    ip_address: Optional[str] = None
    root_password: Optional[str] = None
    sharefile_link: Optional[str] = None

class DeviceListResponse(BaseModel):
    """Schema for device list response"""
    devices: List[Device]
    total: int
    skip: int
    limit: int
