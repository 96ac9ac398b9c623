"""
Ping history and uptime Pydantic schemas
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime

from vrpa.schemas.common import ensure_utc
from vrpa.schemas.device import DeviceStatus

class PingRecord(BaseModel):
    """A point-in-time reachability probe result"""
    device_id: str
    timestamp: datetime
    status: DeviceStatus
    response_time: Optional[float] = Field(None, description="Round trip in milliseconds")

    class Config:
        from_attributes = True
        frozen = True

    @field_validator("timestamp")
    @classmethod
    def _to_utc(cls, value):
        return ensure_utc(value)

class PingCreate(BaseModel):
    """Schema for submitting a ping result; the server stamps the time"""
    device_id: str
    status: DeviceStatus
    response_time: Optional[float] = None

class PingListResponse(BaseModel):
    pings: List[PingRecord]
    total: int

class DeviceUptime(BaseModel):
    """Availability of one device over one UTC calendar day"""
    device_id: str
    date: str = Field(..., description="YYYY-MM-DD")
    uptime_percentage: float
    total_pings: int
    successful_pings: int

class UptimeReport(BaseModel):
    device_id: str
    days: int
    overall_uptime: float
    overall_uptime_display: str
    history: List[DeviceUptime]
