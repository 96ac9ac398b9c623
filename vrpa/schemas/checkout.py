"""
Checkout and scheduled deployment Pydantic schemas
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from vrpa.schemas.common import ensure_utc

class Checkout(BaseModel):
    """A team member's possession of a device for a client engagement"""
    id: str
    device_id: str
    team_member_id: str
    team_member_name: str = Field(..., description="Member name captured when the checkout was made")
    client_name: str
    checkout_date: datetime
    expected_return_date: datetime
    actual_return_date: Optional[datetime] = None
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator("checkout_date", "expected_return_date", "actual_return_date")
    @classmethod
    def _to_utc(cls, value):
        return ensure_utc(value)

class ScheduledDeployment(BaseModel):
    """The single future reservation slot of a device"""
    id: str
    device_id: str
    team_member_id: str
    team_member_name: str = Field(..., description="Member name captured when the schedule was made")
    client_name: str
    scheduled_date: datetime
    expected_end_date: datetime
    notes: Optional[str] = None
    is_active: bool = True

    @field_validator("scheduled_date", "expected_end_date")
    @classmethod
    def _to_utc(cls, value):
        return ensure_utc(value)

class CheckoutRequest(BaseModel):
    """Accepted checkout request, as handed to the lifecycle manager"""
    team_member_id: str
    team_member_name: str
    client_name: str
    checkout_date: datetime
    expected_return_date: datetime
    notes: Optional[str] = None

class ScheduleRequest(BaseModel):
    """Accepted schedule request, as handed to the lifecycle manager"""
    team_member_id: str
    team_member_name: str
    client_name: str
    scheduled_date: datetime
    expected_end_date: datetime
    notes: Optional[str] = None

class CheckoutCreate(BaseModel):
    """Schema for a checkout submitted through the API"""
    team_member_id: str = Field("", description="Team member taking the device")
    client_name: str = Field("", description="Client the device is deployed for")
    checkout_date: Optional[datetime] = Field(None, description="Defaults to now")
    expected_return_date: Optional[datetime] = None
    notes: Optional[str] = None

class ReturnRequest(BaseModel):
    """Schema for returning a device"""
    actual_return_date: Optional[datetime] = Field(None, description="Defaults to now")

class ScheduleCreate(BaseModel):
    """Schema for a future reservation submitted through the API"""
    team_member_id: str = ""
    client_name: str = ""
    scheduled_date: Optional[datetime] = None
    expected_end_date: Optional[datetime] = None
    notes: Optional[str] = None
