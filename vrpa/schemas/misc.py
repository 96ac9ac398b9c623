"""
Email template and monitor Pydantic schemas
"""

from pydantic import BaseModel
from typing import Optional
from datetime import datetime

class EmailTemplatePayload(BaseModel):
    template: str

class RenderedEmail(BaseModel):
    device_id: str
    body: str

class MonitorStatus(BaseModel):
    running: bool
    interval_seconds: float
    rounds_completed: int
    last_round_at: Optional[datetime] = None
