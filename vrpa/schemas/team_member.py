"""
Team member Pydantic schemas
"""

from pydantic import BaseModel, Field
from typing import Optional

class TeamMember(BaseModel):
    id: str
    name: str
    email: str

    class Config:
        from_attributes = True

class TeamMemberCreate(BaseModel):
    name: str = Field("", description="Display name")
    email: str = Field("", description="Contact email")

class TeamMemberUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
