"""
Team member model
"""

from sqlalchemy import Column, String
from vrpa.database.connection import Base
import uuid

class TeamMember(Base):
    """Team member who can check out or schedule devices"""

    __tablename__ = "team_members"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)

    def __repr__(self):
        return f"<TeamMember(id={self.id}, name={self.name})>"
