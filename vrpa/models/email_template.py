"""
Email template model
"""

from sqlalchemy import Column, Integer, Text, DateTime
from sqlalchemy.sql import func
from vrpa.database.connection import Base

class EmailTemplate(Base):
    """Single-row table holding the deployment email body"""

    __tablename__ = "email_template"

    id = Column(Integer, primary_key=True, default=1)
    body = Column(Text, nullable=False, default="")
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
