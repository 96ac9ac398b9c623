"""
Device model for vRPA units
"""

from sqlalchemy import Column, String, DateTime, JSON, Text
from sqlalchemy.sql import func
from vrpa.database.connection import Base
import uuid

class Device(Base):
    """Device model representing a tracked remote-access machine

    The current checkout and next scheduled deployment are embedded as JSON
    documents; only the most recent of each is retained.
    """

    __tablename__ = "devices"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)  # Hyper-V, VMWare, Physical, Custom
    custom_type = Column(String(255))
    ip_address = Column(String(45), nullable=False, unique=True, index=True)
    root_password = Column(String(255), nullable=False)
    sharefile_link = Column(Text, nullable=False)
    status = Column(String(20), default="unknown", nullable=False)  # online, offline, unknown
    checkout_status = Column(String(20), default="available", nullable=False)  # available, checked-out, scheduled
    current_checkout = Column(JSON)
    next_scheduled = Column(JSON)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def __repr__(self):
        return f"<Device(id={self.id}, name={self.name}, status={self.status}, checkout_status={self.checkout_status})>"
