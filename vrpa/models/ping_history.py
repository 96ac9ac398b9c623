"""
Ping history model for reachability probes
"""

from sqlalchemy import Column, BigInteger, Integer, String, DateTime, Float, Index
from vrpa.database.connection import Base

class PingHistory(Base):
    """Append-only reachability probe results, keyed by device id"""

    __tablename__ = "ping_history"
    __table_args__ = (
        Index("ix_ping_history_device_timestamp", "device_id", "timestamp"),
    )

    id = Column(BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True)
    device_id = Column(String(36), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    status = Column(String(20), nullable=False)  # online, offline, unknown
    response_time = Column(Float)  # milliseconds

    def __repr__(self):
        return f"<PingHistory(device_id={self.device_id}, timestamp={self.timestamp}, status={self.status})>"
