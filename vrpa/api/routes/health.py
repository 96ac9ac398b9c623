"""
Health check endpoints
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from sqlalchemy import text
import structlog

from vrpa.api.deps import get_monitor
from vrpa.collectors.ping_collector import PingMonitor
from vrpa.database.connection import get_database
from vrpa.schemas.common import utcnow

logger = structlog.get_logger(__name__)
router = APIRouter()

@router.get("/health")
async def health_check():
    """Liveness only; needs no database or token"""
    return {
        "status": "ok",
        "timestamp": utcnow().isoformat()
    }

@router.get("/health/detailed")
def detailed_health_check(
    db: Session = Depends(get_database),
    monitor: PingMonitor = Depends(get_monitor)
):
    """Database connectivity, fleet size and ping monitor state"""
    device_count = None
    try:
        device_count = db.execute(text("SELECT COUNT(*) FROM devices")).scalar()
        db_status = "connected"
    except Exception as e:
        logger.error("Database health check failed", error=str(e))
        db_status = "disconnected"

    return {
        "status": "ok" if db_status == "connected" else "unhealthy",
        "database": db_status,
        "devices": device_count,
        "monitor": {
            "running": monitor.running,
            "rounds_completed": monitor.rounds_completed,
            "last_round_at": monitor.last_round_at.isoformat() if monitor.last_round_at else None
        },
        "timestamp": utcnow().isoformat()
    }
