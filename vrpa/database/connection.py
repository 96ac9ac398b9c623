"""
Database connection and session management
"""

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
import structlog
from vrpa.core.config import settings

logger = structlog.get_logger(__name__)

def _is_memory_sqlite(database_url: str) -> bool:
    database = make_url(database_url).database
    return not database or database == ":memory:" or "mode=memory" in database_url

def build_engine(database_url: str, echo: bool = False):
    """Create an engine; in-memory SQLite shares one connection across threads"""
    if database_url.startswith("sqlite"):
        if _is_memory_sqlite(database_url):
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
                echo=echo
            )
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            echo=echo
        )

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
        echo=echo
    )

# Create database engine
engine = build_engine(settings.database_url, echo=settings.debug)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Create base class for models
Base = declarative_base()

def get_database() -> Session:
    """Get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_database(bind=None):
    """Initialize database tables"""
    try:
        # Import all models to ensure they are registered
        from vrpa.models import device, team_member, ping_history, email_template, user  # noqa

        # Create all tables
        Base.metadata.create_all(bind=bind or engine)
        logger.info("Database tables created successfully")
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        raise
