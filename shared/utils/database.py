from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Generator
import logging

from ..config.settings import settings

logger = logging.getLogger(__name__)


def is_memory_sqlite(database_url: str) -> bool:
    """In-memory sqlite lives in one connection, so it needs a static pool."""
    return database_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in database_url


def create_database_engine(database_url: str):
    """Create database engine."""
    if database_url.startswith("sqlite"):
        if is_memory_sqlite(database_url):
            return create_engine(
                database_url,
                connect_args={"check_same_thread": False},
                poolclass=StaticPool,
            )
        return create_engine(database_url, connect_args={"check_same_thread": False})

    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_recycle=300,
    )


engine = create_database_engine(settings.database_url)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """Get database session."""
    db = SessionLocal()
    try:
        yield db
    except Exception as e:
        logger.error(f"Database error: {e}")
        db.rollback()
        raise
    finally:
        db.close()


class DatabaseManager:
    """Database connection manager with health checks."""

    @staticmethod
    def check_health() -> bool:
        """Check database health."""
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            return False

    @staticmethod
    def initialize_database():
        """Create all tables."""
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")
            raise
