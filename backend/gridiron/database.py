import logging
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker
from gridiron.config import settings

logger = logging.getLogger(__name__)

def _build_engine(database_url: str):
    url = make_url(database_url)
    connect_args = {}
    if url.get_backend_name() == "sqlite":
        # Request handlers run on a threadpool
        connect_args["check_same_thread"] = False
    return create_engine(database_url, echo=False, connect_args=connect_args)

# Create engine
engine = _build_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def _ensure_sqlite_directory():
    url = make_url(settings.database_url)
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

def create_tables():
    """Create all tables in the database (no-op for tables that already exist)"""
    # Import all models to ensure they're registered
    from gridiron.models import Base
    _ensure_sqlite_directory()
    Base.metadata.create_all(bind=engine)
    logger.info("Database schema ready")

def dispose_engine():
    """Release pooled connections on shutdown"""
    engine.dispose()
    logger.info("Database connections closed")

def get_db():
    """Dependency to get database session"""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
