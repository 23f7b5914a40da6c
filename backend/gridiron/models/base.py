from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()

class TimestampMixin:
    """created_at/updated_at for rows owned by the application"""
    created_at = Column(DateTime, default=func.now(), nullable=False)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now(), nullable=False)

class CachedRowMixin:
    """Rows mirrored from Sportradar only track when they were last written"""
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())
