from sqlalchemy import Column, String, DateTime, Text
from sqlalchemy.sql import func
from ..database import Base


class LocalEntry(Base):
    """One key of the on-device key-value store; the value is a JSON document"""

    __tablename__ = "local_entries"

    key = Column(String, primary_key=True, index=True)
    value = Column(Text, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
