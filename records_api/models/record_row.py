"""ORM model for stored records."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, String, Text
from sqlalchemy.orm import declarative_base


Base = declarative_base()


class RecordRow(Base):  # type: ignore[valid-type]
    __tablename__ = "record"
    __updated_at_column__ = "updated_at"

    record_id = Column(String, primary_key=True)
    owner_id = Column(String, nullable=True)
    visibility = Column(String, nullable=False, default="public")
    title = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)


__all__ = ["RecordRow", "Base"]
