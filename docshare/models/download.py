"""Download ledger model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer
from docshare.database import Base
from docshare.models.user import utcnow


class Download(Base):
    """One row per download action; rows are never updated or deleted."""
    __tablename__ = "downloads"

    id = Column(Integer, primary_key=True)
    # No foreign key: rows may point at documents that were never created or were deleted.
    document_id = Column(Integer, nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    downloaded_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
