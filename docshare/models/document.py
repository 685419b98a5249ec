"""Document model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from docshare.database import Base
from docshare.models.user import utcnow


class Document(Base):
    """Represents a shared document owned by the teacher who uploaded it."""
    __tablename__ = "documents"
    __table_args__ = (
        UniqueConstraint("uploaded_by", "title", name="uq_documents_uploader_title"),
        # Deleted ids must not be handed out again; download rows keep pointing at them.
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    file_path = Column(String(1024), nullable=False)
    file_type = Column(String(255), nullable=True)
    uploaded_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)
