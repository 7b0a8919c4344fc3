"""
SQLAlchemy ORM models: projects and their filed documents.
"""
from sqlalchemy import (
    Column, Integer, String, Text, BigInteger, JSON,
    DateTime, ForeignKey, Index, text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from assemble.database import Base

LIVE_NAME_INDEX = "uq_documents_live_name"


# ─────────────────────────────────────────────────────────────────────────────
# 1. Projects
# ─────────────────────────────────────────────────────────────────────────────
class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    active_disciplines = Column(JSON, default=list)   # ordered consultant disciplines
    active_trades = Column(JSON, default=list)        # ordered contractor trades
    created_at = Column(DateTime, server_default=func.now())

    documents = relationship("Document", back_populates="project", cascade="all, delete-orphan")


# ─────────────────────────────────────────────────────────────────────────────
# 2. Documents
# ─────────────────────────────────────────────────────────────────────────────
class Document(Base):
    __tablename__ = "documents"
    __table_args__ = (
        # One live document per folder + display name; allocation retries on it.
        Index(
            LIVE_NAME_INDEX,
            "project_id", "path", "display_name",
            unique=True,
            sqlite_where=text("deleted_at IS NULL"),
            postgresql_where=text("deleted_at IS NULL"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    path = Column(Text, nullable=False, default="")     # folder path, e.g. Finance/Invoices
    name = Column(Text, nullable=False)                 # original upload file name
    display_name = Column(Text, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    mime_type = Column(String(255))
    size_bytes = Column(BigInteger)
    checksum = Column(String(64), index=True)           # SHA-256 of binary content
    filing_metadata = Column("metadata", JSON)          # context, override flag, original name
    deleted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    project = relationship("Project", back_populates="documents")

    @property
    def storage_key(self) -> str:
        return f"{self.path}/{self.display_name}" if self.path else self.display_name
