"""
Adoption Intake Backend: ApplicationDocument SQLAlchemy Model
================================================================

What:  Metadata for a file attached to an application.
How:   The file itself lives outside the database; `file_path` is an opaque
       locator. Several rows of the same document_type may exist for one
       application, re-uploads add rows instead of replacing them.
"""

from datetime import datetime

from sqlalchemy import Enum, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base, UTCDateTime, utc_now
from intake.models.service import DocumentType


class ApplicationDocument(Base):
    __tablename__ = "application_documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # No ON DELETE CASCADE: documents are removed one by one through the
    # document guard.
    application_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("applications.id"),
        nullable=False,
    )

    document_type: Mapped[DocumentType] = mapped_column(
        Enum(DocumentType, name="document_type"),
        nullable=False,
    )

    file_name: Mapped[str] = mapped_column(String(255), nullable=False)

    file_path: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        comment="Locator of the stored file; relative paths resolve under STORAGE_ROOT",
    )

    file_size: Mapped[int] = mapped_column(Integer, nullable=False, comment="Size in bytes")

    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)

    uploaded_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_application_documents_application", "application_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ApplicationDocument(id={self.id}, application_id={self.application_id}, "
            f"type='{self.document_type}')>"
        )
