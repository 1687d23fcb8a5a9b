"""
Adoption Intake Backend: Service SQLAlchemy Model
====================================================

What:  ORM model for the `services` table. A service defines a class of
       request and the documents every application against it must carry.
How:   `required_documents` is an ordered JSON list of DocumentType values.
       Rows are never updated or deleted once created.
"""

import enum
from datetime import datetime
from typing import List, Optional

from sqlalchemy import JSON, Boolean, Enum, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base, UTCDateTime, utc_now


class ServiceType(str, enum.Enum):
    ADOPTION_RECOMMENDATION = "ADOPTION_RECOMMENDATION"


class DocumentType(str, enum.Enum):
    """Tags classifying what an uploaded file is for."""

    SKCK = "SKCK"  # Surat Keterangan Catatan Kepolisian (police clearance)
    HEALTH_CERTIFICATE = "HEALTH_CERTIFICATE"
    PSYCHOLOGICAL_CERTIFICATE = "PSYCHOLOGICAL_CERTIFICATE"
    FINANCIAL_STATEMENT = "FINANCIAL_STATEMENT"
    FAMILY_CONSENT = "FAMILY_CONSENT"
    BIRTH_CERTIFICATE = "BIRTH_CERTIFICATE"
    MARRIAGE_CERTIFICATE = "MARRIAGE_CERTIFICATE"
    PHOTO = "PHOTO"
    OTHER = "OTHER"


class Service(Base):
    """
    A government service citizens can apply for.

    Query Patterns:
        - Active catalog: SELECT ... WHERE is_active ORDER BY name
        - Requirement lookup: joined from applications on service_id
    """

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    type: Mapped[ServiceType] = mapped_column(
        Enum(ServiceType, name="service_type"),
        nullable=False,
        default=ServiceType.ADOPTION_RECOMMENDATION,
    )

    required_documents: Mapped[List[str]] = mapped_column(
        JSON,
        nullable=False,
        default=list,
        comment="Ordered document type tags every application must include",
    )

    is_active: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        default=True,
        server_default=text("true"),
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id}, name='{self.name}', active={self.is_active})>"
