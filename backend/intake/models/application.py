"""
Adoption Intake Backend: Application SQLAlchemy Model
========================================================

What:  ORM model for the `applications` table, one citizen's request against
       a service.
How:   `status` moves through the lifecycle defined in
       intake.services.lifecycle. The timestamps below are only ever written
       by ApplicationService.

Column Notes:
    - submitted_at: set when the application first reaches SUBMITTED, never
      cleared afterwards
    - reviewed_at / reviewed_by: stamped by a staff review-class update
    - application_data: free-form form payload, not interpreted here
    - updated_at: bumped by every mutation

    Index on (applicant_id, created_at) serves "my applications"; the status
    index serves the staff queue.
"""

import enum
from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import JSON, Enum, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base, UTCDateTime, utc_now


class ApplicationStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    SUBMITTED = "SUBMITTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    REQUIRES_DOCUMENTS = "REQUIRES_DOCUMENTS"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Application(Base):
    """
    Lifecycle:
        DRAFT → SUBMITTED → UNDER_REVIEW → REQUIRES_DOCUMENTS | APPROVED | REJECTED
        REQUIRES_DOCUMENTS loops back to SUBMITTED or UNDER_REVIEW.
    """

    __tablename__ = "applications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    service_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("services.id"),
        nullable=False,
    )

    applicant_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=False,
    )

    status: Mapped[ApplicationStatus] = mapped_column(
        Enum(ApplicationStatus, name="application_status"),
        nullable=False,
        default=ApplicationStatus.DRAFT,
        server_default=text("'DRAFT'"),
    )

    application_data: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
    )

    notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Applicant-authored notes",
    )

    staff_notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        default=None,
        comment="Staff-internal notes",
    )

    submitted_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    reviewed_at: Mapped[Optional[datetime]] = mapped_column(UTCDateTime(), nullable=True)

    reviewed_by: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("users.id"),
        nullable=True,
        comment="Staff user who last reviewed",
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    __table_args__ = (
        Index("idx_applications_applicant_created", "applicant_id", "created_at"),
        Index("idx_applications_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Application(id={self.id}, service_id={self.service_id}, "
            f"status='{self.status}')>"
        )
