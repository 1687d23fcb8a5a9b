"""
Adoption Intake Backend: User SQLAlchemy Model
=================================================

What:  ORM model for the `users` table: citizens who apply and staff who
       review.
How:   Roles are stored but not enforced by any handler; authorization is
       outside this service.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import Enum, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from intake.database import Base, UTCDateTime, utc_now


class UserRole(str, enum.Enum):
    CITIZEN = "CITIZEN"
    STAFF = "STAFF"
    ADMIN = "ADMIN"


class User(Base):
    """A citizen, staff member or administrator."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    email: Mapped[str] = mapped_column(
        String(320),
        nullable=False,
        unique=True,
        comment="Login email, unique across users",
    )

    full_name: Mapped[str] = mapped_column(String(255), nullable=False)

    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, default=None)

    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"),
        nullable=False,
    )

    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        nullable=False,
        default=utc_now,
        server_default=text("CURRENT_TIMESTAMP"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
