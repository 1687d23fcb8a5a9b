"""Create intake tables

Revision ID: 001
Revises: None
Create Date: 2026-10-17 00:00:00.000000+00:00

What:  users, services, applications and application_documents, with the
       status/role/document enums and the lookup indexes.

Rollback: downgrade() drops every table and enum (all data lost).
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

USER_ROLES = ("CITIZEN", "STAFF", "ADMIN")
SERVICE_TYPES = ("ADOPTION_RECOMMENDATION",)
APPLICATION_STATUSES = (
    "DRAFT",
    "SUBMITTED",
    "UNDER_REVIEW",
    "REQUIRES_DOCUMENTS",
    "APPROVED",
    "REJECTED",
)
DOCUMENT_TYPES = (
    "SKCK",
    "HEALTH_CERTIFICATE",
    "PSYCHOLOGICAL_CERTIFICATE",
    "FINANCIAL_STATEMENT",
    "FAMILY_CONSENT",
    "BIRTH_CERTIFICATE",
    "MARRIAGE_CERTIFICATE",
    "PHOTO",
    "OTHER",
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(320), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(50), nullable=True),
        sa.Column("role", sa.Enum(*USER_ROLES, name="user_role"), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "services",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", sa.Enum(*SERVICE_TYPES, name="service_type"), nullable=False),
        sa.Column(
            "required_documents",
            sa.JSON(),
            nullable=False,
            comment="Ordered list of document type tags an application must provide",
        ),
        sa.Column("is_active", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "applications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("service_id", sa.Integer(), sa.ForeignKey("services.id"), nullable=False),
        sa.Column("applicant_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "status",
            sa.Enum(*APPLICATION_STATUSES, name="application_status"),
            server_default=sa.text("'DRAFT'"),
            nullable=False,
        ),
        sa.Column("application_data", sa.JSON(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("staff_notes", sa.Text(), nullable=True),
        sa.Column("submitted_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("reviewed_at", sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column("reviewed_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=True),
        sa.Column(
            "created_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    # "My applications, newest first"
    op.create_index(
        "idx_applications_applicant_created",
        "applications",
        ["applicant_id", "created_at"],
    )
    # Staff review queues filter by status
    op.create_index("idx_applications_status", "applications", ["status"])

    op.create_table(
        "application_documents",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column(
            "application_id",
            sa.Integer(),
            sa.ForeignKey("applications.id"),
            nullable=False,
        ),
        sa.Column(
            "document_type",
            sa.Enum(*DOCUMENT_TYPES, name="document_type"),
            nullable=False,
        ),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.Text(), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("mime_type", sa.String(255), nullable=False),
        sa.Column(
            "uploaded_at",
            sa.TIMESTAMP(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("file_size > 0", name="ck_application_documents_file_size"),
    )
    op.create_index(
        "idx_application_documents_application",
        "application_documents",
        ["application_id"],
    )


def downgrade() -> None:
    op.drop_index("idx_application_documents_application", table_name="application_documents")
    op.drop_table("application_documents")
    op.drop_index("idx_applications_status", table_name="applications")
    op.drop_index("idx_applications_applicant_created", table_name="applications")
    op.drop_table("applications")
    op.drop_table("services")
    op.drop_table("users")

    bind = op.get_bind()
    for enum_name in ("document_type", "application_status", "service_type", "user_role"):
        sa.Enum(name=enum_name).drop(bind, checkfirst=True)
