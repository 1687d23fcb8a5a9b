"""
Adoption Intake Backend: Application Service (Lifecycle Engine)
==================================================================

What:  Every mutation of an application goes through here: creation, the
       generic partial update and the document-gated submit.
How:   Status changes are checked against intake.services.lifecycle and
       document completeness against intake.services.requirements. All
       writes are single UPDATE statements conditioned on the status that
       was read, so a concurrent writer can never be silently overwritten.
Who:   Called by the applications router.

Submit Flow:
    ┌──────────┐    ┌──────────────┐    ┌───────────────┐    ┌─────────────────┐
    │  Load +  │───▶│ status DRAFT │───▶│  requirements │───▶│ UPDATE ... WHERE│
    │  service │    │   check      │    │  complete?    │    │ status = DRAFT  │
    └──────────┘    └──────────────┘    └───────────────┘    └─────────────────┘
         │                 │                    │                     │
     NotFound       InvalidTransition    MissingDocuments    0 rows → InvalidTransition

    Nothing is written unless every step passes.

Timestamp Rules (update):
    1. status set to SUBMITTED            → submitted_at = now
    2. status outside {DRAFT, SUBMITTED}
       and reviewed_by non-null           → reviewed_at = now, reviewed_by stored
    3. reviewed_by without such a status  → reviewed_by stored, reviewed_at untouched
    4. any field applied                  → updated_at = now
"""

import logging
from typing import Any, Dict, Optional, Set

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.config import settings
from intake.database import utc_now
from intake.exceptions import (
    DatabaseError,
    InvalidTransitionError,
    MissingDocumentsError,
    NotFoundError,
    ValidationError,
)
from intake.models.application import Application, ApplicationStatus
from intake.models.document import ApplicationDocument
from intake.models.service import Service
from intake.models.user import User
from intake.schemas.application import (
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationUpdate,
    RequirementSummary,
)
from intake.services import lifecycle, requirements

logger = logging.getLogger(__name__)


class ApplicationService:
    """
    Business logic for the application lifecycle.

    Stateless; each call receives the request's session. Commit and rollback
    belong to get_db_session, so a raised error discards everything the call
    did.
    """

    # ── Creation ──────────────────────────────────────────────────────────

    async def create_application(
        self,
        db: AsyncSession,
        payload: ApplicationCreate,
    ) -> ApplicationResponse:
        """
        Open a new DRAFT application.

        Raises:
            NotFoundError: service or applicant does not exist (→ 404)
            ValidationError: service is inactive and REQUIRE_ACTIVE_SERVICE is on (→ 400)
        """
        service = await db.get(Service, payload.service_id)
        if service is None:
            raise NotFoundError(resource="service", resource_id=payload.service_id)
        if settings.require_active_service and not service.is_active:
            raise ValidationError(
                message=f"Service '{service.name}' is not accepting applications",
                field="service_id",
                context={"service_id": service.id},
            )

        if await db.get(User, payload.applicant_id) is None:
            raise NotFoundError(resource="user", resource_id=payload.applicant_id)

        now = utc_now()
        application = Application(
            service_id=payload.service_id,
            applicant_id=payload.applicant_id,
            status=ApplicationStatus.DRAFT,
            application_data=dict(payload.application_data),
            notes=payload.notes,
            staff_notes=None,
            submitted_at=None,
            reviewed_at=None,
            reviewed_by=None,
            created_at=now,
            updated_at=now,
        )
        db.add(application)
        await db.flush()

        logger.info(
            "Application %s created for service %s by applicant %s",
            application.id,
            application.service_id,
            application.applicant_id,
        )
        return ApplicationResponse.model_validate(application)

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get_application(self, db: AsyncSession, application_id: int) -> ApplicationResponse:
        """
        Raises:
            NotFoundError: No application with this id (→ 404)
        """
        application = await self._load(db, application_id)
        return ApplicationResponse.model_validate(application)

    async def list_applications(
        self,
        db: AsyncSession,
        status: Optional[ApplicationStatus] = None,
        applicant_id: Optional[int] = None,
        service_id: Optional[int] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> ApplicationListResponse:
        """
        Applications matching all given equality filters, newest first.

        Query plan (applicant filter):
            SELECT ... WHERE applicant_id = :id ORDER BY created_at DESC
            → idx_applications_applicant_created
        """
        filters = []
        if status is not None:
            filters.append(Application.status == status)
        if applicant_id is not None:
            filters.append(Application.applicant_id == applicant_id)
        if service_id is not None:
            filters.append(Application.service_id == service_id)

        try:
            result = await db.execute(
                select(Application)
                .where(*filters)
                .order_by(Application.created_at.desc(), Application.id.desc())
                .limit(limit)
                .offset(offset)
            )
            applications = list(result.scalars().all())

            count_result = await db.execute(
                select(func.count(Application.id)).where(*filters)
            )
            total_count = count_result.scalar() or 0
        except SQLAlchemyError as e:
            logger.error("Database error listing applications: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve applications. Please try again.",
                context={"error_type": type(e).__name__},
            )

        return ApplicationListResponse(
            applications=[ApplicationResponse.model_validate(a) for a in applications],
            total_count=total_count,
            limit=limit,
            offset=offset,
        )

    async def get_requirements(self, db: AsyncSession, application_id: int) -> RequirementSummary:
        """Which of the service's required documents are attached and which are missing."""
        result = await db.execute(
            select(Application.id, Service.required_documents)
            .join(Service, Service.id == Application.service_id)
            .where(Application.id == application_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(resource="application", resource_id=application_id)

        uploaded = await self._uploaded_types(db, application_id)
        wanted, provided, missing = requirements.summarize(row.required_documents or [], uploaded)
        return RequirementSummary(
            application_id=application_id,
            is_complete=not missing,
            required=wanted,
            provided=provided,
            missing=missing,
        )

    # ── Generic Update ────────────────────────────────────────────────────

    async def update_application(
        self,
        db: AsyncSession,
        application_id: int,
        payload: ApplicationUpdate,
    ) -> ApplicationResponse:
        """
        Apply a partial update.

        Only fields present in `payload` are written; explicit nulls clear
        nullable fields. A status change must be legal per the transition
        table, and DRAFT → SUBMITTED is refused here (see submit).
        Document completeness is not checked.

        Raises:
            NotFoundError: application or reviewer does not exist (→ 404)
            InvalidTransitionError: illegal status change, or the status
                changed under us before the write (→ 409)
        """
        changes = payload.changes()
        application = await self._load(db, application_id)
        if not changes:
            return ApplicationResponse.model_validate(application)

        observed = application.status
        now = utc_now()
        values: Dict[str, Any] = {}

        target: Optional[ApplicationStatus] = changes.get("status")
        if target is not None:
            lifecycle.validate_update_transition(observed, target)
            values["status"] = target
            if target == ApplicationStatus.SUBMITTED:
                values["submitted_at"] = now

        for field in ("application_data", "notes", "staff_notes"):
            if field in changes:
                values[field] = changes[field]

        if "reviewed_by" in changes:
            reviewer_id = changes["reviewed_by"]
            if reviewer_id is not None and await db.get(User, reviewer_id) is None:
                raise NotFoundError(resource="user", resource_id=reviewer_id)
            values["reviewed_by"] = reviewer_id
            if reviewer_id is not None and target is not None and lifecycle.is_review_status(target):
                values["reviewed_at"] = now

        values["updated_at"] = now

        if not await self._write_if_status(db, application_id, observed, values):
            raise InvalidTransitionError(
                message=(
                    f"Application {application_id} was modified by another request; "
                    "reload it and try again"
                ),
                current_status=observed.value,
                target_status=target.value if target is not None else None,
            )

        await db.refresh(application)
        if target is not None and target != observed:
            logger.info(
                "Application %s: %s -> %s (reviewed_by=%s)",
                application_id,
                observed.value,
                target.value,
                application.reviewed_by,
            )
        return ApplicationResponse.model_validate(application)

    # ── Submit ────────────────────────────────────────────────────────────

    async def submit_application(self, db: AsyncSession, application_id: int) -> ApplicationResponse:
        """
        Move a DRAFT application to SUBMITTED once every required document
        type has at least one upload.

        The final UPDATE carries `WHERE status = 'DRAFT'`; of two concurrent
        submits only one can match it.

        Raises:
            NotFoundError: no such application (→ 404)
            InvalidTransitionError: not a DRAFT, or lost the race (→ 409)
            MissingDocumentsError: required types without uploads (→ 422)
        """
        result = await db.execute(
            select(Application, Service.required_documents)
            .join(Service, Service.id == Application.service_id)
            .where(Application.id == application_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(resource="application", resource_id=application_id)

        application, required = row
        if application.status != ApplicationStatus.DRAFT:
            raise self._not_draft(application_id, application.status)

        uploaded = await self._uploaded_types(db, application_id)
        missing = requirements.missing_documents(required or [], uploaded)
        if missing:
            logger.info(
                "Submit of application %s blocked, missing: %s",
                application_id,
                ", ".join(missing),
            )
            raise MissingDocumentsError(missing, context={"application_id": application_id})

        now = utc_now()
        written = await self._write_if_status(
            db,
            application_id,
            ApplicationStatus.DRAFT,
            {
                "status": ApplicationStatus.SUBMITTED,
                "submitted_at": now,
                "updated_at": now,
            },
        )
        if not written:
            logger.warning("Submit of application %s lost a concurrent status change", application_id)
            raise self._not_draft(application_id, None)

        await db.refresh(application)
        logger.info("Application %s submitted", application_id)
        return ApplicationResponse.model_validate(application)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _load(self, db: AsyncSession, application_id: int) -> Application:
        result = await db.execute(select(Application).where(Application.id == application_id))
        application = result.scalar_one_or_none()
        if application is None:
            raise NotFoundError(resource="application", resource_id=application_id)
        return application

    async def _uploaded_types(self, db: AsyncSession, application_id: int) -> Set[str]:
        result = await db.execute(
            select(ApplicationDocument.document_type)
            .where(ApplicationDocument.application_id == application_id)
            .distinct()
        )
        return {getattr(t, "value", t) for t in result.scalars().all()}

    async def _write_if_status(
        self,
        db: AsyncSession,
        application_id: int,
        expected: ApplicationStatus,
        values: Dict[str, Any],
    ) -> bool:
        """UPDATE the row only if its status is still `expected`. True if a row changed."""
        result = await db.execute(
            update(Application)
            .where(
                Application.id == application_id,
                Application.status == expected,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount > 0

    @staticmethod
    def _not_draft(application_id: int, current: Optional[ApplicationStatus]) -> InvalidTransitionError:
        message = "Application can only be submitted from DRAFT status"
        if current is not None:
            message = f"{message} (current: {current.value})"
        return InvalidTransitionError(
            message=message,
            current_status=current.value if current is not None else None,
            target_status=ApplicationStatus.SUBMITTED.value,
            context={"application_id": application_id},
        )


application_service = ApplicationService()
