"""
Adoption Intake Backend: Application Route Handlers
======================================================

What:  Create, read, update and submit applications.
How:   Delegates to ApplicationService. Status rules are enforced there; this
       module only shapes HTTP input and output.

Typical citizen flow:
    POST  /api/applications                    → DRAFT
    POST  /api/applications/{id}/documents     (once per required type)
    GET   /api/applications/{id}/requirements  → is_complete: true
    POST  /api/applications/{id}/submit        → SUBMITTED

Typical staff flow:
    PATCH /api/applications/{id}  {"status": "UNDER_REVIEW", "reviewed_by": 7}
    PATCH /api/applications/{id}  {"status": "APPROVED", "reviewed_by": 7}
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.config import settings
from intake.database import get_db_session
from intake.exceptions import ValidationError
from intake.models.application import ApplicationStatus
from intake.schemas.application import (
    AdoptionApplicationData,
    ApplicationCreate,
    ApplicationListResponse,
    ApplicationResponse,
    ApplicationUpdate,
    RequirementSummary,
)
from intake.schemas.common import ErrorResponse
from intake.services.application_service import application_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Applications"])


def _check_adoption_data(application_data: dict) -> None:
    """Validate the adoption form when VALIDATE_ADOPTION_DATA is on."""
    try:
        AdoptionApplicationData.model_validate(application_data)
    except PydanticValidationError as e:
        errors = [
            {"loc": ".".join(str(part) for part in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        raise ValidationError(
            message="application_data does not match the adoption form",
            field="application_data",
            context={"errors": errors},
        )


@router.post(
    "/applications",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Inactive service or invalid form data", "model": ErrorResponse},
        404: {"description": "Service or applicant not found", "model": ErrorResponse},
    },
    summary="Start a new DRAFT application",
)
async def create_application(
    payload: ApplicationCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    if settings.validate_adoption_data:
        _check_adoption_data(payload.application_data)
    return await application_service.create_application(db=db, payload=payload)


@router.get(
    "/applications",
    response_model=ApplicationListResponse,
    summary="List applications, newest first",
)
async def list_applications(
    response: Response,
    status_filter: Optional[ApplicationStatus] = Query(default=None, alias="status"),
    applicant_id: Optional[int] = Query(default=None, gt=0),
    service_id: Optional[int] = Query(default=None, gt=0),
    limit: Optional[int] = Query(default=None, ge=1, le=200),
    offset: int = Query(default=0, ge=0),
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationListResponse:
    page_size = min(limit or settings.default_page_size, settings.max_page_size)
    result = await application_service.list_applications(
        db=db,
        status=status_filter,
        applicant_id=applicant_id,
        service_id=service_id,
        limit=page_size,
        offset=offset,
    )
    response.headers["X-Total-Count"] = str(result.total_count)
    return result


@router.get(
    "/applications/{application_id}",
    response_model=ApplicationResponse,
    responses={404: {"description": "Application not found", "model": ErrorResponse}},
    summary="Get an application by ID",
)
async def get_application(
    application_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    return await application_service.get_application(db=db, application_id=application_id)


@router.patch(
    "/applications/{application_id}",
    response_model=ApplicationResponse,
    responses={
        404: {"description": "Application or reviewer not found", "model": ErrorResponse},
        409: {"description": "Illegal status transition", "model": ErrorResponse},
    },
    summary="Partially update an application",
    description=(
        "Applies only the fields present in the body. Status changes follow the "
        "transition table; drafts are submitted through POST .../submit instead."
    ),
)
async def update_application(
    application_id: int,
    payload: ApplicationUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    return await application_service.update_application(
        db=db, application_id=application_id, payload=payload
    )


@router.post(
    "/applications/{application_id}/submit",
    response_model=ApplicationResponse,
    responses={
        404: {"description": "Application not found", "model": ErrorResponse},
        409: {"description": "Application is not a DRAFT", "model": ErrorResponse},
        422: {"description": "Required documents missing", "model": ErrorResponse},
    },
    summary="Submit a DRAFT application",
)
async def submit_application(
    application_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ApplicationResponse:
    return await application_service.submit_application(db=db, application_id=application_id)


@router.get(
    "/applications/{application_id}/requirements",
    response_model=RequirementSummary,
    responses={404: {"description": "Application not found", "model": ErrorResponse}},
    summary="Document completeness of an application",
)
async def get_requirements(
    application_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> RequirementSummary:
    return await application_service.get_requirements(db=db, application_id=application_id)
