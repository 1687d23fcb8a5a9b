"""
Adoption Intake Backend: Service Catalog Route Handlers
==========================================================

What:  Registers government services and lists the ones open for applications.
"""

from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from intake.database import get_db_session
from intake.schemas.common import ErrorResponse
from intake.schemas.service import ServiceCreate, ServiceResponse
from intake.services.catalog_service import catalog_service

router = APIRouter(prefix="/api", tags=["Services"])


@router.post(
    "/services",
    response_model=ServiceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a service and its required documents",
)
async def create_service(
    payload: ServiceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ServiceResponse:
    return await catalog_service.create_service(db=db, payload=payload)


@router.get(
    "/services",
    response_model=List[ServiceResponse],
    summary="List active services",
)
async def list_services(
    response: Response,
    db: AsyncSession = Depends(get_db_session),
) -> List[ServiceResponse]:
    services = await catalog_service.list_services(db=db)
    # The catalog changes rarely; let browsers reuse it briefly.
    response.headers["Cache-Control"] = "private, max-age=60"
    return services


@router.get(
    "/services/{service_id}",
    response_model=ServiceResponse,
    responses={404: {"description": "Service not found", "model": ErrorResponse}},
    summary="Get a service by ID",
)
async def get_service(
    service_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> ServiceResponse:
    return await catalog_service.get_service(db=db, service_id=service_id)
