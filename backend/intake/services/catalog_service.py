"""
Adoption Intake Backend: Service Catalog
===========================================

What:  Registers services and serves the catalog citizens choose from.
How:   A service's `required_documents` list is fixed at creation; there is no
       update or delete path, so applications always see the requirement set
       they were created against.
"""

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.exceptions import DatabaseError, NotFoundError
from intake.models.service import Service
from intake.schemas.service import ServiceCreate, ServiceResponse

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Responsibilities:
        - create_service(): register a service with its document requirements
        - get_service(): single lookup with not-found handling
        - list_services(): active services ordered by name
    """

    async def create_service(self, db: AsyncSession, payload: ServiceCreate) -> ServiceResponse:
        service = Service(
            name=payload.name,
            description=payload.description,
            type=payload.type,
            required_documents=[d.value for d in payload.required_documents],
            is_active=payload.is_active,
        )
        db.add(service)
        await db.flush()

        logger.info(
            "Service created: id=%s name=%r required=%s",
            service.id,
            service.name,
            service.required_documents,
        )
        return ServiceResponse.model_validate(service)

    async def get_service(self, db: AsyncSession, service_id: int) -> ServiceResponse:
        """
        Raises:
            NotFoundError: No service with this id (→ 404)
        """
        service = await db.get(Service, service_id)
        if service is None:
            raise NotFoundError(resource="service", resource_id=service_id)
        return ServiceResponse.model_validate(service)

    async def list_services(self, db: AsyncSession) -> List[ServiceResponse]:
        """Active services only, alphabetical."""
        try:
            result = await db.execute(
                select(Service)
                .where(Service.is_active.is_(True))
                .order_by(Service.name)
            )
        except SQLAlchemyError as e:
            logger.error("Database error listing services: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve services. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [ServiceResponse.model_validate(s) for s in result.scalars().all()]


catalog_service = CatalogService()
