"""
Adoption Intake Backend: Service Catalog Schemas
===================================================
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from intake.models.service import DocumentType, ServiceType


class ServiceCreate(BaseModel):
    """
    Input for registering a service.

    Repeated entries in `required_documents` are redundant rather than
    invalid; only the first occurrence is kept.
    """
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    type: ServiceType = ServiceType.ADOPTION_RECOMMENDATION
    required_documents: List[DocumentType] = Field(default_factory=list)
    is_active: bool = True

    @field_validator("required_documents")
    @classmethod
    def collapse_duplicates(cls, v: List[DocumentType]) -> List[DocumentType]:
        return list(dict.fromkeys(v))


class ServiceResponse(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    type: ServiceType
    required_documents: List[DocumentType]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}
