"""
Adoption Intake Backend: Application Schemas
===============================================

What:  Request/response models for applications and their lifecycle.

Partial Updates:
    ApplicationUpdate distinguishes "absent" from "explicit null" through
    `model_fields_set`. Absent fields are left alone; null clears one of the
    nullable fields (notes, staff_notes, reviewed_by). `status` and
    `application_data` are not nullable and reject an explicit null.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from intake.models.application import ApplicationStatus
from intake.models.service import DocumentType


# ══════════════════════════════════════════════════════════════════════════
# Requests
# ══════════════════════════════════════════════════════════════════════════


class ApplicationCreate(BaseModel):
    service_id: int = Field(gt=0)
    applicant_id: int = Field(gt=0)
    application_data: Dict[str, Any] = Field(default_factory=dict)
    notes: Optional[str] = None


class ApplicationUpdate(BaseModel):
    """Body of PATCH /api/applications/{id}."""
    status: Optional[ApplicationStatus] = None
    application_data: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
    staff_notes: Optional[str] = None
    reviewed_by: Optional[int] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def reject_null_required_fields(self) -> "ApplicationUpdate":
        for name in ("status", "application_data"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"'{name}' cannot be null")
        return self

    def changes(self) -> Dict[str, Any]:
        """Only the fields the caller actually sent."""
        return self.model_dump(exclude_unset=True)


# ══════════════════════════════════════════════════════════════════════════
# Responses
# ══════════════════════════════════════════════════════════════════════════


class ApplicationResponse(BaseModel):
    id: int
    service_id: int
    applicant_id: int
    status: ApplicationStatus
    application_data: Dict[str, Any]
    notes: Optional[str] = None
    staff_notes: Optional[str] = None
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[int] = None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ApplicationListResponse(BaseModel):
    applications: List[ApplicationResponse]
    total_count: int = Field(description="Number of applications matching the filters")
    limit: int
    offset: int


class RequirementSummary(BaseModel):
    """
    Document completeness for one application.

    `required` is the service's list with repeats collapsed; `missing` keeps
    the same order.
    """
    application_id: int
    is_complete: bool
    required: List[DocumentType]
    provided: List[DocumentType]
    missing: List[DocumentType]


# ══════════════════════════════════════════════════════════════════════════
# Adoption Form Payload
# ══════════════════════════════════════════════════════════════════════════


class AdoptionApplicationData(BaseModel):
    """
    Shape of `application_data` for adoption-recommendation applications.

    The lifecycle engine never reads this; the create route checks it only
    when VALIDATE_ADOPTION_DATA is enabled.
    """
    # Applicant
    applicant_name: str = Field(min_length=1)
    applicant_id_number: str = Field(min_length=1)
    applicant_birth_place: str = Field(min_length=1)
    applicant_birth_date: str
    applicant_address: str = Field(min_length=1)
    applicant_occupation: str = Field(min_length=1)
    applicant_monthly_income: float = Field(gt=0)

    # Spouse (if married)
    spouse_name: Optional[str] = None
    spouse_id_number: Optional[str] = None
    spouse_birth_place: Optional[str] = None
    spouse_birth_date: Optional[str] = None
    spouse_occupation: Optional[str] = None
    spouse_monthly_income: Optional[float] = None

    # Marriage
    marriage_date: Optional[str] = None
    marriage_duration_years: Optional[int] = Field(default=None, ge=0)

    # Child
    desired_child_gender: Literal["MALE", "FEMALE", "ANY"]
    desired_child_age_min: int = Field(ge=0)
    desired_child_age_max: int = Field(ge=0)
    reason_for_adoption: str = Field(min_length=10)

    # Family
    existing_children_count: int = Field(ge=0)
    family_members_count: int = Field(gt=0)
    housing_ownership: Literal["OWNED", "RENTED", "FAMILY_OWNED"]
    housing_condition: Literal["EXCELLENT", "GOOD", "ADEQUATE", "POOR"]

    # Additional
    previous_adoption_experience: bool
    support_from_extended_family: bool
    childcare_plan: str = Field(min_length=10)

    @model_validator(mode="after")
    def check_age_range(self) -> "AdoptionApplicationData":
        if self.desired_child_age_min > self.desired_child_age_max:
            raise ValueError("desired_child_age_min must not exceed desired_child_age_max")
        return self
