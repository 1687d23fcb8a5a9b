"""
Adoption Intake Backend: User Schemas
========================================
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from intake.models.user import UserRole


class UserCreate(BaseModel):
    email: EmailStr
    full_name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=50)
    role: UserRole


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    phone: Optional[str] = None
    role: UserRole
    created_at: datetime

    model_config = {"from_attributes": True}
