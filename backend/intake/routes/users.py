"""
Adoption Intake Backend: User Route Handlers
===============================================
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from intake.database import get_db_session
from intake.models.user import UserRole
from intake.schemas.common import ErrorResponse
from intake.schemas.user import UserCreate, UserResponse
from intake.services.user_service import user_service

router = APIRouter(prefix="/api", tags=["Users"])


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    responses={409: {"description": "Email already registered", "model": ErrorResponse}},
    summary="Register a citizen or staff user",
)
async def create_user(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.create_user(db=db, payload=payload)


@router.get(
    "/users/{user_id}",
    response_model=UserResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Get a user by ID",
)
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UserResponse:
    return await user_service.get_user(db=db, user_id=user_id)


@router.get(
    "/users",
    response_model=List[UserResponse],
    summary="List users, optionally by role",
)
async def list_users(
    role: Optional[UserRole] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserResponse]:
    return await user_service.list_users(db=db, role=role)
