"""
Adoption Intake Backend: User Service
========================================

What:  Creates and fetches applicant/staff records.
Who:   Called by the users router; ApplicationService uses the same table to
       check that an applicant exists.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.exceptions import ConflictError, DatabaseError, NotFoundError
from intake.models.user import User, UserRole
from intake.schemas.user import UserCreate, UserResponse

logger = logging.getLogger(__name__)


class UserService:

    async def create_user(self, db: AsyncSession, payload: UserCreate) -> UserResponse:
        """
        Register a user.

        Raises:
            ConflictError: The email is already registered (→ 409)
        """
        existing = await db.execute(select(User.id).where(User.email == payload.email))
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(
                message=f"A user with email '{payload.email}' already exists",
                context={"field": "email"},
            )

        user = User(
            email=payload.email,
            full_name=payload.full_name,
            phone=payload.phone,
            role=payload.role,
        )
        db.add(user)
        try:
            await db.flush()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same email.
            raise ConflictError(
                message=f"A user with email '{payload.email}' already exists",
                context={"field": "email"},
            )

        logger.info("User created: id=%s role=%s", user.id, user.role.value)
        return UserResponse.model_validate(user)

    async def get_user(self, db: AsyncSession, user_id: int) -> UserResponse:
        """
        Raises:
            NotFoundError: No user with this id (→ 404)
            DatabaseError: Query failed (→ 500)
        """
        try:
            user = await db.get(User, user_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching user %s: %s", user_id, str(e))
            raise DatabaseError(
                message="Could not retrieve the user. Please try again.",
                context={"user_id": user_id},
            )

        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return UserResponse.model_validate(user)

    async def list_users(self, db: AsyncSession, role: Optional[UserRole] = None) -> List[UserResponse]:
        """All users, optionally one role only, in registration order."""
        query = select(User).order_by(User.id)
        if role is not None:
            query = query.where(User.role == role)
        try:
            result = await db.execute(query)
        except SQLAlchemyError as e:
            logger.error("Database error listing users: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Could not retrieve users. Please try again.",
                context={"error_type": type(e).__name__},
            )
        return [UserResponse.model_validate(u) for u in result.scalars().all()]


user_service = UserService()
