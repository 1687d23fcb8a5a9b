"""
ORM models. Importing this package registers every table with Base.metadata.
"""

from intake.models.application import Application, ApplicationStatus
from intake.models.document import ApplicationDocument
from intake.models.service import DocumentType, Service, ServiceType
from intake.models.user import User, UserRole

__all__ = [
    "Application",
    "ApplicationDocument",
    "ApplicationStatus",
    "DocumentType",
    "Service",
    "ServiceType",
    "User",
    "UserRole",
]
