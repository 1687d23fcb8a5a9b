"""
Adoption Intake Backend: Custom Exception Hierarchy
======================================================

What:  Application-specific exceptions for the intake workflow.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers registered in main.py translate them into JSON
       error responses with the matching HTTP status code.
Who:   Raised by services; caught by the global handlers.

Exception Hierarchy:
    IntakeError (base)
    ├── ValidationError                 → 400 Bad Request
    │   └── UnsupportedDocumentTypeError → 400 Bad Request
    ├── NotFoundError                   → 404 Not Found
    ├── ConflictError                   → 409 Conflict
    ├── InvalidTransitionError          → 409 Conflict
    ├── MissingDocumentsError           → 422 Unprocessable Entity
    └── DatabaseError                   → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional, Sequence


class IntakeError(Exception):
    """
    Base exception for all intake application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, returned only for client errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(IntakeError):
    """
    Raised when client input breaks a business rule.

    Schema-level problems (wrong types, missing fields) are rejected by
    FastAPI with 422 before reaching a service; this covers rules that need
    the database, such as an inactive service.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnsupportedDocumentTypeError(ValidationError):
    """
    Raised when a document type is outside the service's requirement set.

    Services declare the complete list of documents they accept; nothing
    else can be attached, even as an extra.
    """

    def __init__(
        self,
        document_type: str,
        accepted: Sequence[str] = (),
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["document_type"] = document_type
        ctx["accepted_document_types"] = list(accepted)
        super().__init__(
            message=f"Document type '{document_type}' is not required for this service",
            field="document_type",
            context=ctx,
        )
        self.document_type = document_type


class NotFoundError(IntakeError):
    """Raised when an id references nothing."""

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource.capitalize()} with id {resource_id} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(IntakeError):
    """Raised when a write collides with existing data (e.g. duplicate email)."""

    def __init__(
        self,
        message: str = "The request conflicts with existing data",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class InvalidTransitionError(IntakeError):
    """
    Raised when a status precondition is violated.

    Covers illegal entries in the transition table, submitting anything but a
    DRAFT and conditional writes that lost a race with another writer.
    """

    def __init__(
        self,
        message: str,
        current_status: Optional[str] = None,
        target_status: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if current_status is not None:
            ctx["current_status"] = current_status
        if target_status is not None:
            ctx["target_status"] = target_status
        super().__init__(message=message, context=ctx)
        self.current_status = current_status
        self.target_status = target_status


class MissingDocumentsError(IntakeError):
    """
    Raised when submission is blocked by missing required documents.

    `missing_documents` keeps the order of the service's required list.
    """

    def __init__(
        self,
        missing_documents: Sequence[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        self.missing_documents: List[str] = list(missing_documents)
        ctx = context or {}
        ctx["missing_documents"] = self.missing_documents
        super().__init__(
            message=f"Missing required documents: {', '.join(self.missing_documents)}",
            context=ctx,
        )


class DatabaseError(IntakeError):
    """
    Raised when database operations fail unexpectedly.

    The client always receives a generic message; the context is logged
    server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
