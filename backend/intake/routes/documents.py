"""
Adoption Intake Backend: Document Route Handlers
===================================================

What:  Attach, list and delete application documents.
How:   Bodies carry metadata only; `file_path` points at a file already
       stored by the uploader. Deletion answers {"deleted": false} instead of
       an error when the document is missing or its application is locked.
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from intake.database import get_db_session
from intake.schemas.common import ErrorResponse
from intake.schemas.document import DocumentDeleteResponse, DocumentResponse, DocumentUpload
from intake.services.document_service import document_service

router = APIRouter(prefix="/api", tags=["Documents"])


@router.get(
    "/applications/{application_id}/documents",
    response_model=List[DocumentResponse],
    summary="List documents of an application",
)
async def list_documents(
    application_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[DocumentResponse]:
    return await document_service.list_documents(db=db, application_id=application_id)


@router.post(
    "/applications/{application_id}/documents",
    response_model=DocumentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Document type not required by the service", "model": ErrorResponse},
        404: {"description": "Application not found", "model": ErrorResponse},
    },
    summary="Attach a document to an application",
)
async def upload_document(
    application_id: int,
    payload: DocumentUpload,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentResponse:
    return await document_service.upload_document(
        db=db, application_id=application_id, payload=payload
    )


@router.delete(
    "/documents/{document_id}",
    response_model=DocumentDeleteResponse,
    summary="Delete a document while its application is a DRAFT",
)
async def delete_document(
    document_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> DocumentDeleteResponse:
    deleted = await document_service.delete_document(db=db, document_id=document_id)
    return DocumentDeleteResponse(deleted=deleted)
