"""
Adoption Intake Backend: Document Service (Document Guard)
=============================================================

What:  Attaches document metadata to applications, lists it, and deletes it
       while the application is still a DRAFT.
How:   Uploads are checked against the owning service's requirement set.
       Deletion is a single DELETE conditioned on the application still being
       a DRAFT, followed by best-effort removal of the stored file.
Who:   Called by the documents router.

Delete Flow:
    ┌─────────────┐    ┌──────────────┐    ┌──────────────────────┐    ┌──────────────┐
    │ find doc +  │───▶│ app DRAFT?   │───▶│ DELETE ... WHERE app │───▶│ remove file  │
    │ app status  │    │              │    │ still DRAFT          │    │ (best-effort)│
    └─────────────┘    └──────────────┘    └──────────────────────┘    └──────────────┘
          │                   │                       │
      False (absent)     False (locked)         False (0 rows)
"""

import logging
from typing import List

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from intake.exceptions import DatabaseError, NotFoundError, UnsupportedDocumentTypeError
from intake.models.application import Application, ApplicationStatus
from intake.models.document import ApplicationDocument
from intake.models.service import Service
from intake.schemas.document import DocumentResponse, DocumentUpload
from intake.services import requirements
from intake.services.file_service import FileService, file_service

logger = logging.getLogger(__name__)


class DocumentService:
    """
    Responsibilities:
        - upload_document(): record metadata for a required document type
        - list_documents(): documents of one application, oldest first
        - delete_document(): DRAFT-only deletion plus stored-file cleanup
    """

    def __init__(self, files: FileService = file_service):
        self.files = files

    async def upload_document(
        self,
        db: AsyncSession,
        application_id: int,
        payload: DocumentUpload,
    ) -> DocumentResponse:
        """
        Record an uploaded document.

        Uploads are accepted in any application status; only deletion is
        restricted to drafts.

        Raises:
            NotFoundError: No application with this id (→ 404)
            UnsupportedDocumentTypeError: type not in the service's requirements (→ 400)
        """
        result = await db.execute(
            select(Application.id, Service.required_documents)
            .join(Service, Service.id == Application.service_id)
            .where(Application.id == application_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFoundError(resource="application", resource_id=application_id)

        accepted = requirements.normalize_required(row.required_documents or [])
        if payload.document_type.value not in accepted:
            raise UnsupportedDocumentTypeError(
                payload.document_type.value,
                accepted=accepted,
                context={"application_id": application_id},
            )

        document = ApplicationDocument(
            application_id=application_id,
            document_type=payload.document_type,
            file_name=payload.file_name,
            file_path=payload.file_path,
            file_size=payload.file_size,
            mime_type=payload.mime_type,
        )
        db.add(document)
        await db.flush()

        logger.info(
            "Document %s (%s, %d bytes) attached to application %s",
            document.id,
            document.document_type.value,
            document.file_size,
            application_id,
        )
        return DocumentResponse.model_validate(document)

    async def list_documents(self, db: AsyncSession, application_id: int) -> List[DocumentResponse]:
        """Documents of an application in upload order. Unknown ids yield []."""
        try:
            result = await db.execute(
                select(ApplicationDocument)
                .where(ApplicationDocument.application_id == application_id)
                .order_by(ApplicationDocument.uploaded_at, ApplicationDocument.id)
            )
        except SQLAlchemyError as e:
            logger.error("Database error listing documents of %s: %s", application_id, str(e))
            raise DatabaseError(
                message="Could not retrieve documents. Please try again.",
                context={"application_id": application_id},
            )
        return [DocumentResponse.model_validate(d) for d in result.scalars().all()]

    async def delete_document(self, db: AsyncSession, document_id: int) -> bool:
        """
        Delete a document if its application is still a DRAFT.

        Unlike the other service calls this one commits: the stored file is
        removed only after the deletion is durable, and never if the commit
        fails.

        Returns:
            True if the record was deleted. False if it does not exist or the
            application has left DRAFT. Failure to remove the stored file does
            not change the result.

        Raises:
            DatabaseError: the deletion could not be committed (→ 500)
        """
        result = await db.execute(
            select(ApplicationDocument.file_path, ApplicationDocument.application_id, Application.status)
            .join(Application, Application.id == ApplicationDocument.application_id)
            .where(ApplicationDocument.id == document_id)
        )
        row = result.one_or_none()
        if row is None:
            logger.info("Delete of document %s: not found", document_id)
            return False

        if row.status != ApplicationStatus.DRAFT:
            logger.info(
                "Delete of document %s refused: application %s is %s",
                document_id,
                row.application_id,
                row.status.value,
            )
            return False

        drafts = select(Application.id).where(Application.status == ApplicationStatus.DRAFT)
        deleted = await db.execute(
            delete(ApplicationDocument)
            .where(
                ApplicationDocument.id == document_id,
                ApplicationDocument.application_id.in_(drafts),
            )
            .execution_options(synchronize_session=False)
        )
        if deleted.rowcount == 0:
            logger.info("Delete of document %s lost a concurrent change", document_id)
            return False

        try:
            await db.commit()
        except SQLAlchemyError as e:
            logger.error("Database error committing delete of document %s: %s", document_id, str(e))
            raise DatabaseError(
                message="Could not delete the document. Please try again.",
                context={"document_id": document_id},
            )

        logger.info("Document %s deleted from application %s", document_id, row.application_id)
        await self.files.remove_file(row.file_path)
        return True


document_service = DocumentService()
