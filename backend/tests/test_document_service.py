"""
Adoption Intake Backend: Document Service Tests
==================================================

What:  Upload restrictions, listing order and the DRAFT-only delete guard.
How:   Real SQLite database; stored files live in a temporary storage root.
"""

from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from intake.exceptions import DatabaseError, NotFoundError, UnsupportedDocumentTypeError
from intake.models import ApplicationDocument, ApplicationStatus, DocumentType
from intake.schemas.document import DocumentUpload
from intake.services.document_service import DocumentService
from intake.services.file_service import FileService

from conftest import attach


def upload(document_type, file_path="applications/1/file.pdf"):
    return DocumentUpload(
        document_type=document_type,
        file_name="file.pdf",
        file_path=file_path,
        file_size=1024,
        mime_type="application/pdf",
    )


async def count_documents(session_factory, application_id):
    async with session_factory() as session:
        result = await session.execute(
            select(func.count(ApplicationDocument.id)).where(
                ApplicationDocument.application_id == application_id
            )
        )
        return result.scalar()


def store_file(storage_root, relative_path):
    path = Path(storage_root) / relative_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"%PDF-1.4 test")
    return path


class TestUploadDocument:

    def setup_method(self):
        self.service = DocumentService()

    @pytest.mark.asyncio
    async def test_upload_required_type(self, db_session, draft_application):
        result = await self.service.upload_document(
            db_session, draft_application.id, upload(DocumentType.SKCK)
        )
        assert result.id is not None
        assert result.application_id == draft_application.id
        assert result.document_type == DocumentType.SKCK
        assert result.uploaded_at is not None

    @pytest.mark.asyncio
    async def test_unsupported_type_rejected_without_insert(
        self, db_session, session_factory, draft_application
    ):
        with pytest.raises(UnsupportedDocumentTypeError) as exc_info:
            await self.service.upload_document(
                db_session, draft_application.id, upload(DocumentType.FINANCIAL_STATEMENT)
            )
        await db_session.commit()

        assert "FINANCIAL_STATEMENT" in exc_info.value.message
        assert exc_info.value.context["accepted_document_types"] == ["SKCK", "HEALTH_CERTIFICATE"]
        assert await count_documents(session_factory, draft_application.id) == 0

    @pytest.mark.asyncio
    async def test_unknown_application(self, db_session):
        with pytest.raises(NotFoundError, match="Application with id 77 not found"):
            await self.service.upload_document(db_session, 77, upload(DocumentType.SKCK))

    @pytest.mark.asyncio
    async def test_reupload_adds_rows(self, db_session, session_factory, draft_application):
        await self.service.upload_document(db_session, draft_application.id, upload(DocumentType.SKCK))
        await self.service.upload_document(db_session, draft_application.id, upload(DocumentType.SKCK))
        await db_session.commit()

        assert await count_documents(session_factory, draft_application.id) == 2

    @pytest.mark.asyncio
    async def test_upload_allowed_after_submission(self, db_session, draft_application):
        draft_application.status = ApplicationStatus.REQUIRES_DOCUMENTS
        await db_session.commit()

        result = await self.service.upload_document(
            db_session, draft_application.id, upload(DocumentType.HEALTH_CERTIFICATE)
        )
        assert result.document_type == DocumentType.HEALTH_CERTIFICATE


class TestListDocuments:

    def setup_method(self):
        self.service = DocumentService()

    @pytest.mark.asyncio
    async def test_unknown_application_returns_empty_list(self, db_session):
        assert await self.service.list_documents(db_session, 9999) == []

    @pytest.mark.asyncio
    async def test_upload_order(self, db_session, draft_application):
        first = await attach(db_session, draft_application.id, DocumentType.HEALTH_CERTIFICATE)
        second = await attach(db_session, draft_application.id, DocumentType.SKCK)

        documents = await self.service.list_documents(db_session, draft_application.id)
        assert [d.id for d in documents] == [first.id, second.id]


class TestDeleteDocument:

    @pytest.mark.asyncio
    async def test_draft_delete_removes_row_and_file(
        self, db_session, session_factory, draft_application, temp_storage
    ):
        service = DocumentService(files=FileService(storage_root=temp_storage))
        stored = store_file(temp_storage, "applications/1/skck.pdf")
        document = await attach(
            db_session, draft_application.id, DocumentType.SKCK, file_path="applications/1/skck.pdf"
        )

        assert await service.delete_document(db_session, document.id) is True
        await db_session.commit()

        assert not stored.exists()
        assert await count_documents(session_factory, draft_application.id) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status",
        [
            ApplicationStatus.SUBMITTED,
            ApplicationStatus.UNDER_REVIEW,
            ApplicationStatus.REQUIRES_DOCUMENTS,
            ApplicationStatus.APPROVED,
            ApplicationStatus.REJECTED,
        ],
    )
    async def test_locked_once_application_leaves_draft(
        self, db_session, session_factory, draft_application, temp_storage, status
    ):
        service = DocumentService(files=FileService(storage_root=temp_storage))
        stored = store_file(temp_storage, "applications/1/skck.pdf")
        document = await attach(
            db_session, draft_application.id, DocumentType.SKCK, file_path="applications/1/skck.pdf"
        )
        draft_application.status = status
        await db_session.commit()

        assert await service.delete_document(db_session, document.id) is False
        await db_session.commit()

        assert stored.exists()
        assert await count_documents(session_factory, draft_application.id) == 1

    @pytest.mark.asyncio
    async def test_unknown_document(self, db_session):
        service = DocumentService(files=AsyncMock())
        assert await service.delete_document(db_session, 31337) is False
        service.files.remove_file.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_backing_file_still_deletes(
        self, db_session, session_factory, draft_application, temp_storage
    ):
        service = DocumentService(files=FileService(storage_root=temp_storage))
        document = await attach(
            db_session, draft_application.id, DocumentType.SKCK, file_path="applications/1/gone.pdf"
        )

        assert await service.delete_document(db_session, document.id) is True
        await db_session.commit()
        assert await count_documents(session_factory, draft_application.id) == 0

    @pytest.mark.asyncio
    async def test_file_removal_failure_does_not_undo_delete(
        self, db_session, session_factory, draft_application
    ):
        files = AsyncMock()
        files.remove_file = AsyncMock(return_value=False)
        service = DocumentService(files=files)
        document = await attach(db_session, draft_application.id, DocumentType.SKCK)

        assert await service.delete_document(db_session, document.id) is True
        await db_session.commit()

        files.remove_file.assert_awaited_once_with(document.file_path)
        assert await count_documents(session_factory, draft_application.id) == 0

    @pytest.mark.asyncio
    async def test_failed_commit_keeps_file_and_row(
        self, db_session, session_factory, draft_application, temp_storage, monkeypatch
    ):
        service = DocumentService(files=FileService(storage_root=temp_storage))
        stored = store_file(temp_storage, "applications/1/skck.pdf")
        document = await attach(
            db_session, draft_application.id, DocumentType.SKCK, file_path="applications/1/skck.pdf"
        )
        app_id = draft_application.id
        document_id = document.id

        monkeypatch.setattr(
            db_session, "commit", AsyncMock(side_effect=SQLAlchemyError("database is locked"))
        )

        with pytest.raises(DatabaseError, match="Could not delete the document"):
            await service.delete_document(db_session, document_id)
        await db_session.rollback()

        assert stored.exists()
        assert await count_documents(session_factory, app_id) == 1

    @pytest.mark.asyncio
    async def test_submit_between_read_and_delete_keeps_document(
        self, db_session, session_factory, draft_application
    ):
        files = AsyncMock()
        service = DocumentService(files=files)
        document = await attach(db_session, draft_application.id, DocumentType.SKCK)

        original_execute = db_session.execute
        calls = []

        async def execute_then_submit(statement, *args, **kwargs):
            result = await original_execute(statement, *args, **kwargs)
            calls.append(statement)
            if len(calls) == 1:
                # Another request submits right after the status was read.
                async with session_factory() as other:
                    stored = await other.get(type(draft_application), draft_application.id)
                    stored.status = ApplicationStatus.SUBMITTED
                    await other.commit()
            return result

        db_session.execute = execute_then_submit
        try:
            assert await service.delete_document(db_session, document.id) is False
        finally:
            db_session.execute = original_execute
        await db_session.commit()

        files.remove_file.assert_not_awaited()
        assert await count_documents(session_factory, draft_application.id) == 1
