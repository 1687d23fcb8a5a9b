"""
Adoption Intake Backend: Application Document Schemas
========================================================

What:  Upload metadata in, document records out.
How:   Uploads carry metadata only. The file is stored elsewhere by the
       client-facing uploader and referenced through `file_path`.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from intake.models.service import DocumentType


class DocumentUpload(BaseModel):
    """Body of POST /api/applications/{id}/documents."""
    document_type: DocumentType
    file_name: str = Field(min_length=1, max_length=255)
    file_path: str = Field(min_length=1)
    file_size: int = Field(gt=0, description="File size in bytes")
    mime_type: str = Field(min_length=1, max_length=255)


class DocumentResponse(BaseModel):
    id: int
    application_id: int
    document_type: DocumentType
    file_name: str
    file_path: str
    file_size: int
    mime_type: str
    uploaded_at: datetime

    model_config = {"from_attributes": True}


class DocumentDeleteResponse(BaseModel):
    deleted: bool = Field(
        description="False when the document does not exist or its application is no longer a DRAFT"
    )
