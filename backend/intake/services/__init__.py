# Services package init
"""
Adoption Intake Backend: Services Package
============================================

What:  Business logic, independent of HTTP.

Service Inventory:
    - lifecycle.py:           status transition table and checks (pure)
    - requirements.py:        missing-document computation (pure)
    - application_service.py: create, update, submit, list applications
    - document_service.py:    upload, list, delete documents (DRAFT guard)
    - file_service.py:        best-effort removal of stored files
    - catalog_service.py:     services and their required documents
    - user_service.py:        applicant and staff records

Every service method takes the request's AsyncSession as its first argument
and leaves commit/rollback to get_db_session.
"""
