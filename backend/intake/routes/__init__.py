"""
Adoption Intake Backend: API Routes Package
==============================================

What:  HTTP route handlers; thin wrappers around the services.

Route Inventory:
    - users.py:         POST /api/users, GET /api/users, GET /api/users/{id}
    - services.py:      POST /api/services, GET /api/services, GET /api/services/{id}
    - applications.py:  /api/applications (create, list, get, update, submit, requirements)
    - documents.py:     /api/applications/{id}/documents (upload, list)
                        DELETE /api/documents/{id}
    - health.py:        GET /health

Routes handle HTTP concerns only (parameters, status codes, headers). Business
rules live in intake.services and errors are mapped by the handlers in main.py.
"""
