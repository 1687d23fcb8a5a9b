"""
Adoption Intake Backend: Application Package
==============================================

What:  Backend for the adoption-recommendation intake service.
How:   Layered the same way throughout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Lifecycle & Documents)  │  ← transitions, requirement checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Citizens create DRAFT applications, attach the documents their service
    requires and submit. Staff move submitted applications through review.
"""

__version__ = "1.0.0"
