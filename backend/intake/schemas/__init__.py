"""
Pydantic request/response schemas. These are the API contract; the ORM
models in intake.models are the storage layout.
"""
