"""Pydantic Schemas — request/response contracts for API endpoints.

Invariants:
    - Schemas validate at system boundary (request bodies, response shapes)
    - JSON field names are camelCase (userId, createdAt, categoriesToAdd)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
