"""Pydantic Schemas: request/response validation for API endpoints.

Invariants:
    - Schemas validate at system boundary (user input, API responses)

Design Decisions:
    - Separate from models and core: schemas are API contracts, models are persistence,
      core entities are the domain (ADR: DDD boundary)
"""
