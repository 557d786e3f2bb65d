"""Pydantic Schemas — wire contracts for request and response bodies.

Invariants:
    - Schemas validate at system boundary (request bodies, stored documents)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence (ADR: DDD boundary)
"""
