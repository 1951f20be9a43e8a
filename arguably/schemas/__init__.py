"""Pydantic Schemas — request/response validation for API endpoints and AI output.

Invariants:
    - Schemas validate at system boundaries (user input, AI responses)
    - Domain types from core/ used for enum fields

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
