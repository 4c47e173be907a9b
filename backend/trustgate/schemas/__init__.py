"""Pydantic Schemas — request/response validation for API endpoints and the list client.

Invariants:
    - Schemas validate at system boundaries (HTTP input, list client calls)
    - Enum fields use types from core/domain_types.py

Design Decisions:
    - Separate from models: schemas are contracts, models are persistence
"""
