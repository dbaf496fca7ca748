"""Pydantic Schemas — request validation for the management API.

Invariants:
    - Schemas validate at system boundary (endpoint / table declarations)
    - Dynamic request bodies are NOT validated here: their schema is runtime data

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
    - camelCase wire keys (tableId, endpointIds) accepted via aliases
"""
