"""Core Layer — pure routing, validation, filtering and aggregation rules.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (identifiers and clocks are injected)

Design Decisions:
    - Functional core separated from the storage shell: the request router
      orchestrates async store calls around these pure rules
"""
