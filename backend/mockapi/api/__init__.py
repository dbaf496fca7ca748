"""API Layer — FastAPI routes and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - Management routes registered before the dynamic catch-all

Design Decisions:
    - Thin routes delegate to services
"""
