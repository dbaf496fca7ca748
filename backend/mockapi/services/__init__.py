"""Services Layer — storage shells and the request-dispatch orchestration around the core.

Invariants:
    - Stores (store_*.py) flush but never commit
    - Router and registries own the transaction: one unit of work per operation

Design Decisions:
    - One store per entity family for locality; services compose them per request
"""
