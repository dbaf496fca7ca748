"""Infrastructure Layer — database access, clocks/identifiers and logging setup.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Every SQLAlchemy failure is mapped to DatabaseError before leaving this layer
"""
