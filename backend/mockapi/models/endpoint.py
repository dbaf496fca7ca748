"""Endpoint ORM — a caller-declared (path, method, field schema) route definition.

Invariants:
    - id is a caller-supplied or generated string primary key
    - path is NOT unique: the same path may be declared for several methods
    - fields stores the ordered field list as-is (opaque JSON array)

Design Decisions:
    - JSON column for fields: the schema store passes the list through uninterpreted
    - Cascades to records, logs and table links are issued explicitly by the
      endpoint store (works the same on SQLite without PRAGMA foreign_keys);
      ondelete="CASCADE" on the child FKs covers direct SQL deletes on Postgres
"""

from datetime import datetime, timezone

from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column

from mockapi.db.base import Base


class Endpoint(Base):
    """Endpoint definition; owns records and request logs."""
    __tablename__ = "endpoints"
    __table_args__ = (
        Index("ix_endpoints_path_method", "path", "method"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    path: Mapped[str] = mapped_column(String(500), nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    fields: Mapped[list] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
