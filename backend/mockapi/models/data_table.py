"""DataTable ORM — a named grouping of endpoints presented as one dataset.

Invariants:
    - name is non-nullable
    - fields is the table's own schema, independent of any member endpoint's

Design Decisions:
    - Named DataTable (table "tables") to avoid clashing with sqlalchemy.Table
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from mockapi.db.base import Base


class DataTable(Base):
    """Table definition; owns TableEndpoint associations."""
    __tablename__ = "tables"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    fields: Mapped[list | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
