"""EndpointRecord ORM — one stored JSON document written through a dynamic endpoint.

Invariants:
    - data holds the full record (body + id + createdAt) as serialized JSON text
    - id is monotonic (IdGenerator), so (created_at, id) orders newest-first

Design Decisions:
    - Text, not JSON column: rows written by older builds or by hand may hold
      corrupt JSON, and the record store must skip them one by one instead of
      failing the whole query at result-processing time
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from mockapi.db.base import Base


class EndpointRecord(Base):
    """A record accepted by an endpoint's write path."""
    __tablename__ = "endpoint_records"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    endpoint_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("endpoints.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    data: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
