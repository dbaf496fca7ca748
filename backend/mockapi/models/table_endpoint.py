"""TableEndpoint ORM — association edge between a table and a member endpoint.

Invariants:
    - (table_id, endpoint_id) is unique
    - position preserves the order endpoint ids were supplied in

Design Decisions:
    - Explicit position column: a replace inserts the whole set with one timestamp,
      so created_at alone cannot order the members
"""

from datetime import datetime, timezone

from sqlalchemy import String, Integer, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from mockapi.db.base import Base


class TableEndpoint(Base):
    """Membership of one endpoint in one table."""
    __tablename__ = "table_endpoints"
    __table_args__ = (
        UniqueConstraint("table_id", "endpoint_id", name="uq_table_endpoint"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    table_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("tables.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    endpoint_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("endpoints.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
