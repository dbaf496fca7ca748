"""RequestLog ORM — logging table for dynamic requests served per endpoint.

Invariants:
    - Written after the response payload is final (write-after-response)
    - endpoint_path records the path as requested, not the current declaration

Design Decisions:
    - Logging table, not enforcement: no dispatch logic reads it
    - Retention is unbounded; reads surface only the newest request_log_limit rows
"""

from datetime import datetime, timezone

from sqlalchemy import String, Text, Integer, DateTime, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column

from mockapi.db.base import Base


class RequestLog(Base):
    """Request/response snapshot for one dynamic call."""
    __tablename__ = "request_logs"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    endpoint_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("endpoints.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    endpoint_path: Mapped[str] = mapped_column(String(500), nullable=False)
    method: Mapped[str] = mapped_column(String(10), nullable=False)
    request_body: Mapped[str | None] = mapped_column(Text, nullable=True)
    response_status: Mapped[int] = mapped_column(Integer, nullable=False)
    response_data: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
