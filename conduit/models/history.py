"""
History model for recording executions of saved requests.

Each execution attempt of a saved request appends one entry. An entry
holds either the outcome of a completed round trip (status code, timing and
response snapshot) or the error that prevented one, never both.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from sqlalchemy import String, Text, JSON, Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base
from .request import utcnow

if TYPE_CHECKING:
    from .request import SavedRequest


class History(Base):
    """
    SQLAlchemy model for request execution history.

    Rows are append-only. They are removed only when the parent saved
    request is deleted.

    Attributes:
        id: Unique identifier for the history entry
        request_id: Reference to the executed saved request
        user_id: Identifier of the user who owns the request
        method: HTTP method that was sent
        url: Target URL that was sent
        status_code: Remote status code, or None if the execution failed
        response_time: Round trip time in milliseconds, or None on failure
        error: Failure message, or None if a response was received
        request_data: Snapshot of the method, url, headers and body sent
        response_data: Snapshot of the response, or None on failure
        created_at: Timestamp when the attempt was recorded
    """
    __tablename__ = "history"
    __table_args__ = (
        CheckConstraint(
            "(error IS NULL AND status_code IS NOT NULL AND response_time IS NOT NULL"
            " AND response_data IS NOT NULL)"
            " OR (error IS NOT NULL AND status_code IS NULL AND response_time IS NULL"
            " AND response_data IS NULL)",
            name="ck_history_outcome",
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    request_id: Mapped[int] = mapped_column(
        ForeignKey("requests.id", ondelete="CASCADE"),
        index=True
    )
    user_id: Mapped[str] = mapped_column(String(64))
    method: Mapped[str] = mapped_column(String(10))
    url: Mapped[str] = mapped_column(Text)
    status_code: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    response_time: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    error: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    request_data: Mapped[dict] = mapped_column(JSON)
    response_data: Mapped[Optional[dict]] = mapped_column(
        JSON(none_as_null=True),
        nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=utcnow, index=True)

    request: Mapped["SavedRequest"] = relationship("SavedRequest", back_populates="history")
