"""
Saved request model for storing user-owned HTTP request definitions.

A saved request can be executed any number of times; each execution is
recorded as a History entry that is deleted together with its request.
"""

from datetime import datetime, timezone
from typing import Optional, List, TYPE_CHECKING

from sqlalchemy import String, Text, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..database import Base

if TYPE_CHECKING:
    from .history import History


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SavedRequest(Base):
    """
    SQLAlchemy model for saved HTTP request definitions.

    Attributes:
        id: Unique identifier for the request
        user_id: Identifier of the owning user
        name: Human-readable name for the request
        method: HTTP method (GET, POST, PUT, PATCH, DELETE, HEAD, OPTIONS)
        url: Absolute target URL
        headers: Ordered list of {"key": ..., "value": ...} entries
        body: Request body content
        created_at: Timestamp when the request was created
        updated_at: Timestamp when the request was last updated
        history: Execution history of this request
    """
    __tablename__ = "requests"

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), index=True)
    name: Mapped[str] = mapped_column(String(255))
    method: Mapped[str] = mapped_column(String(10))
    url: Mapped[str] = mapped_column(Text)
    headers: Mapped[list] = mapped_column(JSON, default=list)
    body: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=utcnow, onupdate=utcnow)

    # Relationships
    history: Mapped[List["History"]] = relationship(
        "History",
        back_populates="request",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
