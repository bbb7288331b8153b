"""
Pydantic schemas for request execution history.
"""

from datetime import datetime
from typing import Any

from pydantic import ConfigDict

from .base import CamelModel


class HistoryResponse(CamelModel):
    """Schema for a history entry with all fields."""
    id: int
    request_id: int
    user_id: str
    method: str
    url: str
    status_code: int | None
    response_time: int | None
    error: str | None
    request_data: dict[str, Any]
    response_data: dict[str, Any] | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
