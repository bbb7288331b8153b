"""
Pydantic schemas for saved HTTP request definitions.

Defines schemas for creating, updating, and returning saved requests
with HTTP method and URL validation.
"""

from datetime import datetime
from typing import get_args, Literal

import httpx
from pydantic import BaseModel, ConfigDict, field_validator

from .base import CamelModel


# HTTP methods accepted for saved requests
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]

HTTP_METHODS = get_args(HttpMethod)


class HeaderEntry(BaseModel):
    """A single request header as entered by the user."""
    key: str
    value: str


def normalize_method(value: str) -> str:
    """Upper-case an HTTP method and reject unknown ones."""
    method = value.strip().upper()
    if method not in HTTP_METHODS:
        raise ValueError(f"Unsupported HTTP method: {value}")
    return method


def validate_absolute_url(value: str) -> str:
    """Require an absolute http(s) URL with a host."""
    url = value.strip()
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"Invalid URL: {e}") from e
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise ValueError("URL must be absolute, including scheme and host")
    return url


class RequestBase(CamelModel):
    """Base schema with common saved request fields."""
    name: str
    method: str
    url: str
    headers: list[HeaderEntry] = []
    body: str | None = None

    @field_validator("method")
    @classmethod
    def check_method(cls, value: str) -> str:
        return normalize_method(value)

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_absolute_url(value)


class RequestCreate(RequestBase):
    """Schema for creating a new saved request."""
    pass


class RequestUpdate(CamelModel):
    """Schema for updating an existing saved request. All fields are optional."""
    name: str | None = None
    method: str | None = None
    url: str | None = None
    headers: list[HeaderEntry] | None = None
    body: str | None = None

    @field_validator("method")
    @classmethod
    def check_method(cls, value: str | None) -> str | None:
        return normalize_method(value) if value is not None else None

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str | None) -> str | None:
        return validate_absolute_url(value) if value is not None else None


class RequestResponse(RequestBase):
    """Schema for saved request response with system-generated fields."""
    id: int
    user_id: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
