"""
Pydantic schemas for request execution.

Defines the request handed to the executor, the immutable result it
produces, and the shapes returned by the execute endpoints.
"""

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .base import CamelModel
from .request import HeaderEntry, validate_absolute_url


class ExecuteRequest(CamelModel):
    """
    Schema for a request to execute.

    The method is case-insensitive and passed through as given; the body
    is opaque text that may or may not be JSON.
    """
    method: str = Field(min_length=1)
    url: str
    headers: list[HeaderEntry] = []
    body: str | None = None

    @field_validator("method")
    @classmethod
    def check_method(cls, value: str) -> str:
        method = value.strip()
        if not method:
            raise ValueError("Method is required")
        return method

    @field_validator("url")
    @classmethod
    def check_url(cls, value: str) -> str:
        return validate_absolute_url(value)

    def snapshot(self) -> dict[str, Any]:
        """Plain-data copy of what is being sent, for history records."""
        return {
            "method": self.method,
            "url": self.url,
            "headers": [entry.model_dump() for entry in self.headers],
            "body": self.body,
        }


class JsonBody(BaseModel):
    """Response body that was decoded as JSON."""
    kind: Literal["json"] = "json"
    value: Any

    model_config = ConfigDict(frozen=True)


class TextBody(BaseModel):
    """Response body kept as raw text."""
    kind: Literal["text"] = "text"
    value: str

    model_config = ConfigDict(frozen=True)


ResponseBody = Annotated[Union[JsonBody, TextBody], Field(discriminator="kind")]


class ExecutionResult(BaseModel):
    """
    Outcome of one completed round trip.

    Any HTTP status code, including 4xx and 5xx, produces a result.
    """
    status_code: int
    status_text: str
    headers: dict[str, str]
    data: ResponseBody
    response_time_ms: int = Field(ge=0)

    model_config = ConfigDict(frozen=True)

    def snapshot(self) -> dict[str, Any]:
        """Plain-data copy of what was received, for history records."""
        return {
            "statusCode": self.status_code,
            "statusText": self.status_text,
            "headers": dict(self.headers),
            "data": self.data.value,
        }


class ExecuteResponse(CamelModel):
    """Schema for a successful execution as returned by the API."""
    status_code: int
    status_text: str
    headers: dict[str, str]
    data: Any = None
    response_time: int

    @classmethod
    def from_result(cls, result: ExecutionResult) -> "ExecuteResponse":
        return cls(
            status_code=result.status_code,
            status_text=result.status_text,
            headers=result.headers,
            data=result.data.value,
            response_time=result.response_time_ms,
        )


class ExecuteErrorResponse(CamelModel):
    """Schema for a failed execution as returned by the API."""
    error: str
    status_code: Literal[0] = 0
    response_time: Literal[0] = 0
