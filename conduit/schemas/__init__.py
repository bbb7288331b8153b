"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .request import (
    HttpMethod,
    HeaderEntry,
    RequestBase,
    RequestCreate,
    RequestUpdate,
    RequestResponse,
)

from .history import HistoryResponse

from .execute import (
    ExecuteRequest,
    JsonBody,
    TextBody,
    ResponseBody,
    ExecutionResult,
    ExecuteResponse,
    ExecuteErrorResponse,
)

__all__ = [
    # Saved request schemas
    "HttpMethod",
    "HeaderEntry",
    "RequestBase",
    "RequestCreate",
    "RequestUpdate",
    "RequestResponse",
    # History schemas
    "HistoryResponse",
    # Execute schemas
    "ExecuteRequest",
    "JsonBody",
    "TextBody",
    "ResponseBody",
    "ExecutionResult",
    "ExecuteResponse",
    "ExecuteErrorResponse",
]
