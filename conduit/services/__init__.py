# Services package

from .http_executor import HttpExecutor, get_executor, normalize_headers, prepare_request
from .history_service import execute_saved_request, get_request_history

__all__ = [
    "HttpExecutor",
    "get_executor",
    "normalize_headers",
    "prepare_request",
    "execute_saved_request",
    "get_request_history",
]
