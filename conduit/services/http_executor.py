"""
HTTP execution service for sending HTTP requests.

This service performs a single outbound call with httpx, captures the
response and its timing, and translates transport failures into
ExecutionFailure. Every HTTP status code is a normal response here; only
a request that never got a response is an error.
"""

import errno
import json
import logging
import socket
import time
from dataclasses import dataclass
from typing import Any, Iterable

import httpx

from ..config import DEFAULT_TIMEOUT, get_settings
from ..exceptions import ExecutionErrorKind, ExecutionFailure
from ..schemas.execute import ExecuteRequest, ExecutionResult, JsonBody, TextBody
from ..schemas.request import HeaderEntry


logger = logging.getLogger(__name__)

# Methods that conventionally carry a request body
BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


@dataclass(frozen=True)
class PreparedRequest:
    """Normalized arguments for the outbound httpx call."""
    method: str
    url: str
    headers: dict[str, str]
    json: Any = None
    content: str | None = None
    has_json: bool = False

    def request_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "method": self.method,
            "url": self.url,
            "headers": self.headers,
        }
        if self.has_json:
            kwargs["json"] = self.json
        elif self.content is not None:
            kwargs["content"] = self.content
        return kwargs


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def loads_strict(text: str) -> Any:
    """Parse JSON text, rejecting NaN and Infinity."""
    return json.loads(text, parse_constant=_reject_constant)


def normalize_headers(entries: Iterable[HeaderEntry]) -> dict[str, str]:
    """
    Fold header entries into a single mapping.

    Entries with an empty key or value are dropped. A later entry with the
    same key (case-sensitive) overwrites an earlier one.
    """
    headers: dict[str, str] = {}
    for entry in entries:
        if entry.key and entry.value:
            headers[entry.key] = entry.value
    return headers


def prepare_request(request: ExecuteRequest) -> PreparedRequest:
    """
    Build the outbound call for a request.

    For POST, PUT and PATCH a non-empty body is sent as JSON when it parses
    as JSON, and as the raw string otherwise. Other methods send no body.
    """
    method = request.method.upper()
    headers = normalize_headers(request.headers)

    if method in BODY_METHODS and request.body:
        try:
            payload = loads_strict(request.body)
        except ValueError:
            return PreparedRequest(method, request.url, headers, content=request.body)
        return PreparedRequest(method, request.url, headers, json=payload, has_json=True)

    return PreparedRequest(method, request.url, headers)


def response_headers(response: httpx.Response) -> dict[str, str]:
    """
    Collect response headers with the casing they were received in.

    Repeated headers are joined with ", ".
    """
    headers: dict[str, str] = {}
    for raw_key, raw_value in response.headers.raw:
        key = raw_key.decode(response.headers.encoding)
        value = raw_value.decode(response.headers.encoding)
        headers[key] = f"{headers[key]}, {value}" if key in headers else value
    return headers


def parse_response_body(response: httpx.Response) -> JsonBody | TextBody:
    """
    Decode the response body as JSON whenever it parses, whatever the
    declared content type.

    Empty bodies and bodies that are not valid JSON are kept as text.
    """
    text = response.text
    if text.strip():
        try:
            return JsonBody(value=loads_strict(text))
        except ValueError:
            pass
    return TextBody(value=text)


def _iter_causes(exc: BaseException) -> Iterable[BaseException]:
    """Walk an exception, its causes and contexts, and exception group members."""
    seen: set[int] = set()
    stack = [exc]
    while stack:
        current = stack.pop()
        if id(current) in seen:
            continue
        seen.add(id(current))
        yield current
        stack.extend(getattr(current, "exceptions", ()))
        if current.__cause__ is not None:
            stack.append(current.__cause__)
        if current.__context__ is not None:
            stack.append(current.__context__)


def classify_error(exc: BaseException) -> ExecutionFailure:
    """
    Translate a transport exception into an ExecutionFailure.

    Classification is based on exception types found anywhere in the
    chain: httpx wraps the socket error raised by the connection backend.
    """
    if isinstance(exc, httpx.TimeoutException):
        return ExecutionFailure(ExecutionErrorKind.TIMED_OUT, str(exc) or None)

    for cause in _iter_causes(exc):
        if isinstance(cause, socket.gaierror):
            return ExecutionFailure(ExecutionErrorKind.NAME_RESOLUTION_FAILED, str(cause))
        if isinstance(cause, ConnectionRefusedError) or (
            isinstance(cause, OSError) and cause.errno == errno.ECONNREFUSED
        ):
            return ExecutionFailure(ExecutionErrorKind.CONNECTION_REFUSED, str(cause))
        if isinstance(cause, (TimeoutError, socket.timeout)):
            return ExecutionFailure(ExecutionErrorKind.TIMED_OUT, str(cause) or None)

    return ExecutionFailure(ExecutionErrorKind.OTHER, str(exc) or None)


class HttpExecutor:
    """
    Executes one outbound HTTP request per call.

    The executor holds configuration only; each call opens its own client,
    so concurrent executions share no state.

    Args:
        timeout: Deadline for a single call in seconds
        follow_redirects: Whether redirects are followed
        transport: Optional httpx transport, mainly for tests
        trust_env: Whether proxy settings are read from the environment
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        follow_redirects: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
        trust_env: bool = True,
    ):
        self.timeout = timeout
        self.follow_redirects = follow_redirects
        self.transport = transport
        self.trust_env = trust_env

    async def execute(self, request: ExecuteRequest) -> ExecutionResult:
        """
        Execute an HTTP request and return the response.

        Args:
            request: The request to execute

        Returns:
            ExecutionResult for any HTTP status code

        Raises:
            ExecutionFailure: If no response was received
        """
        prepared = prepare_request(request)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                follow_redirects=self.follow_redirects,
                transport=self.transport,
                trust_env=self.trust_env,
            ) as client:
                start_time = time.perf_counter()
                response = await client.request(**prepared.request_kwargs())
                end_time = time.perf_counter()
        except Exception as e:
            failure = classify_error(e)
            logger.warning(
                "%s %s failed (%s): %s",
                prepared.method, prepared.url, failure.kind.value, e
            )
            raise failure from e

        response_time_ms = max(0, int((end_time - start_time) * 1000))

        logger.info(
            "%s %s -> %d in %dms",
            prepared.method, prepared.url, response.status_code, response_time_ms
        )

        return ExecutionResult(
            status_code=response.status_code,
            status_text=response.reason_phrase or "",
            headers=response_headers(response),
            data=parse_response_body(response),
            response_time_ms=response_time_ms,
        )


def get_executor() -> HttpExecutor:
    """Dependency function for FastAPI providing a configured executor."""
    settings = get_settings()
    return HttpExecutor(
        timeout=settings.request_timeout,
        follow_redirects=settings.follow_redirects,
    )
