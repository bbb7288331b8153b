"""
History service for executing saved requests and recording each attempt.

Every execution of a saved request appends exactly one History entry,
whether or not a response was received, before the outcome is returned
to the caller.

History writes run in the threadpool, off the event loop.
"""

import logging

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..exceptions import ExecutionFailure, HistoryWriteError
from ..models.history import History
from ..models.request import SavedRequest
from ..schemas.execute import ExecuteRequest, ExecutionResult
from .http_executor import HttpExecutor


logger = logging.getLogger(__name__)

# Number of most recent entries returned when reading history
HISTORY_LIMIT = 50


def build_execute_request(saved: SavedRequest) -> ExecuteRequest:
    """Build the request to execute from a saved request's stored fields."""
    return ExecuteRequest(
        method=saved.method,
        url=saved.url,
        headers=saved.headers or [],
        body=saved.body,
    )


def _append(db: Session, entry: History) -> History:
    try:
        db.add(entry)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise
    db.refresh(entry)
    logger.debug(
        "Recorded history entry %s for request %s (status=%s, error=%s)",
        entry.id, entry.request_id, entry.status_code, entry.error
    )
    return entry


def record_success(
    db: Session,
    saved: SavedRequest,
    request: ExecuteRequest,
    result: ExecutionResult
) -> History:
    """
    Save a completed round trip to history.

    Args:
        db: Database session
        saved: The saved request that was executed
        request: The request that was sent
        result: The response received

    Returns:
        The created history record
    """
    return _append(db, History(
        request_id=saved.id,
        user_id=saved.user_id,
        method=request.method,
        url=request.url,
        status_code=result.status_code,
        response_time=result.response_time_ms,
        error=None,
        request_data=request.snapshot(),
        response_data=result.snapshot(),
    ))


def record_failure(
    db: Session,
    saved: SavedRequest,
    request: ExecuteRequest,
    failure: ExecutionFailure
) -> History:
    """Save a failed execution to history, with no status, timing or response."""
    return _append(db, History(
        request_id=saved.id,
        user_id=saved.user_id,
        method=request.method,
        url=request.url,
        status_code=None,
        response_time=None,
        error=failure.message,
        request_data=request.snapshot(),
        response_data=None,
    ))


async def execute_saved_request(
    db: Session,
    saved: SavedRequest,
    executor: HttpExecutor
) -> ExecutionResult:
    """
    Execute a saved request and record the attempt in history.

    The caller must already have checked that ``saved`` belongs to the
    current user; no authorization is performed here.

    Args:
        db: Database session
        saved: The saved request to execute
        executor: Executor performing the outbound call

    Returns:
        The ExecutionResult, unchanged

    Raises:
        ExecutionFailure: If no response was received; recorded first
        HistoryWriteError: If the attempt could not be recorded
    """
    request = build_execute_request(saved)

    try:
        result = await executor.execute(request)
    except ExecutionFailure as failure:
        try:
            await run_in_threadpool(record_failure, db, saved, request, failure)
        except SQLAlchemyError as e:
            logger.exception("Failed to record failed execution of request %s", saved.id)
            raise HistoryWriteError(
                f"Request execution failed ({failure.message}) and could not be "
                f"recorded in history"
            ) from e
        raise

    try:
        await run_in_threadpool(record_success, db, saved, request, result)
    except SQLAlchemyError as e:
        logger.exception("Failed to record execution of request %s", saved.id)
        raise HistoryWriteError(
            f"Request executed with status {result.status_code} but could not be "
            f"recorded in history"
        ) from e

    return result


def get_request_history(db: Session, request_id: int) -> list[History]:
    """
    Get the most recent history entries of a saved request, newest first.

    At most HISTORY_LIMIT entries are returned; older entries are kept.
    """
    return (
        db.query(History)
        .filter(History.request_id == request_id)
        .order_by(History.created_at.desc(), History.id.desc())
        .limit(HISTORY_LIMIT)
        .all()
    )
