"""
Request execution API routes.

Provides endpoints for executing HTTP requests, both ad hoc and saved.
Executions of saved requests are recorded in history whether or not the
remote server could be reached.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user_id
from ..database import get_db
from ..exceptions import ErrorResponse
from ..schemas.execute import ExecuteRequest, ExecuteResponse, ExecuteErrorResponse
from ..services.http_executor import HttpExecutor, get_executor
from ..services.history_service import execute_saved_request
from .requests import get_owned_request


router = APIRouter(prefix="/api/requests", tags=["execute"])

EXECUTE_RESPONSES = {
    200: {"model": ExecuteResponse, "description": "Response received (any remote status)"},
    404: {"model": ErrorResponse, "description": "Saved request not found"},
    500: {"model": ExecuteErrorResponse, "description": "No response could be received"},
}


@router.post("/execute", response_model=ExecuteResponse, responses=EXECUTE_RESPONSES)
async def execute_request(
    request: ExecuteRequest,
    user_id: str = Depends(get_current_user_id),
    executor: HttpExecutor = Depends(get_executor)
):
    """
    Execute an HTTP request without saving it.
    
    Args:
        request: The request to execute
        user_id: The calling user
        executor: Executor performing the outbound call
        
    Returns:
        ExecuteResponse with status, headers, body, and timing info

    Raises:
        ExecutionFailure: Rendered as ExecuteErrorResponse with status 500
    """
    result = await executor.execute(request)
    return ExecuteResponse.from_result(result)


@router.post("/{request_id}/execute", response_model=ExecuteResponse, responses=EXECUTE_RESPONSES)
async def execute_saved(
    request_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
    executor: HttpExecutor = Depends(get_executor)
):
    """
    Execute a saved HTTP request by ID and record the attempt in history.
    
    Args:
        request_id: The unique identifier of the saved request
        user_id: The calling user
        db: Database session
        executor: Executor performing the outbound call
        
    Returns:
        ExecuteResponse with status, headers, body, and timing info
        
    Raises:
        ResourceNotFoundError: 404 if request not found
        ExecutionFailure: Rendered as ExecuteErrorResponse with status 500
    """
    saved = get_owned_request(db, request_id, user_id)
    result = await execute_saved_request(db, saved, executor)
    return ExecuteResponse.from_result(result)
