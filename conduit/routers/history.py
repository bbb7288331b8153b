"""
History record API routes.

History entries are created by executing saved requests and are read-only
through the API.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth import get_current_user_id
from ..database import get_db
from ..schemas.history import HistoryResponse
from ..services.history_service import get_request_history
from .requests import get_owned_request


router = APIRouter(prefix="/api/requests", tags=["history"])


@router.get("/{request_id}/history", response_model=list[HistoryResponse])
def list_request_history(
    request_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get the execution history of a saved request, newest first.

    Only the 50 most recent entries are returned.

    Raises:
        ResourceNotFoundError: 404 if request not found
    """
    get_owned_request(db, request_id, user_id)
    return get_request_history(db, request_id)
