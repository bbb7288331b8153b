"""
Saved request API routes.

Provides CRUD operations for saved HTTP requests. Every operation is
scoped to the calling user; another user's request is reported as not found.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..auth import get_current_user_id
from ..database import get_db
from ..exceptions import ResourceNotFoundError
from ..models.request import SavedRequest
from ..schemas.request import RequestCreate, RequestUpdate, RequestResponse


router = APIRouter(prefix="/api/requests", tags=["requests"])


def get_owned_request(db: Session, request_id: int, user_id: str) -> SavedRequest:
    """
    Look up a saved request by ID and owner.

    Raises:
        ResourceNotFoundError: If the request does not exist or belongs to another user
    """
    db_request = (
        db.query(SavedRequest)
        .filter(SavedRequest.id == request_id, SavedRequest.user_id == user_id)
        .first()
    )
    if db_request is None:
        raise ResourceNotFoundError("Request", request_id)
    return db_request


@router.post("", response_model=RequestResponse, status_code=status.HTTP_201_CREATED)
def create_request(
    request_data: RequestCreate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Create a new saved request.
    
    Args:
        request_data: Request definition
        user_id: The calling user
        db: Database session
        
    Returns:
        The created request with assigned ID and timestamps
    """
    db_request = SavedRequest(
        user_id=user_id,
        name=request_data.name,
        method=request_data.method,
        url=request_data.url,
        headers=[entry.model_dump() for entry in request_data.headers],
        body=request_data.body,
    )
    db.add(db_request)
    db.commit()
    db.refresh(db_request)
    return db_request


@router.get("", response_model=list[RequestResponse])
def list_requests(
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """List the calling user's saved requests, most recently updated first."""
    return (
        db.query(SavedRequest)
        .filter(SavedRequest.user_id == user_id)
        .order_by(SavedRequest.updated_at.desc(), SavedRequest.id.desc())
        .all()
    )


@router.get("/{request_id}", response_model=RequestResponse)
def get_request(
    request_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Get a single saved request by ID.
    
    Raises:
        ResourceNotFoundError: 404 if request not found
    """
    return get_owned_request(db, request_id, user_id)


@router.put("/{request_id}", response_model=RequestResponse)
def update_request(
    request_id: int,
    request_data: RequestUpdate,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Update an existing saved request.
    
    Args:
        request_id: The unique identifier of the request to update
        request_data: Fields to update (only provided fields are updated)
        user_id: The calling user
        db: Database session
        
    Returns:
        The updated request
        
    Raises:
        ResourceNotFoundError: 404 if request not found
    """
    db_request = get_owned_request(db, request_id, user_id)
    
    # Update only provided fields
    update_data = request_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field != "body":
            continue
        setattr(db_request, field, value)
    
    db.commit()
    db.refresh(db_request)
    return db_request


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_request(
    request_id: int,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db)
):
    """
    Delete a saved request by ID, together with its history.
    
    Raises:
        ResourceNotFoundError: 404 if request not found
    """
    db_request = get_owned_request(db, request_id, user_id)
    
    db.delete(db_request)
    db.commit()
    return None
