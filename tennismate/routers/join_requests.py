"""JoinRequest API routes — host accept / decline."""
import logging
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from tennismate.database import get_db
from tennismate.schemas.join_request import JoinRequestAction, JoinRequestOut
from tennismate.services import participation_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/{request_id}/accept", response_model=JoinRequestOut)
def accept_join_request(request_id: str, payload: JoinRequestAction, db: Session = Depends(get_db)):
    """Accept a pending request — adds the requester to the event if a spot is free."""
    return participation_service.accept_join_request(db, request_id, payload.actor_user_id)


@router.post("/{request_id}/decline", response_model=JoinRequestOut)
def decline_join_request(request_id: str, payload: JoinRequestAction, db: Session = Depends(get_db)):
    """Decline a pending request."""
    return participation_service.decline_join_request(db, request_id, payload.actor_user_id)
