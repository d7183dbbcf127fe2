from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import schemas
from dependencies import get_db, get_session_token
from services import card_service

router = APIRouter()


# ----------------------------------------------------------------------
# submission
# ----------------------------------------------------------------------
@router.post("/admin", response_model=schemas.CardResponse, status_code=status.HTTP_201_CREATED)
def admin_add_card(
    req: schemas.CreateCardRequest,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    return card_service.submit_as_admin(db, token, req.category, req.english, req.latin, req.image_path)


@router.post("/request", response_model=schemas.CardResponse, status_code=status.HTTP_201_CREATED)
def user_request_card(
    req: schemas.CreateCardRequest,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    return card_service.submit_as_user(db, token, req.category, req.english, req.latin, req.image_path)


# ----------------------------------------------------------------------
# moderation (admin)
# ----------------------------------------------------------------------
@router.get("/pending", response_model=List[schemas.CardOut])
def list_pending_cards(token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    return card_service.list_pending(db, token)


@router.get("/pending/count", response_model=schemas.CountResponse)
def count_pending_cards(token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    return schemas.CountResponse(count=card_service.count_pending(db, token))


@router.post("/{card_id}/approve", response_model=schemas.OkResponse)
def approve_card(card_id: int, token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    card_service.approve(db, token, card_id)
    return schemas.OkResponse()


@router.post("/{card_id}/reject", response_model=schemas.OkResponse)
def reject_card(card_id: int, token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    card_service.reject(db, token, card_id)
    return schemas.OkResponse()


# ----------------------------------------------------------------------
# admin CRUD
# ----------------------------------------------------------------------
@router.get("/admin", response_model=List[schemas.CardOut])
def list_all_cards_admin(token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    return card_service.list_all_admin(db, token)


@router.patch("/{card_id}", response_model=schemas.CardOut)
def admin_update_card(
    card_id: int,
    req: schemas.UpdateCardRequest,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    return card_service.update(db, token, card_id, req.model_dump(exclude_unset=True))


@router.delete("/{card_id}", response_model=schemas.OkResponse)
def admin_delete_card(card_id: int, token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    card_service.delete(db, token, card_id)
    return schemas.OkResponse()
