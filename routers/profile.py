from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import schemas
from dependencies import get_db, get_session_token
from services import profile_service

router = APIRouter()


@router.get("", response_model=schemas.UserOut)
def get_profile(token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    return profile_service.get_profile(db, token)


@router.put("", response_model=schemas.UserOut)
def update_profile(
    req: schemas.UpdateProfileRequest,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    return profile_service.update_profile(db, token, req.first_name, req.last_name, req.username, req.email)


@router.post("/password", response_model=schemas.OkResponse)
def change_password(
    req: schemas.ChangePasswordRequest,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    profile_service.change_password(db, token, req.old_password, req.new_password)
    return schemas.OkResponse()
