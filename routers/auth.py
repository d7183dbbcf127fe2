from typing import Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

import schemas
from dependencies import get_db, get_session_token
from services import auth_service

router = APIRouter()

SESSION_COOKIE = "session_token"


# ============================
# 👤 Register User
# ============================
@router.post("/register", response_model=schemas.OkResponse, status_code=status.HTTP_201_CREATED)
def register_user(req: schemas.RegisterRequest, db: Session = Depends(get_db)):
    auth_service.register(db, req.first_name, req.last_name, req.username, req.email, req.password)
    return schemas.OkResponse()


# ============================
# 🔐 Login (returns token, also sets cookie)
# ============================
@router.post("/login", response_model=schemas.LoginResponse)
def login(req: schemas.LoginRequest, response: Response, db: Session = Depends(get_db)):
    token = auth_service.login(db, req.identifier, req.password)
    response.set_cookie(
        key=SESSION_COOKIE,
        value=token,
        httponly=True,
        secure=False,  # local desktop app over http://localhost
        samesite="Lax",
    )
    return schemas.LoginResponse(session_token=token)


# ============================
# ✅ Validate Session (never fails)
# ============================
@router.post("/validate", response_model=schemas.ValidateResponse)
def validate_session(
    req: Optional[schemas.ValidateRequest] = None,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    if req is not None and req.session_token is not None:
        token = req.session_token
    return schemas.ValidateResponse(valid=auth_service.validate(db, token))


# ============================
# 🚪 Logout (idempotent)
# ============================
@router.post("/logout", response_model=schemas.OkResponse)
def logout(
    response: Response,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    auth_service.logout(db, token)
    response.delete_cookie(SESSION_COOKIE)
    return schemas.OkResponse()


# ============================
# 👀 Get Current User (/me)
# ============================
@router.get("/me", response_model=schemas.UserOut)
def read_current_user(token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    return auth_service.current_user(db, token)
