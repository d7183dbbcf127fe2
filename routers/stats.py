from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

import schemas
from dependencies import get_db, get_session_token
from services import stats_service

router = APIRouter()


@router.post("/attempts", response_model=schemas.OkResponse, status_code=status.HTTP_201_CREATED)
def log_card_attempt(
    req: schemas.LogAttemptRequest,
    token: Optional[str] = Depends(get_session_token),
    db: Session = Depends(get_db),
):
    stats_service.log_attempt(
        db,
        token,
        card_id=req.card_id,
        is_won=req.is_won,
        category=req.category,
        language=req.language,
        difficulty=req.difficulty,
        wrong_count=req.wrong_count,
        max_wrong=req.max_wrong,
    )
    return schemas.OkResponse()


@router.get("/me", response_model=schemas.UserStatsResponse)
def get_user_stats(token: Optional[str] = Depends(get_session_token), db: Session = Depends(get_db)):
    return stats_service.user_stats(db, token)
