# CRUD OPS: attempt ledger (write path + per-user aggregation)

from typing import List, Optional, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.orm import Session

from models import Card, CardAttempt


def create_attempt(db: Session, *, user_id: int, card_id: int, is_won: bool, category: Optional[str],
                   language: Optional[str], difficulty: Optional[str], wrong_count: Optional[int],
                   max_wrong: Optional[int]) -> CardAttempt:
    attempt = CardAttempt(
        user_id=user_id,
        card_id=card_id,
        is_won=is_won,
        category=category,
        language=language,
        difficulty=difficulty,
        wrong_count=wrong_count,
        max_wrong=max_wrong,
    )
    db.add(attempt)
    db.commit()
    db.refresh(attempt)
    return attempt

def count_outcomes(db: Session, user_id: int) -> Tuple[int, int]:
    """Returns (guessed, missed) for one user."""
    stmt = select(
        func.coalesce(func.sum(case((CardAttempt.is_won.is_(True), 1), else_=0)), 0),
        func.coalesce(func.sum(case((CardAttempt.is_won.is_(False), 1), else_=0)), 0),
    ).where(CardAttempt.user_id == user_id)
    guessed, missed = db.execute(stmt).one()
    return int(guessed), int(missed)

def missed_cards(db: Session, user_id: int) -> List[tuple]:
    """Distinct cards the user lost at least once, with the latest play time, most recent first."""
    last_played = func.max(CardAttempt.played_at).label("last_played_at")
    stmt = (
        select(Card, last_played)
        .join(CardAttempt, CardAttempt.card_id == Card.id)
        .where(CardAttempt.user_id == user_id, CardAttempt.is_won.is_(False))
        .group_by(Card.id)
        .order_by(last_played.desc(), Card.id.desc())
    )
    return [(row[0], row[1]) for row in db.execute(stmt).all()]
