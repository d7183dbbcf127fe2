import logging
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from core.errors import NotFoundError, ValidationError
from crud import attempt as crud_attempt
from crud import card as crud_card
from models import Difficulty, Language
from services import auth_service
from services.card_service import parse_category

logger = logging.getLogger(__name__)


def _optional_choice(value: Optional[str], enum_cls, label: str) -> Optional[str]:
    if isinstance(value, enum_cls):
        return value.value
    if value is None or not str(value).strip():
        return None
    try:
        return enum_cls(str(value).strip().upper()).value
    except ValueError:
        allowed = ", ".join(m.value for m in enum_cls)
        raise ValidationError(f"Unknown {label} {value!r}; expected one of {allowed}.")


def log_attempt(db: Session, token: str, card_id: int, is_won: bool, category: Optional[str] = None,
                language: Optional[str] = None, difficulty: Optional[str] = None,
                wrong_count: Optional[int] = None, max_wrong: Optional[int] = None) -> None:
    """Record one finished round for the caller's account."""
    user_id, _role = auth_service.resolve(db, token)

    if crud_card.get_card(db, card_id) is None:
        raise NotFoundError("Card not found.")
    if wrong_count is not None and wrong_count < 0:
        raise ValidationError("wrong_count cannot be negative.")
    if max_wrong is not None and max_wrong < 0:
        raise ValidationError("max_wrong cannot be negative.")

    crud_attempt.create_attempt(
        db,
        user_id=user_id,
        card_id=card_id,
        is_won=bool(is_won),
        category=parse_category(category).value if category else None,
        language=_optional_choice(language, Language, "language"),
        difficulty=_optional_choice(difficulty, Difficulty, "difficulty"),
        wrong_count=wrong_count,
        max_wrong=max_wrong,
    )
    logger.info("[Stats] user id=%s card id=%s is_won=%s", user_id, card_id, bool(is_won))


def user_stats(db: Session, token: str) -> Dict[str, Any]:
    user_id, _role = auth_service.resolve(db, token)
    guessed, missed = crud_attempt.count_outcomes(db, user_id)
    return {
        "guessed_count": guessed,
        "missed_count": missed,
        "missed_cards": [
            {
                "card_id": card.id,
                "category": card.category,
                "english": card.english,
                "latin": card.latin,
                "image_path": card.image_path,
                "last_played_at": last_played_at,
            }
            for card, last_played_at in crud_attempt.missed_cards(db, user_id)
        ],
    }
