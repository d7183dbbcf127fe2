"""
Card moderation.

Lifecycle handled here:

    PENDING --approve--> APPROVED
    PENDING --reject---> REJECTED

Admin submissions skip moderation and go straight to APPROVED; user requests
start as PENDING. Only APPROVED cards are ever dealt into a game deck.
approve/reject overwrite the status unconditionally (an admin can flip a
REJECTED card to APPROVED and back).
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from core.errors import NotFoundError, ValidationError
from core.security import is_encodable
from crud import card as crud_card
from models import Card, CardStatus, Category
from services import auth_service

logger = logging.getLogger(__name__)

CARD_NOT_FOUND = "Card not found."
EDITABLE_FIELDS = ("category", "english", "latin", "image_path")


def parse_category(value: Any) -> Category:
    if isinstance(value, Category):
        return value
    try:
        return Category(str(value or "").strip().upper())
    except ValueError:
        allowed = ", ".join(c.value for c in Category)
        raise ValidationError(f"Unknown category {value!r}; expected one of {allowed}.")


def _required_text(value: Optional[str], label: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationError(f"{label} is required.")
    if not is_encodable(text):
        raise ValidationError(f"{label} must be valid text.")
    return text


def _clean_card_input(category: Any, english: str, latin: str, image_path: str) -> Dict[str, Any]:
    return {
        "category": parse_category(category),
        "english": _required_text(english, "English term"),
        "latin": _required_text(latin, "Latin term"),
        "image_path": _required_text(image_path, "Image path"),
    }


# --- Submission ---

def submit_as_admin(db: Session, token: str, category: Any, english: str, latin: str, image_path: str) -> Card:
    user_id = auth_service.require_admin(db, token)
    fields = _clean_card_input(category, english, latin, image_path)
    card = crud_card.create_card(db, status=CardStatus.APPROVED, created_by=user_id, **fields)
    logger.info("[Cards] admin id=%s added card id=%s (%s)", user_id, card.id, card.category)
    return card


def submit_as_user(db: Session, token: str, category: Any, english: str, latin: str, image_path: str) -> Card:
    user_id, _role = auth_service.resolve(db, token)
    fields = _clean_card_input(category, english, latin, image_path)
    card = crud_card.create_card(db, status=CardStatus.PENDING, created_by=user_id, **fields)
    logger.info("[Cards] user id=%s requested card id=%s (%s)", user_id, card.id, card.category)
    return card


# --- Moderation ---

def _set_status(db: Session, token: str, card_id: int, status: CardStatus) -> None:
    admin_id = auth_service.require_admin(db, token)
    if crud_card.set_card_status(db, card_id, status) == 0:
        raise NotFoundError(CARD_NOT_FOUND)
    logger.info("[Cards] admin id=%s set card id=%s to %s", admin_id, card_id, status.value)


def approve(db: Session, token: str, card_id: int) -> None:
    _set_status(db, token, card_id, CardStatus.APPROVED)


def reject(db: Session, token: str, card_id: int) -> None:
    _set_status(db, token, card_id, CardStatus.REJECTED)


def list_pending(db: Session, token: str) -> List[Card]:
    auth_service.require_admin(db, token)
    return crud_card.list_cards(db, CardStatus.PENDING)


def count_pending(db: Session, token: str) -> int:
    auth_service.require_admin(db, token)
    return crud_card.count_cards(db, CardStatus.PENDING)


# --- Admin CRUD ---

def list_all_admin(db: Session, token: str) -> List[Card]:
    auth_service.require_admin(db, token)
    return crud_card.list_cards(db)


def update(db: Session, token: str, card_id: int, fields: Dict[str, Any]) -> Card:
    """Partial update of the content fields; keys with a None value are left untouched."""
    admin_id = auth_service.require_admin(db, token)

    values: Dict[str, Any] = {}
    for key, value in (fields or {}).items():
        if key not in EDITABLE_FIELDS:
            raise ValidationError(f"Field {key!r} cannot be edited.")
        if value is None:
            continue
        if key == "category":
            values[key] = parse_category(value).value
        else:
            values[key] = _required_text(value, key.replace("_", " ").capitalize())

    if crud_card.update_card_fields(db, card_id, values) == 0:
        raise NotFoundError(CARD_NOT_FOUND)
    logger.info("[Cards] admin id=%s updated card id=%s fields=%s", admin_id, card_id, sorted(values))
    card = crud_card.get_card(db, card_id)
    if card is None:
        raise NotFoundError(CARD_NOT_FOUND)
    return card


def delete(db: Session, token: str, card_id: int) -> None:
    admin_id = auth_service.require_admin(db, token)
    if crud_card.delete_card(db, card_id) == 0:
        raise NotFoundError(CARD_NOT_FOUND)
    logger.info("[Cards] admin id=%s deleted card id=%s", admin_id, card_id)


# --- Deck source ---

def approved_deck(db: Session, category: Any) -> List[Card]:
    """All APPROVED cards of a category, as read for a new game run."""
    return crud_card.list_approved_by_category(db, parse_category(category))
