# CRUD OPS: cards

from typing import List, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.orm import Session

from models import Card, CardStatus, Category


def create_card(db: Session, *, category: Category, english: str, latin: str, image_path: str,
                status: CardStatus, created_by: Optional[int]) -> Card:
    db_card = Card(
        category=category.value,
        english=english,
        latin=latin,
        image_path=image_path,
        status=status.value,
        created_by=created_by,
    )
    db.add(db_card)
    db.commit()
    db.refresh(db_card)
    return db_card

def get_card(db: Session, card_id: int) -> Optional[Card]:
    return db.get(Card, card_id, populate_existing=True)

# Unconditional overwrite; returns rows matched so callers can report "not found".
def set_card_status(db: Session, card_id: int, status: CardStatus) -> int:
    result = db.execute(update(Card).where(Card.id == card_id).values(status=status.value))
    db.commit()
    return result.rowcount or 0

def list_cards(db: Session, status: Optional[CardStatus] = None) -> List[Card]:
    stmt = select(Card)
    if status is not None:
        stmt = stmt.where(Card.status == status.value)
    # newest first; id breaks ties between cards created within the same timestamp
    stmt = stmt.order_by(Card.created_at.desc(), Card.id.desc())
    return list(db.execute(stmt).scalars().all())

def count_cards(db: Session, status: CardStatus) -> int:
    stmt = select(func.count()).select_from(Card).where(Card.status == status.value)
    return db.execute(stmt).scalar_one()

def list_approved_by_category(db: Session, category: Category) -> List[Card]:
    stmt = (
        select(Card)
        .where(Card.category == category.value, Card.status == CardStatus.APPROVED.value)
        .order_by(Card.id)
    )
    return list(db.execute(stmt).scalars().all())

def update_card_fields(db: Session, card_id: int, values: dict) -> int:
    if not values:
        return 1 if get_card(db, card_id) is not None else 0
    result = db.execute(update(Card).where(Card.id == card_id).values(**values))
    db.commit()
    return result.rowcount or 0

def delete_card(db: Session, card_id: int) -> int:
    result = db.execute(delete(Card).where(Card.id == card_id))
    db.commit()
    return result.rowcount or 0
