# card.py
# Flashcard content items and their moderation status.

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from core.database import Base
from models.enums import CardStatus, Category, sql_in


class Card(Base):
    __tablename__ = "cards"
    __table_args__ = (
        CheckConstraint(f"category IN ({sql_in(Category)})", name="ck_cards_category"),
        CheckConstraint(f"status IN ({sql_in(CardStatus)})", name="ck_cards_status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    category = Column(String, nullable=False, index=True)
    # primary-language term
    english = Column(Text, nullable=False)
    # secondary / reference term
    latin = Column(Text, nullable=False)
    image_path = Column(Text, nullable=False)
    status = Column(String, nullable=False, default=CardStatus.PENDING.value, index=True)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    creator = relationship("User", back_populates="cards")
    attempts = relationship("CardAttempt", back_populates="card", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Card(id={self.id}, category={self.category}, status={self.status})>"
