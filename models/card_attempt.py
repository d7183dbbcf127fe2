from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import relationship

from core.database import Base


class CardAttempt(Base):
    """One finished hangman round: which card, who played it, and whether it was guessed."""
    __tablename__ = "card_attempts"
    __table_args__ = (
        Index("idx_card_attempts_user_won", "user_id", "is_won"),
        Index("idx_card_attempts_user_time", "user_id", "played_at"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    card_id = Column(Integer, ForeignKey("cards.id", ondelete="CASCADE"), nullable=False)
    is_won = Column(Boolean, nullable=False)
    category = Column(String, nullable=True)
    language = Column(String, nullable=True)    # "EN" | "LAT"
    difficulty = Column(String, nullable=True)  # "EASY" | "HARD"
    wrong_count = Column(Integer, nullable=True)
    max_wrong = Column(Integer, nullable=True)
    played_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    card = relationship("Card", back_populates="attempts")
