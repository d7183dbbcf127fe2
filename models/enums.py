"""
Closed value sets stored as plain TEXT columns.
"""
from enum import Enum


class Role(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class Category(str, Enum):
    """Deck partition; a card belongs to exactly one."""
    BONES = "BONES"
    ORGANS = "ORGANS"


class CardStatus(str, Enum):
    """Moderation lifecycle: PENDING -> APPROVED | REJECTED."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class Language(str, Enum):
    EN = "EN"
    LAT = "LAT"


class Difficulty(str, Enum):
    EASY = "EASY"
    HARD = "HARD"


def sql_in(enum_cls) -> str:
    """Render an enum as the body of a SQL IN (...) check."""
    return ", ".join(f"'{member.value}'" for member in enum_cls)
