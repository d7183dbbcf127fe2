# backend/schemas.py
# Request / response shapes for the named operations the UI invokes.
# Field rules that carry business meaning (name lengths, password length,
# uniqueness) live in the services so direct callers get the same errors;
# these models only pin down shape and types.
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models import CardStatus, Category, Difficulty, Language

# -------------------------
# Auth / User
# -------------------------
class RegisterRequest(BaseModel):
    first_name: str
    last_name: str
    username: str
    email: str
    password: str

class LoginRequest(BaseModel):
    identifier: str = Field(..., description="Username or email")
    password: str

class LoginResponse(BaseModel):
    session_token: str

class ValidateRequest(BaseModel):
    """Token may also come from the Authorization header or cookie."""
    session_token: Optional[str] = None

class ValidateResponse(BaseModel):
    valid: bool

class OkResponse(BaseModel):
    ok: bool = True

class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    first_name: str
    last_name: str
    username: str
    email: str
    role: str
    created_at: datetime

# -------------------------
# Profile
# -------------------------
class UpdateProfileRequest(BaseModel):
    first_name: str
    last_name: str
    username: str
    email: str

class ChangePasswordRequest(BaseModel):
    old_password: str
    new_password: str

# -------------------------
# Cards
# -------------------------
class CreateCardRequest(BaseModel):
    category: Category
    english: str = Field(..., min_length=1)
    latin: str = Field(..., min_length=1)
    image_path: str = Field(..., min_length=1)

    @field_validator("category", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

class UpdateCardRequest(BaseModel):
    """Partial update; omitted fields keep their current value."""
    category: Optional[Category] = None
    english: Optional[str] = None
    latin: Optional[str] = None
    image_path: Optional[str] = None

    @field_validator("category", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

class CardResponse(BaseModel):
    """Result of a submission: the new id and the status it landed in."""
    model_config = ConfigDict(from_attributes=True)
    id: int
    status: CardStatus

class CardOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    category: Category
    english: str
    latin: str
    image_path: str
    status: CardStatus
    created_by: Optional[int] = None
    created_at: datetime

class CountResponse(BaseModel):
    count: int

# -------------------------
# Game
# -------------------------
class GameCard(BaseModel):
    id: int
    category: Category
    english: str
    latin: str
    image_path: str

class StartGameRequest(BaseModel):
    category: Category

    @field_validator("category", mode="before")
    @classmethod
    def _upper(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

class StartGameResponse(BaseModel):
    game_id: Optional[str] = None
    total: int
    card: Optional[GameCard] = None
    finished: bool
    message: str

class NextCardResponse(BaseModel):
    card: Optional[GameCard] = None
    finished: bool
    remaining: int
    message: str

# -------------------------
# Attempts / stats
# -------------------------
class LogAttemptRequest(BaseModel):
    card_id: int
    is_won: bool
    category: Optional[Category] = None
    language: Optional[Language] = None
    difficulty: Optional[Difficulty] = None
    wrong_count: Optional[int] = Field(None, ge=0)
    max_wrong: Optional[int] = Field(None, ge=0)

class MissedCard(BaseModel):
    card_id: int
    category: str
    english: str
    latin: str
    image_path: str
    last_played_at: datetime

class UserStatsResponse(BaseModel):
    guessed_count: int
    missed_count: int
    missed_cards: List[MissedCard]
