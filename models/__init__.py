"""
The models package contains all SQLAlchemy ORM models
for the Hangman+ backend.

By importing key classes here, they are registered on Base.metadata and can be
easily accessed from other parts of the application.

For example:
from models import User, Card
"""

from .enums import CardStatus, Category, Difficulty, Language, Role
from .User import User
from .session import SessionToken
from .card import Card
from .card_attempt import CardAttempt
