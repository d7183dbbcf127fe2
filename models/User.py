from datetime import datetime

from sqlalchemy import Column, DateTime, Integer, String # Import column types for defining database columns.
from sqlalchemy.orm import relationship

from core.database import Base # All SQLAlchemy models inherit from the shared Base.
from models.enums import Role

# This class defines the User model for the database.
class User(Base):
    # __tablename__ tells SQLAlchemy the name of the table to use in the database for this model.
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False, default="")
    last_name = Column(String, nullable=False, default="")
    # 'unique=True' is the source of truth for uniqueness; service pre-checks only give nicer errors.
    username = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    # Argon2 encoded hash (algorithm + params + salt + digest); never the plain password.
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default=Role.USER.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    sessions = relationship("SessionToken", back_populates="user", cascade="all, delete-orphan")
    cards = relationship("Card", back_populates="creator")

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN.value

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', role={self.role})>"
