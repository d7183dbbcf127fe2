# CRUD OPS: users + sessions

from datetime import datetime
from typing import Optional

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session # Import Session to enable type hinting for the database session.

from core.errors import ConflictError, StorageError
from models import Role, SessionToken, User

# Function to retrieve a user from the database by id.
def get_user(db: Session, user_id: int) -> Optional[User]:
    return db.get(User, user_id)

# Function to retrieve a user whose username OR email equals the identifier.
def get_user_by_identifier(db: Session, identifier: str) -> Optional[User]:
    stmt = select(User).where(or_(User.username == identifier, User.email == identifier))
    return db.execute(stmt).scalars().first()

# Fast-path uniqueness check; the UNIQUE constraints stay authoritative.
def username_or_email_taken(db: Session, username: str, email: str, exclude_user_id: Optional[int] = None) -> bool:
    stmt = select(User.id).where(or_(User.username == username, User.email == email))
    if exclude_user_id is not None:
        stmt = stmt.where(User.id != exclude_user_id)
    return db.execute(stmt).first() is not None

# Function to create a new user in the database.
# A concurrent duplicate that slipped past the pre-check surfaces here as a ConflictError.
def create_user(db: Session, *, first_name: str, last_name: str, username: str, email: str,
                password_hash: str, role: Role = Role.USER) -> User:
    db_user = User(
        first_name=first_name,
        last_name=last_name,
        username=username,
        email=email,
        password_hash=password_hash,
        role=role.value,
    )
    db.add(db_user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username or email already exists.")
    db.refresh(db_user)
    return db_user

def update_user_profile(db: Session, user: User, *, first_name: str, last_name: str, username: str, email: str) -> User:
    user.first_name = first_name
    user.last_name = last_name
    user.username = username
    user.email = email
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictError("Username or email already exists.")
    db.refresh(user)
    return user

def set_password_hash(db: Session, user: User, password_hash: str) -> None:
    user.password_hash = password_hash
    db.commit()

# --- Sessions ---

def create_session_token(db: Session, user_id: int, token_hash: str) -> SessionToken:
    db_token = SessionToken(user_id=user_id, token_hash=token_hash, revoked_at=None)
    db.add(db_token)
    try:
        db.commit()
    except IntegrityError as e:
        # token digests are unique across all sessions ever issued; a clash is not retried
        db.rollback()
        raise StorageError(f"Session create failed: {e.orig}")
    db.refresh(db_token)
    return db_token

def get_active_session(db: Session, token_hash: str) -> Optional[SessionToken]:
    stmt = select(SessionToken).where(
        SessionToken.token_hash == token_hash,
        SessionToken.revoked_at.is_(None),
    )
    return db.execute(stmt).scalars().first()

# Returns the number of sessions revoked (0 or 1).
def revoke_session_token(db: Session, token_hash: str) -> int:
    stmt = (
        update(SessionToken)
        .where(SessionToken.token_hash == token_hash, SessionToken.revoked_at.is_(None))
        .values(revoked_at=datetime.utcnow())
    )
    result = db.execute(stmt)
    db.commit()
    return result.rowcount or 0

# Function to resolve a token digest to its user, only while the session is active.
def get_user_by_session_token(db: Session, token_hash: str) -> Optional[User]:
    session = get_active_session(db, token_hash)
    return session.user if session else None
