"""
Session authority: registration, login, session validation / revocation, and
the token -> (user id, role) resolution every privileged operation goes through.

Raw tokens are handed to the caller exactly once (at login) and never stored
or logged; the database only ever sees their SHA-256 digest.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy.orm import Session

from core.errors import AuthError, ConflictError, ForbiddenError, ValidationError
from core.security import hash_password, hash_token, is_encodable, new_session_token, verify_password
from crud import user as crud_user
from models import Role, User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
UNAUTHORIZED = "Unauthorized."
ADMIN_ONLY = "Forbidden: admin only."

MIN_NAME_LEN = 2
MIN_USERNAME_LEN = 3
MIN_PASSWORD_LEN = 8

# Verified against when the identifier matches no account.
_DUMMY_PASSWORD_HASH = hash_password("dummy-password-for-timing")


def validate_identity_fields(first_name: str, last_name: str, username: str, email: str) -> None:
    """Field rules shared by registration and profile update."""
    if len((first_name or "").strip()) < MIN_NAME_LEN:
        raise ValidationError("First name must be at least 2 characters.")
    if len((last_name or "").strip()) < MIN_NAME_LEN:
        raise ValidationError("Last name must be at least 2 characters.")
    if len((username or "").strip()) < MIN_USERNAME_LEN:
        raise ValidationError("Username must be at least 3 characters.")
    if "@" not in (email or ""):
        raise ValidationError("Email is not valid.")
    if not all(is_encodable(value or "") for value in (first_name, last_name, username, email)):
        raise ValidationError("Fields must be valid text.")


def register(db: Session, first_name: str, last_name: str, username: str, email: str, password: str) -> User:
    validate_identity_fields(first_name, last_name, username, email)
    if len(password or "") < MIN_PASSWORD_LEN:
        raise ValidationError("Password must be at least 8 characters.")
    if not is_encodable(password):
        raise ValidationError("Password must be valid text.")

    username, email = username.strip(), email.strip()
    if crud_user.username_or_email_taken(db, username, email):
        raise ConflictError("Username or email already exists.")

    user = crud_user.create_user(
        db,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=Role.USER,
    )
    logger.info("[Auth] registered user id=%s username=%s", user.id, user.username)
    return user


def login(db: Session, identifier: str, password: str) -> str:
    """Check credentials and mint a new session. Returns the raw token."""
    identifier = (identifier or "").strip()
    if not identifier:
        raise ValidationError("Enter username or email.")
    if not password:
        raise ValidationError("Enter password.")

    # Unknown identifier and wrong password must look identical to the caller.
    user = crud_user.get_user_by_identifier(db, identifier) if is_encodable(identifier) else None
    if user is None:
        verify_password(password, _DUMMY_PASSWORD_HASH)
    if user is None or not verify_password(password, user.password_hash):
        logger.info("[Auth] failed login attempt")
        raise AuthError(INVALID_CREDENTIALS)

    token = new_session_token()
    crud_user.create_session_token(db, user_id=user.id, token_hash=hash_token(token))
    logger.info("[Auth] user id=%s logged in", user.id)
    return token


def _digest(token: Optional[str]) -> Optional[str]:
    token = (token or "").strip()
    if not token or not is_encodable(token):
        return None
    return hash_token(token)


def validate(db: Session, token: Optional[str]) -> bool:
    """True iff the token maps to a non-revoked session. Never raises for bad tokens."""
    digest = _digest(token)
    if digest is None:
        return False
    return crud_user.get_active_session(db, digest) is not None


def logout(db: Session, token: Optional[str]) -> None:
    """Revoke the session; blank, unknown or already-revoked tokens are a no-op."""
    digest = _digest(token)
    if digest is None:
        return
    revoked = crud_user.revoke_session_token(db, digest)
    if revoked:
        logger.info("[Auth] session revoked")


def current_user(db: Session, token: Optional[str]) -> User:
    digest = _digest(token)
    user = crud_user.get_user_by_session_token(db, digest) if digest else None
    if user is None:
        raise AuthError(UNAUTHORIZED)
    return user


def resolve(db: Session, token: Optional[str]) -> Tuple[int, Role]:
    """
    Map a bearer token to (user_id, role).

    Every authorization-gated operation calls this first; its AuthError is
    propagated unchanged.
    """
    user = current_user(db, token)
    return user.id, Role(user.role)


def require_admin(db: Session, token: Optional[str]) -> int:
    """resolve() plus the ADMIN role check. Returns the admin's user id."""
    user_id, role = resolve(db, token)
    if role is not Role.ADMIN:
        raise ForbiddenError(ADMIN_ONLY)
    return user_id


def ensure_admin(db: Session, first_name: str, last_name: str, username: str, email: str, password: str) -> Optional[User]:
    """Create an ADMIN account at startup unless the username or email is already present."""
    username, email = username.strip(), email.strip()
    if crud_user.username_or_email_taken(db, username, email):
        return None
    if len(password) < MIN_PASSWORD_LEN:
        raise ValidationError("Password must be at least 8 characters.")
    user = crud_user.create_user(
        db,
        first_name=first_name,
        last_name=last_name,
        username=username,
        email=email,
        password_hash=hash_password(password),
        role=Role.ADMIN,
    )
    logger.info("[Auth] seeded admin id=%s username=%s", user.id, user.username)
    return user
