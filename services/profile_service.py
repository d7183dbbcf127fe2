import logging

from sqlalchemy.orm import Session

from core.errors import AuthError, ConflictError, ValidationError
from core.security import hash_password, is_encodable, verify_password
from crud import user as crud_user
from models import User
from services import auth_service

logger = logging.getLogger(__name__)


def get_profile(db: Session, token: str) -> User:
    return auth_service.current_user(db, token)


def update_profile(db: Session, token: str, first_name: str, last_name: str, username: str, email: str) -> User:
    user = auth_service.current_user(db, token)
    auth_service.validate_identity_fields(first_name, last_name, username, email)

    username, email = username.strip(), email.strip()
    if crud_user.username_or_email_taken(db, username, email, exclude_user_id=user.id):
        raise ConflictError("Username or email already exists.")

    user = crud_user.update_user_profile(
        db,
        user,
        first_name=first_name.strip(),
        last_name=last_name.strip(),
        username=username,
        email=email,
    )
    logger.info("[Profile] user id=%s updated profile", user.id)
    return user


def change_password(db: Session, token: str, old_password: str, new_password: str) -> None:
    user = auth_service.current_user(db, token)

    if not old_password:
        raise ValidationError("Enter old password.")
    if len(new_password or "") < auth_service.MIN_PASSWORD_LEN:
        raise ValidationError("New password must be at least 8 characters.")
    if not is_encodable(new_password):
        raise ValidationError("New password must be valid text.")

    if not verify_password(old_password, user.password_hash):
        raise AuthError("Old password is not correct.")

    crud_user.set_password_hash(db, user, hash_password(new_password))
    logger.info("[Profile] user id=%s changed password", user.id)
