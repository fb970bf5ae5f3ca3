import logging
from typing import Optional, Tuple

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..config.settings import get_settings
from ..exceptions import AuthError, ConflictError, StoreError, ValidationError
from ..models.db import crud
from ..models.db import user as user_model
from ..security import create_access_token, decode_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)


class AuthService:
    """Registers users, checks credentials and resolves bearer tokens to users."""

    def __init__(self, db: Session):
        self.db = db

    def _issue_token(self, user) -> str:
        return create_access_token(data={"sub": str(user.id)})

    def register(self, name: Optional[str], email: Optional[str], password: Optional[str]) -> Tuple[user_model.User, str]:
        if not name or not name.strip():
            raise ValidationError("Name is required")
        if not email or "@" not in email:
            raise ValidationError("A valid email is required")
        min_length = get_settings().password_min_length
        if not password or len(password) < min_length:
            raise ValidationError(f"Password must be at least {min_length} characters")

        email = email.strip().lower()
        if crud.get_user_by_email(self.db, email=email):
            raise ConflictError("Email already registered")

        try:
            user = crud.create_user(
                self.db, name=name.strip(), email=email, hashed_password=get_password_hash(password)
            )
        except IntegrityError as e:
            self.db.rollback()
            raise ConflictError("Email already registered") from e
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to register %s: %s", email, e)
            raise StoreError("Failed to register user") from e

        logger.info("Registered user %s", user.id)
        return user, self._issue_token(user)

    def login(self, email: Optional[str], password: Optional[str]) -> Tuple[user_model.User, str]:
        user = crud.get_user_by_email(self.db, email=(email or "").strip().lower())
        if not user or not verify_password(password or "", user.hashed_password):
            raise AuthError("Incorrect email or password")
        if not user.is_active:
            raise AuthError("Inactive user")
        return user, self._issue_token(user)

    def resolve_token(self, token: Optional[str]) -> user_model.User:
        if not token:
            raise AuthError("Authorization token missing")
        payload = decode_access_token(token)
        if payload is None:
            raise AuthError("Invalid or expired token")
        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise AuthError("Invalid or expired token")
        user = crud.get_user(self.db, user_id)
        if user is None or not user.is_active:
            raise AuthError("Invalid or expired token")
        return user
