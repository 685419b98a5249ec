import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from docshare.auth import jwt_handler
from docshare.core.exceptions import NotFound, Unauthenticated, ValidationError
from docshare.models.user import User

logger = logging.getLogger(__name__)

INVALID_LOGIN_MESSAGE = "Email or password is incorrect."


def serialize_user(user: User) -> dict:
    return {
        "id": user.id,
        "email": user.email,
        "full_name": user.full_name,
        "role": user.role,
    }


class CredentialStore:
    """Registers users, checks passwords and issues access tokens.

    Passwords are stored and compared exactly as submitted.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email.strip().lower()).first()

    def get_user(self, user_id: int) -> dict:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found.")
        payload = serialize_user(user)
        payload["created_at"] = user.created_at
        return payload

    def issue_token(self, user: User) -> str:
        return jwt_handler.create_access_token(user.id, user.email, user.role)

    def register(self, email: str, password: str, full_name: str, role: str) -> dict:
        email = email.strip().lower()
        if self.get_user_by_email(email) is not None:
            raise ValidationError("Email already registered.")

        user = User(email=email, password=password, full_name=full_name, role=role)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ValidationError("Email already registered.") from exc
        self.db.refresh(user)
        logger.info("Registered %s user id=%s", user.role, user.id)
        return {"user": serialize_user(user), "token": self.issue_token(user)}

    def authenticate(self, email: str, password: str) -> dict:
        user = self.get_user_by_email(email)
        if user is None or password != user.password:
            raise Unauthenticated(INVALID_LOGIN_MESSAGE)
        return {"user": serialize_user(user), "token": self.issue_token(user)}
