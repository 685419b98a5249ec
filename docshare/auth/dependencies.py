from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import APIKeyHeader

from docshare.auth import jwt_handler
from docshare.core.exceptions import InvalidCredential, Unauthenticated
from docshare.models.user import ROLES

# The scheme word is not checked; "Token abc" carries the credential "abc".
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The verified requester, taken from the token claims."""

    id: int
    email: str
    role: str


def extract_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    parts = authorization.split(" ")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


def resolve_identity(token: str) -> Identity:
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise InvalidCredential() from exc

    user_id = payload.get("userId")
    role = payload.get("role")
    if not isinstance(user_id, int) or isinstance(user_id, bool) or role not in ROLES:
        raise InvalidCredential()
    return Identity(id=user_id, email=str(payload.get("email")), role=role)


def get_current_identity(
    authorization: str | None = Depends(authorization_header),
) -> Identity:
    token = extract_token(authorization)
    if token is None:
        raise Unauthenticated()
    return resolve_identity(token)


def get_optional_identity(
    authorization: str | None = Depends(authorization_header),
) -> Identity | None:
    token = extract_token(authorization)
    if token is None:
        return None
    try:
        return resolve_identity(token)
    except InvalidCredential:
        return None
