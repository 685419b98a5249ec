import re
from datetime import datetime, timedelta, timezone

import jwt

from docshare.core import config

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_expires_in(value: str) -> timedelta:
    """Turn a duration such as ``7d``, ``12h``, ``30m`` or ``3600`` into a timedelta."""
    match = _DURATION_PATTERN.match(value or "")
    if match is None:
        raise ValueError(f"Unsupported token lifetime: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


def create_access_token(user_id: int, email: str, role: str, expires_in: str | None = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + parse_expires_in(expires_in or config.JWT_EXPIRES_IN)
    payload = {"userId": user_id, "email": email, "role": role, "exp": expire, "iat": now}
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    return jwt.decode(
        token,
        config.JWT_SECRET_KEY,
        algorithms=[config.JWT_ALGORITHM],
        options={"require": ["exp", "userId", "email", "role"]},
    )
