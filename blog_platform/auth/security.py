from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt
from passlib.context import CryptContext

from blog_platform.errors import InvalidToken


_pwd = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_JWT_ALG = "HS256"

# 7 days
DEFAULT_TOKEN_EXPIRE_MINUTES = 7 * 24 * 60


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("password_blank")
    return _pwd.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return _pwd.verify(password, password_hash)
    except Exception:
        return False


def issue_token(
    *,
    secret: str,
    user_id: str,
    expires_minutes: int = DEFAULT_TOKEN_EXPIRE_MINUTES,
    now: datetime | None = None,
) -> str:
    """Sign a session token for `user_id` that expires `expires_minutes` after `now`."""
    if not secret:
        raise ValueError("jwt_secret_blank")

    now = now or datetime.now(timezone.utc)
    exp = now + timedelta(minutes=max(1, int(expires_minutes)))

    payload: Dict[str, Any] = {
        "sub": str(user_id),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    if not token:
        raise ValueError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(token, secret, algorithms=[_JWT_ALG], options={"require": ["exp", "sub"]})


def verify_token(*, token: str, secret: str) -> str:
    """Return the user id a token was issued for, or raise InvalidToken."""
    try:
        payload = decode_access_token(token=token, secret=secret)
    except (jwt.InvalidTokenError, ValueError):
        raise InvalidToken()

    sub = payload.get("sub")
    if not sub or not isinstance(sub, str):
        raise InvalidToken()
    return sub
