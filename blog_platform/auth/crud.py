from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

from blog_platform.config import Config
from blog_platform.errors import InvalidCredentials, NotFound
from blog_platform.models import User
from blog_platform.store.base import CredentialStore
from blog_platform.util.text import normalize_email

from .security import issue_token


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def _token_for(cfg: Config, user: User) -> str:
    return issue_token(
        secret=cfg.jwt_secret,
        user_id=user.id,
        expires_minutes=int(cfg.AUTH_TOKEN_EXPIRE_MINUTES),
    )


def register_user(
    users: CredentialStore,
    cfg: Config,
    *,
    name: str,
    email: str,
    password: str,
) -> Tuple[str, User]:
    """Create a `user`-role account and sign a token for it. Raises DuplicateEmail."""
    user = users.create_user(name=name, email=email, password=password, role="user")
    _debug(f"Registered user id={user.id}")
    return _token_for(cfg, user), user


def login_user(
    users: CredentialStore, cfg: Config, *, email: str, password: str
) -> Tuple[str, User]:
    user = users.find_by_email(email)
    # One error for both cases so callers can't probe which emails exist.
    if user is None or not user.compare_password(password):
        _debug("Login rejected")
        raise InvalidCredentials()
    return _token_for(cfg, user), user


def get_profile(users: CredentialStore, user_id: str) -> User:
    user = users.get_user(user_id)
    if user is None:
        raise NotFound.entity("User")
    return user


def update_profile(
    users: CredentialStore,
    user_id: str,
    *,
    name: Optional[str] = None,
    bio: Optional[str] = None,
    avatar: Optional[str] = None,
) -> User:
    """Apply the non-empty fields among name, bio and avatar. Email and role never change here."""
    user = get_profile(users, user_id)
    if name and name.strip():
        user.name = name.strip()
    if bio:
        user.bio = bio
    if avatar:
        user.avatar = avatar
    return users.save_user(user)


def bootstrap_admin_if_needed(users: CredentialStore, cfg: Config) -> Optional[Dict[str, Any]]:
    """Create the first admin user when no users exist yet.

    - AUTH_BOOTSTRAP_ADMIN_EMAIL
    - AUTH_BOOTSTRAP_ADMIN_PASSWORD
    - AUTH_BOOTSTRAP_ADMIN_NAME (default: Admin)

    Unlike a hardcoded admin/admin default, nothing is created unless both
    email and password are configured.
    """
    email = normalize_email(cfg.AUTH_BOOTSTRAP_ADMIN_EMAIL)
    password = cfg.AUTH_BOOTSTRAP_ADMIN_PASSWORD or ""
    if not email or not password:
        return None
    if users.count_users() > 0:
        return None

    u = users.create_user(
        name=cfg.AUTH_BOOTSTRAP_ADMIN_NAME or "Admin",
        email=email,
        password=password,
        role="admin",
    )
    return u.public()
