from __future__ import annotations

from typing import Any, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blog_platform.errors import Forbidden, InvalidToken, NotFound, Unauthenticated

from .security import verify_token


_bearer = HTTPBearer(auto_error=False)


def _debug(msg: str) -> None:
    print(f"[auth] {msg}")


def get_current_user_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
) -> str:
    """Authenticate a request from `Authorization: Bearer <jwt>`.

    Only verifies the token; role and ownership checks belong to the handlers.
    """

    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    cfg = request.app.state.cfg
    try:
        return verify_token(token=credentials.credentials, secret=cfg.jwt_secret)
    except InvalidToken as e:
        _debug(f"Token rejected: {e.message}")
        raise


def require_admin(request: Request, user_id: str = Depends(get_current_user_id)) -> str:
    store: Any = request.app.state.store
    user = store.get_user(user_id)
    if user is None:
        raise NotFound.entity("User")
    if user.role != "admin":
        raise Forbidden("Admin access required")
    return user_id


def category_writer(request: Request, user_id: str = Depends(get_current_user_id)) -> str:
    """Auth for category mutations.

    Authentication alone is enough unless CATEGORY_ADMIN_ONLY is set, in
    which case the caller must also be an admin.
    """
    if request.app.state.cfg.CATEGORY_ADMIN_ONLY:
        return require_admin(request, user_id)
    return user_id
