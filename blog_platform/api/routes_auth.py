from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from blog_platform import validation
from blog_platform.auth import get_current_user_id
from blog_platform.auth.crud import get_profile, login_user, register_user, update_profile
from blog_platform.config import Config
from blog_platform.store.base import Store

from .payloads import LoginRequest, ProfileRequest, RegisterRequest
from .state import get_cfg, get_store


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
def auth_register(
    payload: RegisterRequest,
    store: Store = Depends(get_store),
    cfg: Config = Depends(get_cfg),
) -> JSONResponse:
    data = payload.data()
    validation.ensure_valid(data, validation.REGISTER)

    token, user = register_user(
        store, cfg, name=data["name"], email=data["email"], password=data["password"]
    )
    return JSONResponse(
        status_code=201,
        content={"success": True, "token": token, "user": user.public()},
    )


@router.post("/login")
def auth_login(
    payload: LoginRequest,
    store: Store = Depends(get_store),
    cfg: Config = Depends(get_cfg),
) -> Dict[str, Any]:
    data = payload.data()
    validation.ensure_valid(data, validation.LOGIN)

    token, user = login_user(store, cfg, email=data["email"], password=data["password"])
    return {"success": True, "token": token, "user": user.public()}


@router.get("/me")
def auth_me(
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    user = get_profile(store, user_id)
    return {"success": True, "user": user.public(profile=True)}


@router.put("/profile")
def auth_update_profile(
    payload: ProfileRequest,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    data = payload.data()
    validation.ensure_valid(data, validation.PROFILE)

    user = update_profile(store, user_id, name=data["name"], bio=data["bio"], avatar=data["avatar"])
    return {"success": True, "user": user.public(profile=True)}
