from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from blog_platform import validation
from blog_platform.auth import category_writer
from blog_platform.content import categories as category_ops
from blog_platform.store.base import Store

from .payloads import CategoryRequest
from .state import get_store


router = APIRouter(prefix="/categories", tags=["categories"])


def _category_fields(payload: CategoryRequest) -> Dict[str, Any]:
    data = payload.data()
    validation.ensure_valid(data, validation.CATEGORY)
    return {
        "name": data["name"],
        "description": data["description"],
        "color": data["color"].strip() if data["color"] else None,
    }


@router.get("")
def list_categories(store: Store = Depends(get_store)) -> Dict[str, Any]:
    return {"success": True, "data": category_ops.list_categories(store)}


@router.get("/{category_id}")
def get_category(category_id: str, store: Store = Depends(get_store)) -> Dict[str, Any]:
    return {"success": True, "data": category_ops.get_category(store, category_id)}


# Category writes need a logged-in user; admin only with CATEGORY_ADMIN_ONLY=1.
@router.post("", status_code=201)
def create_category(
    payload: CategoryRequest,
    _user_id: str = Depends(category_writer),
    store: Store = Depends(get_store),
) -> JSONResponse:
    category = category_ops.create_category(store, **_category_fields(payload))
    return JSONResponse(status_code=201, content={"success": True, "data": category})


@router.put("/{category_id}")
def update_category(
    category_id: str,
    payload: CategoryRequest,
    _user_id: str = Depends(category_writer),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    category = category_ops.update_category(store, category_id, **_category_fields(payload))
    return {"success": True, "data": category}


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    _user_id: str = Depends(category_writer),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    category_ops.delete_category(store, category_id)
    return {"success": True, "message": "Category deleted successfully"}
