from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from blog_platform import validation
from blog_platform.auth import get_current_user_id
from blog_platform.content import posts as post_ops
from blog_platform.store.base import Store

from .payloads import CommentRequest, PostRequest
from .state import get_store


router = APIRouter(prefix="/posts", tags=["posts"])


def _post_fields(payload: PostRequest) -> Dict[str, Any]:
    data = payload.data()
    validation.ensure_valid(data, validation.POST)
    return {
        "title": data["title"],
        "content": data["content"],
        "category_id": data["categoryId"].strip(),
        "excerpt": data["excerpt"],
        "tags": data["tags"],
        "featured_image": data["featuredImage"],
    }


@router.get("")
def list_posts(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    p, n = post_ops.parse_page_args(page, limit)
    data, pagination = post_ops.list_posts(store, page=p, limit=n)
    return {"success": True, "data": data, "pagination": pagination}


@router.get("/{post_id}")
def get_post(post_id: str, store: Store = Depends(get_store)) -> Dict[str, Any]:
    return {"success": True, "data": post_ops.get_post(store, post_id)}


@router.post("", status_code=201)
def create_post(
    payload: PostRequest,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
) -> JSONResponse:
    post = post_ops.create_post(store, author_id=user_id, **_post_fields(payload))
    return JSONResponse(status_code=201, content={"success": True, "data": post})


@router.put("/{post_id}")
def update_post(
    post_id: str,
    payload: PostRequest,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    post = post_ops.update_post(store, post_id, user_id=user_id, **_post_fields(payload))
    return {"success": True, "data": post}


@router.delete("/{post_id}")
def delete_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
) -> Dict[str, Any]:
    post_ops.delete_post(store, post_id, user_id=user_id)
    return {"success": True, "message": "Post deleted successfully"}


@router.post("/{post_id}/comments", status_code=201)
def add_comment(
    post_id: str,
    payload: CommentRequest,
    user_id: str = Depends(get_current_user_id),
    store: Store = Depends(get_store),
) -> JSONResponse:
    post = post_ops.add_comment(store, post_id, user_id=user_id, content=payload.content)
    return JSONResponse(status_code=201, content={"success": True, "data": post})
