from __future__ import annotations

import math
import sys
from typing import Any, Dict, List, Optional, Tuple

from blog_platform.errors import EmptyComment, Forbidden, NotFound
from blog_platform.store.base import Store
from blog_platform.util.ids import is_valid_id

from .populate import populate_post, populate_posts


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


def _debug(msg: str) -> None:
    print(f"[posts] {msg}")


def _positive_int(raw: Any, default: int) -> int:
    try:
        n = int(str(raw).strip())
    except (TypeError, ValueError):
        return default
    return n if n >= 1 else default


def parse_page_args(page: Any = None, limit: Any = None) -> Tuple[int, int]:
    """Query-string pagination: junk or values below 1 fall back to the defaults."""
    p = _positive_int(page, DEFAULT_PAGE) if page is not None else DEFAULT_PAGE
    n = _positive_int(limit, DEFAULT_PAGE_SIZE) if limit is not None else DEFAULT_PAGE_SIZE
    return p, min(n, MAX_PAGE_SIZE)


def _require_post(store: Store, post_id: str):
    post = store.get_post(post_id) if is_valid_id(post_id) else None
    if post is None:
        raise NotFound.entity("Post")
    return post


def _require_category(store: Store, category_id: str) -> None:
    if not is_valid_id(category_id) or store.get_category(category_id) is None:
        raise NotFound.entity("Category")


def _require_user(store: Store, user_id: str) -> None:
    if store.get_user(user_id) is None:
        raise NotFound.entity("User")


def _clean_excerpt(excerpt: Optional[str]) -> Optional[str]:
    if excerpt is None:
        return None
    return excerpt.strip() or None


def list_posts(
    store: Store, *, page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_SIZE
) -> Tuple[List[Dict[str, Any]], Dict[str, int]]:
    # Keeps (page - 1) * limit inside a 64-bit OFFSET.
    page = min(max(1, page), sys.maxsize // max(1, limit))
    posts, total = store.list_posts(page=page, limit=limit)
    data = populate_posts(posts, users=store, content=store)
    pagination = {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }
    return data, pagination


def get_post(store: Store, post_id: str) -> Dict[str, Any]:
    """Fetch one post fully populated. Every successful read counts as a view."""
    if not is_valid_id(post_id) or not store.increment_view_count(post_id):
        raise NotFound.entity("Post")
    post = _require_post(store, post_id)
    return populate_post(post, users=store, content=store, detail=True)


def create_post(
    store: Store,
    *,
    author_id: str,
    title: str,
    content: str,
    category_id: str,
    excerpt: Optional[str] = None,
    tags: Optional[List[str]] = None,
    featured_image: Optional[str] = None,
) -> Dict[str, Any]:
    _require_user(store, author_id)
    _require_category(store, category_id)
    post = store.create_post(
        title=title,
        content=content,
        category_id=category_id,
        author_id=author_id,
        excerpt=_clean_excerpt(excerpt),
        tags=tags or [],
        featured_image=featured_image,
    )
    _debug(f"Created post id={post.id} author={author_id} category={category_id}")
    return populate_post(post, users=store, content=store)


def update_post(
    store: Store,
    post_id: str,
    *,
    user_id: str,
    title: str,
    content: str,
    category_id: str,
    excerpt: Optional[str] = None,
    tags: Optional[List[str]] = None,
    featured_image: Optional[str] = None,
) -> Dict[str, Any]:
    post = _require_post(store, post_id)
    if post.author_id != user_id:
        raise Forbidden("Not authorized to update this post")
    _require_category(store, category_id)

    updated = store.update_post(
        post_id,
        title=title,
        content=content,
        category_id=category_id,
        excerpt=_clean_excerpt(excerpt),
        tags=tags or [],
        featured_image=featured_image,
    )
    if updated is None:
        # Deleted between the ownership check and the write.
        raise NotFound.entity("Post")
    return populate_post(updated, users=store, content=store)


def delete_post(store: Store, post_id: str, *, user_id: str) -> None:
    post = _require_post(store, post_id)
    if post.author_id != user_id:
        raise Forbidden("Not authorized to delete this post")
    store.delete_post(post_id)
    _debug(f"Deleted post id={post_id}")


def add_comment(store: Store, post_id: str, *, user_id: str, content: Any) -> Dict[str, Any]:
    if not isinstance(content, str) or not content.strip():
        raise EmptyComment()
    _require_user(store, user_id)
    post = store.add_comment(post_id, user_id=user_id, content=content) if is_valid_id(post_id) else None
    if post is None:
        raise NotFound.entity("Post")
    return populate_post(post, users=store, content=store, detail=True)
