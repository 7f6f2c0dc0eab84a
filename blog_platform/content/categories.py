from __future__ import annotations

from typing import Any, Dict, List, Optional

from blog_platform.errors import NotFound
from blog_platform.models import Category
from blog_platform.store.base import ContentStore
from blog_platform.util.ids import is_valid_id


def list_categories(store: ContentStore) -> List[Dict[str, Any]]:
    return [c.to_dict() for c in store.list_categories()]


def get_category(store: ContentStore, category_id: str) -> Dict[str, Any]:
    c = store.get_category(category_id) if is_valid_id(category_id) else None
    if c is None:
        raise NotFound.entity("Category")
    return c.to_dict()


def create_category(
    store: ContentStore,
    *,
    name: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Dict[str, Any]:
    return store.create_category(name=name, description=description, color=color).to_dict()


def update_category(
    store: ContentStore,
    category_id: str,
    *,
    name: str,
    description: Optional[str] = None,
    color: Optional[str] = None,
) -> Dict[str, Any]:
    # A missing description clears it; a missing color keeps the current one.
    c = None
    if is_valid_id(category_id):
        c = store.update_category(category_id, name=name, description=description, color=color)
    if c is None:
        raise NotFound.entity("Category")
    return c.to_dict()


def delete_category(store: ContentStore, category_id: str) -> None:
    """Posts in the category are left alone and will populate it as null."""
    if not is_valid_id(category_id) or not store.delete_category(category_id):
        raise NotFound.entity("Category")


DEFAULT_CATEGORIES = ["Technology", "Lifestyle", "Business", "Travel", "Food", "Health"]


def seed_default_categories(store: ContentStore, *, reset: bool = False) -> List[Category]:
    """Create whichever default categories are missing; `reset` deletes all categories first."""
    if reset:
        for c in store.list_categories():
            store.delete_category(c.id)

    existing = {c.name for c in store.list_categories()}
    return [
        store.create_category(name=name, description=None, color=None)
        for name in DEFAULT_CATEGORIES
        if name not in existing
    ]
