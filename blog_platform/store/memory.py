from __future__ import annotations

import copy
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from blog_platform.errors import DuplicateCategoryName, DuplicateEmail, EmptyComment
from blog_platform.models import (
    DEFAULT_AVATAR,
    DEFAULT_CATEGORY_COLOR,
    DEFAULT_FEATURED_IMAGE,
    Category,
    Comment,
    Post,
    User,
)
from blog_platform.auth.security import hash_password
from blog_platform.util.ids import new_id
from blog_platform.util.text import clean_tags, normalize_email, slugify
from blog_platform.util.time import utcnow_iso

from .base import Store


class MemoryStore(Store):
    """Process-local store for development and tests. Nothing survives a restart.

    Every public method holds one lock for its whole read/modify/write and
    hands out copies, so callers can never mutate stored records in place.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._users: Dict[str, User] = {}
        self._categories: Dict[str, Category] = {}
        # dicts keep insertion order, which doubles as creation order
        self._posts: Dict[str, Post] = {}

    # -----------------------------
    # Users
    # -----------------------------

    def find_by_email(self, email: str) -> Optional[User]:
        e = normalize_email(email)
        with self._lock:
            for u in self._users.values():
                if u.email == e:
                    return copy.deepcopy(u)
        return None

    def get_user(self, user_id: str) -> Optional[User]:
        with self._lock:
            u = self._users.get(user_id)
            return copy.deepcopy(u) if u is not None else None

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        with self._lock:
            return {
                uid: copy.deepcopy(self._users[uid]) for uid in set(user_ids) if uid in self._users
            }

    def create_user(self, *, name: str, email: str, password: str, role: str = "user") -> User:
        e = normalize_email(email)
        pw_hash = hash_password(password)
        now = utcnow_iso()
        with self._lock:
            if any(u.email == e for u in self._users.values()):
                raise DuplicateEmail()
            u = User(
                id=new_id(),
                name=name.strip(),
                email=e,
                password_hash=pw_hash,
                role=role,
                avatar=DEFAULT_AVATAR,
                created_at=now,
                updated_at=now,
            )
            self._users[u.id] = u
            return copy.deepcopy(u)

    def save_user(self, user: User) -> User:
        with self._lock:
            stored = self._users.get(user.id)
            if stored is None:
                raise KeyError(user.id)
            stored.name = user.name
            stored.bio = user.bio
            stored.avatar = user.avatar
            stored.password_hash = user.password_hash
            stored.updated_at = utcnow_iso()
            return copy.deepcopy(stored)

    def count_users(self) -> int:
        with self._lock:
            return len(self._users)

    # -----------------------------
    # Categories
    # -----------------------------

    def list_categories(self) -> List[Category]:
        with self._lock:
            return [copy.deepcopy(c) for c in reversed(list(self._categories.values()))]

    def get_category(self, category_id: str) -> Optional[Category]:
        with self._lock:
            c = self._categories.get(category_id)
            return copy.deepcopy(c) if c is not None else None

    def get_categories(self, category_ids: Iterable[str]) -> Dict[str, Category]:
        with self._lock:
            return {
                cid: copy.deepcopy(self._categories[cid])
                for cid in set(category_ids)
                if cid in self._categories
            }

    def create_category(
        self, *, name: str, description: Optional[str], color: Optional[str]
    ) -> Category:
        n = name.strip()
        now = utcnow_iso()
        with self._lock:
            if any(c.name == n for c in self._categories.values()):
                raise DuplicateCategoryName()
            c = Category(
                id=new_id(),
                name=n,
                slug=slugify(n),
                description=description,
                color=color or DEFAULT_CATEGORY_COLOR,
                created_at=now,
                updated_at=now,
            )
            self._categories[c.id] = c
            return copy.deepcopy(c)

    def update_category(
        self,
        category_id: str,
        *,
        name: str,
        description: Optional[str],
        color: Optional[str],
    ) -> Optional[Category]:
        n = name.strip()
        with self._lock:
            c = self._categories.get(category_id)
            if c is None:
                return None
            if any(o.name == n and o.id != category_id for o in self._categories.values()):
                raise DuplicateCategoryName()
            c.name = n
            c.slug = slugify(n)
            c.description = description
            if color:
                c.color = color
            c.updated_at = utcnow_iso()
            return copy.deepcopy(c)

    def delete_category(self, category_id: str) -> bool:
        with self._lock:
            return self._categories.pop(category_id, None) is not None

    # -----------------------------
    # Posts
    # -----------------------------

    def list_posts(self, *, page: int, limit: int) -> Tuple[List[Post], int]:
        skip = (max(1, page) - 1) * limit
        with self._lock:
            published = [p for p in reversed(list(self._posts.values())) if p.is_published]
            return [copy.deepcopy(p) for p in published[skip : skip + limit]], len(published)

    def get_post(self, post_id: str) -> Optional[Post]:
        with self._lock:
            p = self._posts.get(post_id)
            return copy.deepcopy(p) if p is not None else None

    def increment_view_count(self, post_id: str) -> bool:
        with self._lock:
            p = self._posts.get(post_id)
            if p is None:
                return False
            p.view_count += 1
            return True

    def create_post(
        self,
        *,
        title: str,
        content: str,
        category_id: str,
        author_id: str,
        excerpt: Optional[str] = None,
        tags: Optional[List[str]] = None,
        featured_image: Optional[str] = None,
    ) -> Post:
        now = utcnow_iso()
        p = Post(
            id=new_id(),
            title=title.strip(),
            content=content,
            category_id=category_id,
            author_id=author_id,
            excerpt=excerpt,
            tags=clean_tags(tags),
            featured_image=featured_image or DEFAULT_FEATURED_IMAGE,
            view_count=0,
            is_published=True,
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            self._posts[p.id] = p
            return copy.deepcopy(p)

    def update_post(
        self,
        post_id: str,
        *,
        title: str,
        content: str,
        category_id: str,
        excerpt: Optional[str],
        tags: List[str],
        featured_image: Optional[str],
    ) -> Optional[Post]:
        with self._lock:
            p = self._posts.get(post_id)
            if p is None:
                return None
            p.title = title.strip()
            p.content = content
            p.category_id = category_id
            p.excerpt = excerpt
            p.tags = clean_tags(tags)
            if featured_image:
                p.featured_image = featured_image
            p.updated_at = utcnow_iso()
            return copy.deepcopy(p)

    def delete_post(self, post_id: str) -> bool:
        with self._lock:
            return self._posts.pop(post_id, None) is not None

    def add_comment(self, post_id: str, *, user_id: str, content: str) -> Optional[Post]:
        text = (content or "").strip()
        if not text:
            raise EmptyComment()
        with self._lock:
            p = self._posts.get(post_id)
            if p is None:
                return None
            p.comments.append(
                Comment(id=new_id(), user_id=user_id, content=text, created_at=utcnow_iso())
            )
            return copy.deepcopy(p)
