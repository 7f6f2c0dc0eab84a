from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from blog_platform.auth.security import hash_password, verify_password


DEFAULT_AVATAR = "default-avatar.jpg"
DEFAULT_FEATURED_IMAGE = "default-post.jpg"
DEFAULT_CATEGORY_COLOR = "#007bff"
EXCERPT_FALLBACK_CHARS = 200

ROLES = ("user", "admin")


@dataclass
class User:
    id: str
    name: str
    email: str
    password_hash: str
    role: str = "user"
    bio: Optional[str] = None
    avatar: str = DEFAULT_AVATAR
    created_at: str = ""
    updated_at: str = ""

    def set_password(self, raw: str) -> None:
        self.password_hash = hash_password(raw)

    def compare_password(self, raw: str) -> bool:
        return verify_password(raw, self.password_hash)

    def public(self, *, profile: bool = False) -> Dict[str, Any]:
        """Serialized user. The password hash is never included."""
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }
        if profile:
            d["bio"] = self.bio
            d["avatar"] = self.avatar
        return d


@dataclass
class Category:
    id: str
    name: str
    slug: str
    description: Optional[str] = None
    color: str = DEFAULT_CATEGORY_COLOR
    created_at: str = ""
    updated_at: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "color": self.color,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }


@dataclass
class Comment:
    id: str
    user_id: str
    content: str
    created_at: str


@dataclass
class Post:
    id: str
    title: str
    content: str
    category_id: str
    author_id: str
    excerpt: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    featured_image: str = DEFAULT_FEATURED_IMAGE
    view_count: int = 0
    is_published: bool = True
    comments: List[Comment] = field(default_factory=list)
    created_at: str = ""
    updated_at: str = ""

    @property
    def display_excerpt(self) -> str:
        if self.excerpt:
            return self.excerpt
        return self.content[:EXCERPT_FALLBACK_CHARS]
