"""Store interfaces.

The API and domain code only talk to these two interfaces. Which
implementation backs them (in-memory or SQL) is chosen once at startup by
`open_store()`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional, Tuple

from blog_platform.models import Category, Post, User


class CredentialStore(ABC):
    @abstractmethod
    def find_by_email(self, email: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        ...

    @abstractmethod
    def create_user(self, *, name: str, email: str, password: str, role: str = "user") -> User:
        """Hash `password` and insert. Raises DuplicateEmail."""

    @abstractmethod
    def save_user(self, user: User) -> User:
        """Persist name, bio, avatar and password_hash of an existing user."""

    @abstractmethod
    def count_users(self) -> int:
        ...


class ContentStore(ABC):
    # Categories

    @abstractmethod
    def list_categories(self) -> List[Category]:
        """All categories, newest first."""

    @abstractmethod
    def get_category(self, category_id: str) -> Optional[Category]:
        ...

    @abstractmethod
    def get_categories(self, category_ids: Iterable[str]) -> Dict[str, Category]:
        ...

    @abstractmethod
    def create_category(
        self, *, name: str, description: Optional[str], color: Optional[str]
    ) -> Category:
        """Raises DuplicateCategoryName."""

    @abstractmethod
    def update_category(
        self,
        category_id: str,
        *,
        name: str,
        description: Optional[str],
        color: Optional[str],
    ) -> Optional[Category]:
        """Set name and description; color only when given. None when missing."""

    @abstractmethod
    def delete_category(self, category_id: str) -> bool:
        """Posts keep their (now dangling) category reference."""

    # Posts

    @abstractmethod
    def list_posts(self, *, page: int, limit: int) -> Tuple[List[Post], int]:
        """Published posts newest first, 1-based page, plus the published total."""

    @abstractmethod
    def get_post(self, post_id: str) -> Optional[Post]:
        ...

    @abstractmethod
    def increment_view_count(self, post_id: str) -> bool:
        """Atomically add 1 to view_count. False when the post is missing."""

    @abstractmethod
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
        ...

    @abstractmethod
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
        """Replace editable fields; featured_image only when given."""

    @abstractmethod
    def delete_post(self, post_id: str) -> bool:
        ...

    @abstractmethod
    def add_comment(self, post_id: str, *, user_id: str, content: str) -> Optional[Post]:
        """Append a comment. Raises EmptyComment; None when the post is missing."""


class Store(CredentialStore, ContentStore):
    name = "base"

    def close(self) -> None:
        pass
