from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from blog_platform.auth.security import hash_password
from blog_platform.db import connect, detect_dialect, init_db
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
from blog_platform.util.ids import new_id
from blog_platform.util.text import clean_tags, normalize_email, slugify
from blog_platform.util.time import utcnow_iso

from .base import Store


def _placeholders(n: int) -> str:
    return ",".join("?" for _ in range(n))


def _user(row: Any) -> User:
    return User(
        id=str(row["id"]),
        name=str(row["name"]),
        email=str(row["email"]),
        password_hash=str(row["password_hash"]),
        role=str(row["role"]),
        bio=row["bio"],
        avatar=str(row["avatar"] or DEFAULT_AVATAR),
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]),
    )


def _category(row: Any) -> Category:
    return Category(
        id=str(row["id"]),
        name=str(row["name"]),
        slug=str(row["slug"]),
        description=row["description"],
        color=str(row["color"] or DEFAULT_CATEGORY_COLOR),
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]),
    )


def _post(row: Any, comments: List[Comment]) -> Post:
    return Post(
        id=str(row["id"]),
        title=str(row["title"]),
        content=str(row["content"]),
        excerpt=row["excerpt"],
        category_id=str(row["category_id"]),
        author_id=str(row["author_id"]),
        tags=list(json.loads(row["tags_json"] or "[]")),
        featured_image=str(row["featured_image"] or DEFAULT_FEATURED_IMAGE),
        view_count=int(row["view_count"] or 0),
        is_published=int(row["is_published"] or 0) == 1,
        comments=comments,
        created_at=str(row["created_at"]),
        updated_at=str(row["updated_at"]),
    )


class SQLStore(Store):
    """SQLite/Postgres store. Every method runs in its own short transaction."""

    name = "sql"

    def __init__(self, dsn: str, *, create_schema: bool = True) -> None:
        self.dsn = dsn
        self.dialect = detect_dialect(dsn)
        if create_schema:
            init_db(dsn)

    # -----------------------------
    # Users
    # -----------------------------

    def find_by_email(self, email: str) -> Optional[User]:
        e = normalize_email(email)
        if not e:
            return None
        with connect(self.dsn) as conn:
            row = conn.execute("SELECT * FROM users WHERE email=?", (e,)).fetchone()
        return _user(row) if row is not None else None

    def get_user(self, user_id: str) -> Optional[User]:
        with connect(self.dsn) as conn:
            row = conn.execute("SELECT * FROM users WHERE id=?", (str(user_id),)).fetchone()
        return _user(row) if row is not None else None

    def get_users(self, user_ids: Iterable[str]) -> Dict[str, User]:
        ids = sorted(set(user_ids))
        if not ids:
            return {}
        with connect(self.dsn) as conn:
            rows = conn.execute(
                f"SELECT * FROM users WHERE id IN ({_placeholders(len(ids))})", ids
            ).fetchall()
        return {str(r["id"]): _user(r) for r in rows}

    def create_user(self, *, name: str, email: str, password: str, role: str = "user") -> User:
        e = normalize_email(email)
        now = utcnow_iso()
        with connect(self.dsn) as conn:
            # ON CONFLICT keeps the duplicate check atomic on both engines.
            inserted = conn.execute(
                """
                INSERT INTO users (id, name, email, password_hash, role, bio, avatar, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, NULL, ?, ?, ?)
                ON CONFLICT(email) DO NOTHING
                RETURNING id
                """,
                (new_id(), name.strip(), e, hash_password(password), role, DEFAULT_AVATAR, now, now),
            ).fetchone()
            if inserted is None:
                raise DuplicateEmail()
            row = conn.execute("SELECT * FROM users WHERE id=?", (inserted["id"],)).fetchone()
        return _user(row)

    def save_user(self, user: User) -> User:
        now = utcnow_iso()
        with connect(self.dsn) as conn:
            cur = conn.execute(
                "UPDATE users SET name=?, bio=?, avatar=?, password_hash=?, updated_at=? WHERE id=?",
                (user.name, user.bio, user.avatar, user.password_hash, now, user.id),
            )
            if cur.rowcount == 0:
                raise KeyError(user.id)
            row = conn.execute("SELECT * FROM users WHERE id=?", (user.id,)).fetchone()
        return _user(row)

    def count_users(self) -> int:
        with connect(self.dsn) as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM users").fetchone()
        return int(row["n"])

    # -----------------------------
    # Categories
    # -----------------------------

    def list_categories(self) -> List[Category]:
        with connect(self.dsn) as conn:
            rows = conn.execute("SELECT * FROM categories ORDER BY seq DESC").fetchall()
        return [_category(r) for r in rows]

    def get_category(self, category_id: str) -> Optional[Category]:
        with connect(self.dsn) as conn:
            row = conn.execute(
                "SELECT * FROM categories WHERE id=?", (str(category_id),)
            ).fetchone()
        return _category(row) if row is not None else None

    def get_categories(self, category_ids: Iterable[str]) -> Dict[str, Category]:
        ids = sorted(set(category_ids))
        if not ids:
            return {}
        with connect(self.dsn) as conn:
            rows = conn.execute(
                f"SELECT * FROM categories WHERE id IN ({_placeholders(len(ids))})", ids
            ).fetchall()
        return {str(r["id"]): _category(r) for r in rows}

    def create_category(
        self, *, name: str, description: Optional[str], color: Optional[str]
    ) -> Category:
        n = name.strip()
        now = utcnow_iso()
        with connect(self.dsn) as conn:
            inserted = conn.execute(
                """
                INSERT INTO categories (id, name, slug, description, color, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(name) DO NOTHING
                RETURNING id
                """,
                (new_id(), n, slugify(n), description, color or DEFAULT_CATEGORY_COLOR, now, now),
            ).fetchone()
            if inserted is None:
                raise DuplicateCategoryName()
            row = conn.execute("SELECT * FROM categories WHERE id=?", (inserted["id"],)).fetchone()
        return _category(row)

    def update_category(
        self,
        category_id: str,
        *,
        name: str,
        description: Optional[str],
        color: Optional[str],
    ) -> Optional[Category]:
        n = name.strip()
        with connect(self.dsn) as conn:
            row = conn.execute("SELECT * FROM categories WHERE id=?", (category_id,)).fetchone()
            if row is None:
                return None
            clash = conn.execute(
                "SELECT 1 FROM categories WHERE name=? AND id<>?", (n, category_id)
            ).fetchone()
            if clash is not None:
                raise DuplicateCategoryName()
            conn.execute(
                """
                UPDATE categories
                SET name=?, slug=?, description=?, color=?, updated_at=?
                WHERE id=?
                """,
                (n, slugify(n), description, color or row["color"], utcnow_iso(), category_id),
            )
            row = conn.execute("SELECT * FROM categories WHERE id=?", (category_id,)).fetchone()
        return _category(row)

    def delete_category(self, category_id: str) -> bool:
        with connect(self.dsn) as conn:
            cur = conn.execute("DELETE FROM categories WHERE id=?", (category_id,))
            return cur.rowcount > 0

    # -----------------------------
    # Posts
    # -----------------------------

    def _comments_for(self, conn: Any, post_ids: Sequence[str]) -> Dict[str, List[Comment]]:
        out: Dict[str, List[Comment]] = {pid: [] for pid in post_ids}
        if not post_ids:
            return out
        rows = conn.execute(
            f"""
            SELECT id, post_id, user_id, content, created_at
            FROM post_comments
            WHERE post_id IN ({_placeholders(len(post_ids))})
            ORDER BY seq ASC
            """,
            list(post_ids),
        ).fetchall()
        for r in rows:
            out[str(r["post_id"])].append(
                Comment(
                    id=str(r["id"]),
                    user_id=str(r["user_id"]),
                    content=str(r["content"]),
                    created_at=str(r["created_at"]),
                )
            )
        return out

    def _load_post(self, conn: Any, post_id: str) -> Optional[Post]:
        row = conn.execute("SELECT * FROM posts WHERE id=?", (post_id,)).fetchone()
        if row is None:
            return None
        return _post(row, self._comments_for(conn, [post_id])[post_id])

    def list_posts(self, *, page: int, limit: int) -> Tuple[List[Post], int]:
        skip = (max(1, page) - 1) * limit
        with connect(self.dsn) as conn:
            rows = conn.execute(
                "SELECT * FROM posts WHERE is_published=1 ORDER BY seq DESC LIMIT ? OFFSET ?",
                (limit, skip),
            ).fetchall()
            total = conn.execute(
                "SELECT COUNT(*) AS n FROM posts WHERE is_published=1"
            ).fetchone()["n"]
            comments = self._comments_for(conn, [str(r["id"]) for r in rows])
        return [_post(r, comments[str(r["id"])]) for r in rows], int(total)

    def get_post(self, post_id: str) -> Optional[Post]:
        with connect(self.dsn) as conn:
            return self._load_post(conn, str(post_id))

    def increment_view_count(self, post_id: str) -> bool:
        with connect(self.dsn) as conn:
            cur = conn.execute(
                "UPDATE posts SET view_count = view_count + 1 WHERE id=?", (str(post_id),)
            )
            return cur.rowcount > 0

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
        post_id = new_id()
        now = utcnow_iso()
        with connect(self.dsn) as conn:
            conn.execute(
                """
                INSERT INTO posts (
                    id, title, content, excerpt, category_id, author_id, tags_json,
                    featured_image, view_count, is_published, created_at, updated_at
                )
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, 1, ?, ?)
                """,
                (
                    post_id,
                    title.strip(),
                    content,
                    excerpt,
                    category_id,
                    author_id,
                    json.dumps(clean_tags(tags), ensure_ascii=False),
                    featured_image or DEFAULT_FEATURED_IMAGE,
                    now,
                    now,
                ),
            )
            post = self._load_post(conn, post_id)
        assert post is not None
        return post

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
        with connect(self.dsn) as conn:
            cur = conn.execute(
                """
                UPDATE posts
                SET title=?, content=?, category_id=?, excerpt=?, tags_json=?,
                    featured_image=COALESCE(?, featured_image), updated_at=?
                WHERE id=?
                """,
                (
                    title.strip(),
                    content,
                    category_id,
                    excerpt,
                    json.dumps(clean_tags(tags), ensure_ascii=False),
                    featured_image or None,
                    utcnow_iso(),
                    post_id,
                ),
            )
            if cur.rowcount == 0:
                return None
            return self._load_post(conn, post_id)

    def delete_post(self, post_id: str) -> bool:
        with connect(self.dsn) as conn:
            cur = conn.execute("DELETE FROM posts WHERE id=?", (post_id,))
            return cur.rowcount > 0

    def add_comment(self, post_id: str, *, user_id: str, content: str) -> Optional[Post]:
        text = (content or "").strip()
        if not text:
            raise EmptyComment()
        now = utcnow_iso()
        with connect(self.dsn) as conn:
            cur = conn.execute("UPDATE posts SET updated_at=? WHERE id=?", (now, post_id))
            if cur.rowcount == 0:
                return None
            conn.execute(
                """
                INSERT INTO post_comments (id, post_id, user_id, content, created_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (new_id(), post_id, user_id, text, now),
            )
            return self._load_post(conn, post_id)
