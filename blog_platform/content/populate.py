"""Turn stored posts into API payloads with their references joined in.

Posts only hold ids for their author, category and comment authors. These
helpers fetch the referenced records in bulk and replace the ids with a
small field subset. A reference that no longer resolves becomes null.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from blog_platform.models import Category, Post, User
from blog_platform.store.base import ContentStore, CredentialStore


def _author(u: Optional[User], *, detail: bool) -> Optional[Dict[str, Any]]:
    if u is None:
        return None
    d = {"id": u.id, "name": u.name, "email": u.email, "avatar": u.avatar}
    if detail:
        d["bio"] = u.bio
    return d


def _category(c: Optional[Category]) -> Optional[Dict[str, Any]]:
    if c is None:
        return None
    return {"id": c.id, "name": c.name, "slug": c.slug}


def _commenter(u: Optional[User]) -> Optional[Dict[str, Any]]:
    if u is None:
        return None
    return {"id": u.id, "name": u.name, "avatar": u.avatar}


def populate_posts(
    posts: Iterable[Post],
    *,
    users: CredentialStore,
    content: ContentStore,
    detail: bool = False,
) -> List[Dict[str, Any]]:
    """Serialize posts with author and category joined.

    With `detail`, the author also carries `bio` and every comment's user is
    joined; otherwise comments keep the bare user id.
    """
    posts = list(posts)
    user_ids = {p.author_id for p in posts}
    if detail:
        user_ids.update(c.user_id for p in posts for c in p.comments)
    authors = users.get_users(user_ids)
    categories = content.get_categories({p.category_id for p in posts})

    out: List[Dict[str, Any]] = []
    for p in posts:
        comments = []
        for c in p.comments:
            comments.append(
                {
                    "id": c.id,
                    "user": _commenter(authors.get(c.user_id)) if detail else c.user_id,
                    "content": c.content,
                    "createdAt": c.created_at,
                }
            )
        out.append(
            {
                "id": p.id,
                "title": p.title,
                "content": p.content,
                "excerpt": p.excerpt,
                "displayExcerpt": p.display_excerpt,
                "category": _category(categories.get(p.category_id)),
                "author": _author(authors.get(p.author_id), detail=detail),
                "tags": list(p.tags),
                "featuredImage": p.featured_image,
                "viewCount": p.view_count,
                "isPublished": p.is_published,
                "comments": comments,
                "createdAt": p.created_at,
                "updatedAt": p.updated_at,
            }
        )
    return out


def populate_post(
    post: Post, *, users: CredentialStore, content: ContentStore, detail: bool = False
) -> Dict[str, Any]:
    return populate_posts([post], users=users, content=content, detail=detail)[0]
