"""Request bodies.

Fields are typed loosely on purpose: shape and length rules live in
`blog_platform.validation`, which reports every bad field at once in the
API's own error format instead of FastAPI's 422.
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel


class _Body(BaseModel):
    def data(self) -> Dict[str, Any]:
        return self.model_dump()


class RegisterRequest(_Body):
    name: Any = None
    email: Any = None
    password: Any = None


class LoginRequest(_Body):
    email: Any = None
    password: Any = None


class ProfileRequest(_Body):
    name: Any = None
    bio: Any = None
    avatar: Any = None


class PostRequest(_Body):
    title: Any = None
    content: Any = None
    categoryId: Any = None
    excerpt: Any = None
    tags: Any = None
    featuredImage: Any = None


class CommentRequest(_Body):
    content: Any = None


class CategoryRequest(_Body):
    name: Any = None
    description: Any = None
    color: Any = None
