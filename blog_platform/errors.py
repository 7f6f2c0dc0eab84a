"""Error taxonomy shared by the stores, the domain operations and the API.

Every error the API reports to a client is a BlogError. The app renders them
as `{"success": false, "error": ...}` or, for field-level validation,
`{"success": false, "errors": [{"field": ..., "msg": ...}]}`.
"""

from __future__ import annotations

from typing import Any, Dict, List


class BlogError(Exception):
    status_code = 500
    message = "Server Error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "error": self.message}


class ValidationError(BlogError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: List[Dict[str, str]]):
        super().__init__()
        self.errors = list(errors)

    def to_body(self) -> Dict[str, Any]:
        return {"success": False, "errors": self.errors}


class DuplicateEmail(BlogError):
    status_code = 400
    message = "User with this email already exists"


class DuplicateCategoryName(BlogError):
    status_code = 400
    message = "Category with this name already exists"


class InvalidCredentials(BlogError):
    # Same message for unknown email and wrong password.
    status_code = 400
    message = "Invalid credentials"


class EmptyComment(BlogError):
    status_code = 400
    message = "Comment content is required"


class Unauthenticated(BlogError):
    status_code = 401
    message = "No token, authorization denied"


class InvalidToken(BlogError):
    status_code = 401
    message = "Token is not valid"


class Forbidden(BlogError):
    status_code = 403
    message = "Not authorized"


class NotFound(BlogError):
    status_code = 404
    message = "Not found"

    @classmethod
    def entity(cls, name: str) -> "NotFound":
        return cls(f"{name} not found")


class InternalError(BlogError):
    status_code = 500
    message = "Server Error"
