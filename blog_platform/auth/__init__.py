"""Authentication / authorization helpers.

Auth is deliberately small:

- Users live in the CredentialStore (email + salted password hash + role)
- Stateless JWT bearer tokens (7 day lifetime, no revocation list)

Clients send `Authorization: Bearer <token>`. Logging out is the client
dropping its token.
"""

from .deps import category_writer, get_current_user_id, require_admin
from .security import issue_token, verify_token

__all__ = [
    "category_writer",
    "get_current_user_id",
    "require_admin",
    "issue_token",
    "verify_token",
]
