"""Blog Platform - Backend.

REST API for a small blogging application:
- Users register and log in with email + password and receive a JWT.
- Posts belong to one category and one author and embed their comments.
- Anyone can read; writing requires a bearer token, and only a post's
  author may edit or delete it.

Storage is pluggable (SQLite/Postgres or in-memory). See README for setup.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
