"""Persistence behind two small interfaces (CredentialStore, ContentStore).

`open_store(cfg)` picks the implementation once at startup; nothing else in
the app branches on which one is active.
"""

from blog_platform.config import Config
from blog_platform.db import detect_dialect

from .base import ContentStore, CredentialStore, Store
from .memory import MemoryStore
from .sql import SQLStore


def _debug(msg: str) -> None:
    print(f"[store] {msg}")


def open_store(cfg: Config) -> Store:
    backend = (cfg.STORE_BACKEND or "sql").strip().lower()
    if backend == "memory":
        _debug("Using in-memory store. Data will not persist across restarts.")
        return MemoryStore()
    if backend == "sql":
        _debug(f"Using SQL store ({detect_dialect(cfg.DB_DSN)})")
        return SQLStore(cfg.DB_DSN)
    raise ValueError(f"unknown store backend: {backend!r}")


__all__ = [
    "ContentStore",
    "CredentialStore",
    "MemoryStore",
    "SQLStore",
    "Store",
    "open_store",
]
