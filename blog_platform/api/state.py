from __future__ import annotations

from fastapi import Request

from blog_platform.config import Config
from blog_platform.store.base import Store


def get_store(request: Request) -> Store:
    return request.app.state.store


def get_cfg(request: Request) -> Config:
    return request.app.state.cfg
