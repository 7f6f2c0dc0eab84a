"""Shared fixtures: a config with a test secret, both store backends, and an API client."""

import pytest
from fastapi.testclient import TestClient

from blog_platform.api.server import create_app
from blog_platform.config import Config
from blog_platform.store import MemoryStore, SQLStore


TEST_SECRET = "test-secret-not-for-production"


def make_config(**overrides) -> Config:
    values = {
        "AUTH_JWT_SECRET": TEST_SECRET,
        "STORE_BACKEND": "memory",
        "AUTH_BOOTSTRAP_ADMIN_EMAIL": None,
        "AUTH_BOOTSTRAP_ADMIN_PASSWORD": None,
        "CATEGORY_ADMIN_ONLY": False,
        "API_PREFIX": "/api",
    }
    values.update(overrides)
    return Config(**values)


@pytest.fixture
def cfg():
    return make_config()


@pytest.fixture(params=["memory", "sql"])
def store(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return SQLStore(str(tmp_path / "blog.sqlite"))


@pytest.fixture
def client(cfg, store):
    app = create_app(cfg, store=store)
    return TestClient(app, raise_server_exceptions=False)


def register(client, name="Alice", email="alice@example.com", password="secret123"):
    resp = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert resp.status_code == 201, resp.text
    body = resp.json()
    return body["token"], body["user"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


def create_category(client, token, name="Tech", **extra):
    resp = client.post("/api/categories", json={"name": name, **extra}, headers=bearer(token))
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def create_post(client, token, category_id, title="Hello", content="First post body", **extra):
    resp = client.post(
        "/api/posts",
        json={"title": title, "content": content, "categoryId": category_id, **extra},
        headers=bearer(token),
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]
