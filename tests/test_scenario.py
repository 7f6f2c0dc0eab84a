from fastapi.testclient import TestClient

from blog_platform.api.server import create_app
from blog_platform.store import MemoryStore
from conftest import bearer, create_category, create_post, make_config, register


def test_register_post_view_forbid_delete(client):
    token_a, user_a = register(client, name="Alice", email="alice@example.com")
    tech = create_category(client, token_a, "Tech")
    post = create_post(client, token_a, tech["id"], title="Hello world")

    viewed = client.get(f"/api/posts/{post['id']}")
    assert viewed.status_code == 200
    assert viewed.json()["data"]["viewCount"] == 1
    assert viewed.json()["data"]["author"]["name"] == "Alice"

    token_b, _ = register(client, name="Bob", email="bob@example.com")
    assert client.delete(f"/api/posts/{post['id']}", headers=bearer(token_b)).status_code == 403

    assert client.delete(f"/api/posts/{post['id']}", headers=bearer(token_a)).status_code == 200
    assert client.get(f"/api/posts/{post['id']}").status_code == 404


def test_health_reports_store(client, store):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "store": store.name}


class _BrokenStore(MemoryStore):
    def list_posts(self, *, page, limit):
        raise RuntimeError("connection refused: db-host:5432 password=hunter2")


def test_unexpected_errors_are_generic():
    client = TestClient(create_app(make_config(), store=_BrokenStore()), raise_server_exceptions=False)
    resp = client.get("/api/posts")
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Server Error"}
    assert "hunter2" not in resp.text


def test_bootstrap_admin_only_once():
    store = MemoryStore()
    cfg = make_config(
        AUTH_BOOTSTRAP_ADMIN_EMAIL="admin@example.com",
        AUTH_BOOTSTRAP_ADMIN_PASSWORD="adminpass",
    )
    create_app(cfg, store=store)
    create_app(cfg, store=store)
    assert store.count_users() == 1
    assert store.find_by_email("admin@example.com").role == "admin"


def test_no_bootstrap_without_credentials():
    store = MemoryStore()
    create_app(make_config(), store=store)
    assert store.count_users() == 0
