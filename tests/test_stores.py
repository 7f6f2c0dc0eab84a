"""Behaviour both store backends must share (each test runs against memory and SQLite)."""

import threading

import pytest

from blog_platform.errors import DuplicateCategoryName, DuplicateEmail, EmptyComment
from blog_platform.models import DEFAULT_AVATAR, DEFAULT_CATEGORY_COLOR, DEFAULT_FEATURED_IMAGE
from blog_platform.util.ids import is_valid_id


@pytest.fixture
def author(store):
    return store.create_user(name="Alice", email="alice@example.com", password="secret123")


@pytest.fixture
def category(store):
    return store.create_category(name="Tech", description=None, color=None)


def _post(store, author, category, title="Hello", **extra):
    return store.create_post(
        title=title,
        content="Body",
        category_id=category.id,
        author_id=author.id,
        **extra,
    )


class TestCredentialStore:
    def test_create_user_defaults(self, store, author):
        assert is_valid_id(author.id)
        assert author.role == "user"
        assert author.avatar == DEFAULT_AVATAR
        assert author.bio is None
        assert author.password_hash != "secret123"
        assert author.compare_password("secret123")
        assert not author.compare_password("wrong")

    def test_email_is_normalized(self, store, author):
        found = store.find_by_email("  ALICE@Example.com ")
        assert found is not None
        assert found.id == author.id

    @pytest.mark.parametrize("name,password", [("Alice", "secret123"), ("Someone Else", "different1")])
    def test_duplicate_email(self, store, author, name, password):
        with pytest.raises(DuplicateEmail):
            store.create_user(name=name, email="alice@example.com", password=password)
        assert store.count_users() == 1

    def test_find_unknown(self, store):
        assert store.find_by_email("nobody@example.com") is None
        assert store.get_user("65a1b2c3d4e5f6a7b8c9d0e1") is None

    def test_save_user_rehashes_password(self, store, author):
        author.name = "Alice B"
        author.bio = "Writer"
        author.set_password("newsecret")
        store.save_user(author)

        reloaded = store.get_user(author.id)
        assert reloaded.name == "Alice B"
        assert reloaded.bio == "Writer"
        assert reloaded.email == "alice@example.com"
        assert reloaded.compare_password("newsecret")
        assert not reloaded.compare_password("secret123")

    def test_get_users_bulk(self, store, author):
        bob = store.create_user(name="Bob", email="bob@example.com", password="secret123")
        found = store.get_users([author.id, bob.id, "65a1b2c3d4e5f6a7b8c9d0e1"])
        assert set(found) == {author.id, bob.id}


class TestCategories:
    def test_create_defaults(self, store, category):
        assert category.slug == "tech"
        assert category.color == DEFAULT_CATEGORY_COLOR
        assert store.get_category(category.id).name == "Tech"

    def test_duplicate_name(self, store, category):
        with pytest.raises(DuplicateCategoryName):
            store.create_category(name="Tech", description="again", color=None)

    def test_list_newest_first(self, store, category):
        store.create_category(name="Food & Travel", description=None, color="#ff0000")
        names = [c.name for c in store.list_categories()]
        assert names == ["Food & Travel", "Tech"]
        assert store.list_categories()[0].slug == "food-travel"

    def test_update_keeps_color_when_missing(self, store):
        c = store.create_category(name="Tech", description="old", color="#123456")
        updated = store.update_category(c.id, name="Technology", description=None, color=None)
        assert updated.name == "Technology"
        assert updated.slug == "technology"
        assert updated.description is None
        assert updated.color == "#123456"

    def test_update_rename_clash(self, store, category):
        other = store.create_category(name="Food", description=None, color=None)
        with pytest.raises(DuplicateCategoryName):
            store.update_category(other.id, name="Tech", description=None, color=None)
        # renaming onto its own name is fine
        assert store.update_category(category.id, name="Tech", description="d", color=None).description == "d"

    def test_update_missing(self, store):
        assert store.update_category("65a1b2c3d4e5f6a7b8c9d0e1", name="X", description=None, color=None) is None

    def test_delete_does_not_cascade(self, store, author, category):
        post = _post(store, author, category)
        assert store.delete_category(category.id) is True
        assert store.delete_category(category.id) is False
        assert store.get_post(post.id).category_id == category.id


class TestPosts:
    def test_create_defaults(self, store, author, category):
        post = _post(store, author, category, tags=["python", " python ", "", "web"])
        assert post.view_count == 0
        assert post.is_published is True
        assert post.featured_image == DEFAULT_FEATURED_IMAGE
        assert post.tags == ["python", "web"]
        assert post.comments == []
        assert post.author_id == author.id

    def test_list_newest_first_and_paginated(self, store, author, category):
        for i in range(12):
            _post(store, author, category, title=f"Post {i}")

        first, total = store.list_posts(page=1, limit=10)
        assert total == 12
        assert [p.title for p in first[:2]] == ["Post 11", "Post 10"]
        assert len(first) == 10

        second, total = store.list_posts(page=2, limit=10)
        assert [p.title for p in second] == ["Post 1", "Post 0"]

        empty, total = store.list_posts(page=3, limit=10)
        assert empty == [] and total == 12

    def test_increment_view_count_sequential(self, store, author, category):
        post = _post(store, author, category)
        for _ in range(5):
            assert store.increment_view_count(post.id) is True
        assert store.get_post(post.id).view_count == 5

    def test_increment_view_count_concurrent(self, store, author, category):
        post = _post(store, author, category)
        threads = [
            threading.Thread(target=lambda: [store.increment_view_count(post.id) for _ in range(10)])
            for _ in range(5)
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert store.get_post(post.id).view_count == 50

    def test_increment_missing(self, store):
        assert store.increment_view_count("65a1b2c3d4e5f6a7b8c9d0e1") is False

    def test_update_keeps_featured_image_when_missing(self, store, author, category):
        post = _post(store, author, category, featured_image="cover.png")
        updated = store.update_post(
            post.id,
            title="New",
            content="New body",
            category_id=category.id,
            excerpt=None,
            tags=[],
            featured_image=None,
        )
        assert updated.title == "New"
        assert updated.featured_image == "cover.png"
        assert updated.author_id == author.id

    def test_delete(self, store, author, category):
        post = _post(store, author, category)
        store.add_comment(post.id, user_id=author.id, content="hi")
        assert store.delete_post(post.id) is True
        assert store.get_post(post.id) is None
        assert store.delete_post(post.id) is False


class TestComments:
    def test_append_in_order(self, store, author, category):
        post = _post(store, author, category)
        store.add_comment(post.id, user_id=author.id, content="first")
        updated = store.add_comment(post.id, user_id=author.id, content="  second  ")
        assert [c.content for c in updated.comments] == ["first", "second"]
        assert all(c.user_id == author.id and c.created_at for c in updated.comments)

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test_blank_comment_rejected(self, store, author, category, content):
        post = _post(store, author, category)
        store.add_comment(post.id, user_id=author.id, content="keep me")
        with pytest.raises(EmptyComment):
            store.add_comment(post.id, user_id=author.id, content=content)
        assert [c.content for c in store.get_post(post.id).comments] == ["keep me"]

    def test_missing_post(self, store, author):
        assert store.add_comment("65a1b2c3d4e5f6a7b8c9d0e1", user_id=author.id, content="hi") is None
