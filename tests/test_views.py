"""
Tests for django-blogpress views.
"""
from datetime import timedelta

import pytest
from django.contrib.auth import get_user_model
from django.urls import reverse
from django.utils import timezone

from blogpress import services
from blogpress.models import Post, PostContent

User = get_user_model()

JSON = {"HTTP_ACCEPT": "application/json"}


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        username="admin",
        email="admin@example.com",
        password="testpass123",
        is_staff=True,
    )


@pytest.fixture
def admin_client(client, admin_user):
    client.force_login(admin_user)
    return client


@pytest.fixture
def published_post(db, admin_user):
    return services.create_post(
        admin_user,
        title="Hello, World!",
        category="news",
        published=True,
        content="<p>Body text</p>",
    )


@pytest.fixture
def draft_post(db, admin_user):
    return services.create_post(admin_user, title="Work in progress", category="news")


class TestPublicViews:
    """Tests for the public blog pages."""

    def test_post_list_shows_published_only(self, client, published_post, draft_post):
        response = client.get(reverse("blogpress:post_list"))
        assert response.status_code == 200
        assert list(response.context["posts"]) == [published_post]
        assert b"Hello, World!" in response.content
        assert b"Work in progress" not in response.content

    def test_post_list_order(self, client, admin_user, published_post):
        older = services.create_post(
            admin_user,
            title="Older",
            category="news",
            published=True,
            published_at=timezone.now() - timedelta(days=5),
        )
        response = client.get(reverse("blogpress:post_list"))
        assert list(response.context["posts"]) == [published_post, older]

    def test_post_list_paginated(self, client, admin_user):
        for i in range(7):
            services.create_post(admin_user, title=f"Post {i}", category="news", published=True)
        response = client.get(reverse("blogpress:post_list"))
        assert response.context["is_paginated"]
        assert len(response.context["posts"]) == 5

    def test_post_detail(self, client, published_post):
        response = client.get(reverse("blogpress:post_detail", kwargs={"slug": "hello-world"}))
        assert response.status_code == 200
        assert b"<p>Body text</p>" in response.content

    def test_draft_detail_not_found(self, client, draft_post):
        response = client.get(reverse("blogpress:post_detail", kwargs={"slug": draft_post.slug}))
        assert response.status_code == 404

    def test_missing_detail_not_found(self, client, db):
        response = client.get(reverse("blogpress:post_detail", kwargs={"slug": "missing-slug"}))
        assert response.status_code == 404

    def test_page_carries_theme(self, client, db):
        response = client.get(reverse("blogpress:post_list"))
        assert response.context["active_theme"] == "classic"
        assert b'data-theme="classic"' in response.content


class TestAdminAccess:
    def test_anonymous_redirected_to_login(self, client, db):
        response = client.get(reverse("blogpress:admin_post_list"))
        assert response.status_code == 302
        assert "login" in response["Location"]

    def test_non_staff_forbidden(self, client, db):
        user = User.objects.create_user(username="reader", password="pass")
        client.force_login(user)
        response = client.get(reverse("blogpress:admin_post_list"))
        assert response.status_code == 403


class TestAdminPostViews:
    """Tests for admin create/read/update/delete."""

    def test_list_includes_drafts(self, admin_client, published_post, draft_post):
        response = admin_client.get(reverse("blogpress:admin_post_list"))
        assert response.status_code == 200
        assert set(response.context["posts"]) == {published_post, draft_post}

    def test_create(self, admin_client, admin_user):
        response = admin_client.post(
            reverse("blogpress:admin_post_create"),
            {"title": "Hello, World!", "slug": "", "category": "news", "content": "<p>Hi</p>"},
        )
        post = Post.objects.get()
        assert response.status_code == 302
        assert response["Location"] == reverse(
            "blogpress:admin_post_detail", kwargs={"identifier": "hello-world"}
        )
        assert post.slug == "hello-world"
        assert post.author == admin_user
        assert post.body_html == "<p>Hi</p>"

    def test_create_json(self, admin_client):
        response = admin_client.post(
            reverse("blogpress:admin_post_create"),
            {"title": "Hello, World!", "category": "news", "published": "on"},
            **JSON,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["slug"] == "hello-world"
        assert data["published"] is True
        assert data["published_at"] is not None
        assert data["author"] == "admin"

    def test_create_invalid_json(self, admin_client):
        response = admin_client.post(
            reverse("blogpress:admin_post_create"),
            {"title": "", "category": ""},
            **JSON,
        )
        assert response.status_code == 422
        assert set(response.json()["errors"]) >= {"title", "category"}
        assert Post.objects.count() == 0

    def test_create_duplicate_slug(self, admin_client, published_post):
        response = admin_client.post(
            reverse("blogpress:admin_post_create"),
            {"title": "Hello, World!", "category": "news"},
        )
        assert response.status_code == 422
        assert "slug" in response.context["form"].errors
        assert Post.objects.count() == 1

    def test_detail_by_slug_and_id(self, admin_client, draft_post):
        by_slug = admin_client.get(
            reverse("blogpress:admin_post_detail", kwargs={"identifier": draft_post.slug}), **JSON
        )
        by_id = admin_client.get(
            reverse("blogpress:admin_post_detail", kwargs={"identifier": str(draft_post.pk)}), **JSON
        )
        assert by_slug.status_code == by_id.status_code == 200
        assert by_slug.json()["id"] == by_id.json()["id"] == draft_post.pk

    def test_detail_html(self, admin_client, draft_post):
        response = admin_client.get(
            reverse("blogpress:admin_post_detail", kwargs={"identifier": draft_post.slug})
        )
        assert response.status_code == 200
        assert response.context["post"] == draft_post

    def test_detail_not_found(self, admin_client, db):
        response = admin_client.get(
            reverse("blogpress:admin_post_detail", kwargs={"identifier": "missing-slug"})
        )
        assert response.status_code == 404

    def test_digit_like_identifier_not_found(self, admin_client, draft_post):
        response = admin_client.get(
            reverse("blogpress:admin_post_detail", kwargs={"identifier": "²"}), **JSON
        )
        assert response.status_code == 404

    def test_update_publishes(self, admin_client, draft_post):
        response = admin_client.post(
            reverse("blogpress:admin_post_update", kwargs={"identifier": draft_post.slug}),
            {
                "title": "Finished",
                "slug": draft_post.slug,
                "category": "news",
                "published": "on",
                "content": "<p>Done</p>",
            },
            **JSON,
        )
        assert response.status_code == 200
        draft_post.refresh_from_db()
        assert draft_post.title == "Finished"
        assert draft_post.published
        assert draft_post.published_at is not None
        assert draft_post.body_html == "<p>Done</p>"

    def test_update_duplicate_slug(self, admin_client, published_post, draft_post):
        response = admin_client.post(
            reverse("blogpress:admin_post_update", kwargs={"identifier": draft_post.pk}),
            {"title": draft_post.title, "slug": published_post.slug, "category": "news"},
            **JSON,
        )
        assert response.status_code == 422
        assert "slug" in response.json()["errors"]
        draft_post.refresh_from_db()
        assert draft_post.slug == "work-in-progress"

    def test_update_form_renders(self, admin_client, published_post):
        response = admin_client.get(
            reverse("blogpress:admin_post_update", kwargs={"identifier": published_post.slug})
        )
        assert response.status_code == 200
        assert response.context["form"]["content"].value() == "<p>Body text</p>"

    def test_delete(self, admin_client, published_post):
        response = admin_client.post(
            reverse("blogpress:admin_post_delete", kwargs={"identifier": published_post.slug})
        )
        assert response.status_code == 302
        assert response["Location"] == reverse("blogpress:admin_post_list")
        assert Post.objects.count() == 0
        assert PostContent.objects.count() == 0

    def test_delete_json(self, admin_client, published_post):
        response = admin_client.post(
            reverse("blogpress:admin_post_delete", kwargs={"identifier": published_post.pk}),
            **JSON,
        )
        assert response.status_code == 204
        assert Post.objects.count() == 0


class TestThemeToggleView:
    def test_toggle_json(self, client, db):
        response = client.post(reverse("blogpress:theme_toggle"), **JSON)
        assert response.json() == {"theme": "dark", "label": "Dark"}
        assert client.session["preferred-theme"] == "dark"

        response = client.post(reverse("blogpress:theme_toggle"), **JSON)
        assert response.json()["theme"] == "classic"

    def test_toggle_redirects_to_next(self, client, db):
        response = client.post(reverse("blogpress:theme_toggle"), {"next": "/blog/"})
        assert response.status_code == 302
        assert response["Location"] == "/blog/"

    def test_toggle_ignores_offsite_next(self, client, db):
        response = client.post(
            reverse("blogpress:theme_toggle"), {"next": "https://evil.example.com/"}
        )
        assert response["Location"] == reverse("blogpress:post_list")

    def test_legacy_session_value_migrated_on_render(self, client, db):
        session = client.session
        session["preferred-theme"] = "midnight"
        session.save()

        response = client.get(reverse("blogpress:post_list"))
        assert response.context["active_theme"] == "dark"
        assert b'data-theme="dark"' in response.content
        assert client.session["preferred-theme"] == "dark"
