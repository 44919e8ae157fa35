"""
Tests for the blogpress Django admin.
"""
from unittest import mock

import pytest
from django.contrib.auth import get_user_model
from django.contrib.messages import get_messages
from django.db import IntegrityError
from django.urls import reverse

from blogpress import services
from blogpress.exceptions import PostValidationError
from blogpress.models import Post

User = get_user_model()


@pytest.fixture
def superuser(db):
    return User.objects.create_superuser(
        username="root",
        email="root@example.com",
        password="testpass123",
    )


@pytest.fixture
def superuser_client(client, superuser):
    client.force_login(superuser)
    return client


@pytest.fixture
def post(db, superuser):
    return services.create_post(superuser, title="Hello, World!", category="news")


def add_form_data(**overrides):
    """POST data for the add page, including the content inline."""
    data = {
        "title": "Admin post",
        "slug": "admin-post",
        "excerpt": "",
        "category": "news",
        "published_at_0": "",
        "published_at_1": "",
        "content-TOTAL_FORMS": "1",
        "content-INITIAL_FORMS": "0",
        "content-MIN_NUM_FORMS": "0",
        "content-MAX_NUM_FORMS": "1",
        "content-0-id": "",
        "content-0-body": "",
    }
    data.update(overrides)
    return data


class TestPostAdmin:
    def test_add_sets_author(self, superuser_client, superuser):
        response = superuser_client.post(
            reverse("admin:blogpress_post_add"),
            add_form_data(**{"content-0-body": "<p>Hi</p>"}),
        )
        assert response.status_code == 302
        post = Post.objects.get(slug="admin-post")
        assert post.author == superuser
        assert post.body_html == "<p>Hi</p>"

    def test_duplicate_slug_shows_form_error(self, superuser_client, post):
        response = superuser_client.post(
            reverse("admin:blogpress_post_add"), add_form_data(slug=post.slug)
        )
        assert response.status_code == 200
        assert "slug" in response.context["adminform"].form.errors
        assert Post.objects.count() == 1

    def test_slug_claimed_during_save_is_reported(self, superuser_client, post):
        """A duplicate slug that passes the form check becomes an admin error message."""
        url = reverse("admin:blogpress_post_add")
        with mock.patch.object(Post, "validate_unique"):
            response = superuser_client.post(url, add_form_data(slug=post.slug))

        assert response.status_code == 302
        assert response.url == url
        assert Post.objects.count() == 1
        errors = [str(message) for message in get_messages(response.wsgi_request)]
        assert errors and "slug" in errors[0].lower()

    def test_publish_action(self, superuser_client, post):
        response = superuser_client.post(
            reverse("admin:blogpress_post_changelist"),
            {"action": "publish_posts", "_selected_action": [post.pk]},
        )
        assert response.status_code == 302
        post.refresh_from_db()
        assert post.published
        assert post.published_at is not None


class TestGuardSlugRace:
    """Tests for services.guard_slug_race()."""

    def test_duplicate_slug_becomes_validation_error(self, db, post, superuser):
        duplicate = Post(title="Copy", slug=post.slug, category="news", author=superuser)
        with pytest.raises(PostValidationError) as excinfo:
            with services.guard_slug_race(duplicate):
                duplicate.save()
        assert list(excinfo.value.errors) == ["slug"]
        assert Post.objects.count() == 1

    def test_other_integrity_errors_propagate(self, db, superuser):
        unsaved = Post(title="Fine", slug="fine", category="news", author=superuser)
        with pytest.raises(IntegrityError):
            with services.guard_slug_race(unsaved):
                raise IntegrityError("not about slugs")
