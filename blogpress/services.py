"""
Post lifecycle operations.

Views, the admin and the seeding command go through these functions rather
than calling Post.save() directly, so that validation, slug derivation and
duplicate-slug races are handled the same way everywhere.

    from blogpress import services

    post = services.create_post(request.user, title="Hello, World!", category="news")
    post = services.update_post(post, published=True)
"""
import logging
from contextlib import contextmanager

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction

from .exceptions import PostValidationError
from .models import Post, PostContent

logger = logging.getLogger(__name__)

# Fields callers may set through create_post() / update_post().
EDITABLE_FIELDS = ("title", "slug", "excerpt", "category", "published", "published_at")


def validate_post(post):
    """
    Validate a post without saving it.

    Fills in a missing slug first, then returns a dict mapping field names
    to lists of reasons. An empty dict means the post is valid.
    """
    post.fill_slug()
    exclude = ["author"] if post.author_id is None else None
    try:
        post.full_clean(exclude=exclude)
    except ValidationError as exc:
        return exc.message_dict
    return {}


def create_post(author, content=None, **attributes):
    """
    Create a post owned by ``author``.

    ``content`` is the HTML body; the remaining keyword arguments must be
    names from EDITABLE_FIELDS. Raises PostValidationError when the post is
    invalid, in which case nothing is written.
    """
    post = Post(author=author)
    _assign(post, attributes)
    _save(post, content)
    logger.info("Created post %s (%s)", post.pk, post.slug)
    return post


def update_post(post, content=None, **attributes):
    """
    Apply ``attributes`` (and optionally a new HTML body) to an existing post.

    The author cannot be changed here. Raises PostValidationError on
    invalid input; neither the database row nor the in-memory ``post``
    is changed in that case.
    """
    previous = {field: getattr(post, field) for field in EDITABLE_FIELDS}
    _assign(post, attributes)
    try:
        _save(post, content)
    except PostValidationError:
        for field, value in previous.items():
            setattr(post, field, value)
        raise
    logger.info("Updated post %s (%s)", post.pk, post.slug)
    return post


def delete_post(post):
    """Delete a post together with its body. Integrity errors propagate."""
    pk, slug = post.pk, post.slug
    with transaction.atomic():
        post.delete()
    logger.info("Deleted post %s (%s)", pk, slug)


def resolve_post(identifier, queryset=None):
    """
    Find a post by slug, or by id when no slug matches.

    Raises Post.DoesNotExist when neither resolves.
    """
    if queryset is None:
        queryset = Post.objects.all()
    return queryset.resolve(identifier)


def list_published():
    """Published posts, newest publication first. The queryset is lazy."""
    return Post.objects.published().select_related("author")


def _assign(post, attributes):
    unknown = set(attributes) - set(EDITABLE_FIELDS)
    if unknown:
        raise TypeError(f"Cannot assign post field(s): {', '.join(sorted(unknown))}")
    for field, value in attributes.items():
        setattr(post, field, value)


def _save(post, content):
    errors = validate_post(post)
    if errors:
        raise PostValidationError(errors)

    with guard_slug_race(post):
        post.save()
        if content is not None:
            record, _ = PostContent.objects.update_or_create(
                post=post,
                defaults={"body": content},
            )
            post.content = record


@contextmanager
def guard_slug_race(post):
    """
    Run a save of ``post`` atomically, reporting a lost slug race as a
    PostValidationError on the slug field.

    The uniqueness check in validate_post() can pass for two writers at
    once; the database constraint then rejects the second one.
    """
    try:
        with transaction.atomic():
            yield
    except IntegrityError:
        if not _slug_taken(post):
            raise
        logger.warning("Slug %r was claimed concurrently", post.slug)
        raise PostValidationError(
            {"slug": post.unique_error_message(Post, ("slug",)).messages}
        )


def _slug_taken(post):
    others = Post.objects.filter(slug=post.slug)
    if post.pk is not None:
        others = others.exclude(pk=post.pk)
    return others.exists()
