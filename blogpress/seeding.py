"""
Seed posts from Markdown files with YAML front matter.

A seed document looks like:

    ---
    title: Hello, World!
    date: 2024-05-01
    excerpt: A first post.
    category: news
    ---
    The body, in **Markdown**.

The file name (without ``.md``) becomes the slug; seeding the same file again
updates the post with that slug instead of creating a new one. Seeded posts
are always published, with ``published_at`` at the start of ``date``.
"""
import datetime
import logging
import re
from pathlib import Path

import markdown
import yaml
from django.contrib.auth import get_user_model
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from . import services
from .conf import blog_settings
from .exceptions import PostValidationError, SeedError
from .models import Post
from .slugs import derive_slug

logger = logging.getLogger(__name__)

FRONT_MATTER_RE = re.compile(r"\A---\s*\n(.*?)\n---\s*\n(.*)\Z", re.DOTALL)


class SeedResult:
    """Outcome of seeding one file."""

    def __init__(self, path, status, post=None, message=""):
        self.path = Path(path)
        self.status = status  # "created", "updated", "skipped" or "failed"
        self.post = post
        self.message = message

    def __repr__(self):
        return f"<SeedResult {self.path.name}: {self.status}>"


def parse_document(text):
    """
    Split a seed document into (metadata dict, Markdown body).

    Raises SeedError when the front matter is missing or is not a mapping.
    """
    match = FRONT_MATTER_RE.match(text)
    if not match:
        raise SeedError("Invalid frontmatter")

    try:
        metadata = yaml.safe_load(match.group(1)) or {}
    # PyYAML raises a bare ValueError for impossible dates like 2024-02-30
    except (yaml.YAMLError, ValueError) as exc:
        raise SeedError(f"Unreadable frontmatter: {exc}") from exc
    if not isinstance(metadata, dict):
        raise SeedError("Frontmatter must be a mapping")

    return metadata, match.group(2)


def render_markdown(text):
    """Convert a Markdown body to HTML."""
    return markdown.markdown(text, extensions=blog_settings.MARKDOWN_EXTENSIONS)


def publication_time(value):
    """Start of day (current timezone) for a front matter ``date`` value."""
    if isinstance(value, datetime.datetime):
        moment = value
    else:
        if isinstance(value, str):
            try:
                value = parse_date(value.strip()) or _date_of(parse_datetime(value.strip()))
            except ValueError as exc:
                raise SeedError(f"Invalid date: {value!r}") from exc
        if not isinstance(value, datetime.date):
            raise SeedError(f"Invalid date: {value!r}")
        moment = datetime.datetime.combine(value, datetime.time.min)

    if timezone.is_naive(moment):
        moment = timezone.make_aware(moment)
    return moment


def _date_of(value):
    return value.date() if value is not None else None


def get_seed_author(email=None):
    """Return the seeding author, creating a staff user when missing."""
    email = email or blog_settings.SEED_AUTHOR_EMAIL
    User = get_user_model()

    author = User._default_manager.filter(email=email).first()
    if author is None:
        # No password given, so the account cannot log in until one is set.
        author = User._default_manager.create_user(
            **{User.USERNAME_FIELD: email, "email": email},
            is_staff=True,
        )
        logger.info("Created seed author %s", email)
    return author


def seed_file(path, author):
    """Create or update the post described by one seed file."""
    path = Path(path)
    metadata, body = parse_document(path.read_text(encoding="utf-8"))
    if "date" not in metadata:
        raise SeedError("Missing date")

    slug = derive_slug(path.stem)
    attributes = {
        "title": metadata.get("title") or "",
        "excerpt": metadata.get("excerpt") or "",
        "category": metadata.get("category") or blog_settings.DEFAULT_CATEGORY,
        "published": True,
        "published_at": publication_time(metadata["date"]),
    }
    content = render_markdown(body)

    post = Post.objects.filter(slug=slug).first()
    if post is None:
        post = services.create_post(author, content=content, slug=slug, **attributes)
        return SeedResult(path, "created", post)

    services.update_post(post, content=content, **attributes)
    return SeedResult(path, "updated", post)


def seed_directory(directory, author=None):
    """
    Seed every ``*.md`` file in ``directory``, in name order.

    Problems with one file are recorded in its result and do not stop
    the others.
    """
    directory = Path(directory)
    if author is None:
        author = get_seed_author()

    results = []
    for path in sorted(directory.glob("*.md")):
        try:
            result = seed_file(path, author)
        except SeedError as exc:
            result = SeedResult(path, "skipped", message=str(exc))
        except PostValidationError as exc:
            reasons = "; ".join(
                f"{field}: {', '.join(messages)}" for field, messages in exc.errors.items()
            )
            result = SeedResult(path, "failed", message=reasons)
        except (OSError, UnicodeDecodeError) as exc:
            result = SeedResult(path, "failed", message=str(exc))

        logger.info("Seed %s: %s %s", path.name, result.status, result.message)
        results.append(result)
    return results
