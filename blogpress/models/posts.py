"""
Post and PostContent models for django-blogpress.
"""
from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F
from django.urls import reverse
from django.utils import timezone
from django.utils.html import strip_tags

from ..slugs import derive_slug


class PostQuerySet(models.QuerySet):
    """Query helpers shared by public and admin read paths."""

    def published(self):
        """
        Published posts, most recently published first.

        Posts flagged published without a published_at sort after every
        dated post; ties fall back to newest created, then highest pk.
        """
        return self.filter(published=True).order_by(
            F("published_at").desc(nulls_last=True),
            "-created_at",
            "-pk",
        )

    def resolve(self, identifier):
        """
        Look a post up by slug, falling back to primary key.

        Raises Post.DoesNotExist when neither matches.
        """
        identifier = str(identifier).strip()
        post = self.filter(slug=identifier).first()
        if post is not None:
            return post
        # isdecimal() rejects digit-like characters int() cannot parse ("²")
        if identifier.isdecimal():
            return self.get(pk=int(identifier))
        raise self.model.DoesNotExist(
            f"No post matches the slug or id {identifier!r}."
        )


class Post(models.Model):
    """
    Blog post.

    The slug is the public identifier and is derived from the title when
    left blank. published_at is stamped the first time a post is saved as
    published; it is never cleared or moved automatically, so the flag and
    the timestamp can disagree when either is set by hand.
    """

    title = models.CharField(max_length=255)
    slug = models.SlugField(max_length=255, unique=True)
    excerpt = models.TextField(blank=True)
    category = models.CharField(max_length=100)

    published = models.BooleanField(default=False)
    published_at = models.DateTimeField(null=True, blank=True, db_index=True)

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="blogpress_posts",
    )

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = PostQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["published", "-published_at"],
                name="blogpress_post_published_idx",
            ),
        ]

    def __str__(self):
        return self.title or self.slug

    def clean(self):
        self.fill_slug()
        super().clean()

        # Whitespace-only values pass the blank check in clean_fields().
        errors = {}
        for field in ("title", "category"):
            value = getattr(self, field)
            if value and not value.strip():
                errors[field] = self._meta.get_field(field).error_messages["blank"]
        if errors:
            raise ValidationError(errors)

    def save(self, *args, **kwargs):
        self.assign_publish_timestamp()
        super().save(*args, **kwargs)

    def get_absolute_url(self):
        return reverse("blogpress:post_detail", kwargs={"slug": self.slug})

    def fill_slug(self):
        """Derive the slug from the title if no slug was given."""
        if self.title and not self.slug:
            self.slug = derive_slug(self.title)

    def assign_publish_timestamp(self):
        """Stamp published_at with the current time on first publish."""
        if self.published and self.published_at is None:
            self.published_at = timezone.now()

    @property
    def body_html(self):
        """Rich-text body, or an empty string when none was stored."""
        try:
            return self.content.body
        except PostContent.DoesNotExist:
            return ""

    @property
    def preview(self):
        """Excerpt for list display, falling back to the body text."""
        if self.excerpt:
            return self.excerpt
        try:
            text = self.content.plain_text
        except PostContent.DoesNotExist:
            return ""
        if len(text) > 280:
            return text[:280] + "..."
        return text


class PostContent(models.Model):
    """
    Rich-text (HTML) body of a post.

    Lives and dies with its post.
    """

    post = models.OneToOneField(
        Post,
        on_delete=models.CASCADE,
        related_name="content",
    )
    body = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "post content"
        verbose_name_plural = "post contents"

    def __str__(self):
        return f"Content of {self.post}"

    @property
    def plain_text(self):
        return " ".join(strip_tags(self.body).split())
