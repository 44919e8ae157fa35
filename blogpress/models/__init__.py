"""
Models for django-blogpress.

All models are importable from blogpress.models:

    from blogpress.models import Post, PostContent
"""
from .posts import Post, PostContent, PostQuerySet

__all__ = [
    "Post",
    "PostContent",
    "PostQuerySet",
]
