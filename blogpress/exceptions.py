"""
Exceptions raised by django-blogpress.
"""
from django.core.exceptions import ValidationError


class BlogPressError(Exception):
    """Base class for blogpress errors that are not validation failures."""


class PostValidationError(ValidationError):
    """
    A post failed validation and nothing was written.

    ``errors`` maps field names to lists of human-readable reasons, the same
    shape as ``ValidationError.message_dict`` and ``form.errors``.
    """

    def __init__(self, errors):
        super().__init__(errors)
        self.errors = {field: list(reasons) for field, reasons in errors.items()}


class SeedError(BlogPressError):
    """A seed document could not be turned into a post."""
