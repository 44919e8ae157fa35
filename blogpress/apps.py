"""Django app configuration for blogpress."""
from django.apps import AppConfig


class BlogPressConfig(AppConfig):
    """Configuration for the blogpress app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "blogpress"
    verbose_name = "Blog Press"
