"""
Configuration settings for django-blogpress.

Override these in your Django settings.py:

    BLOGPRESS = {
        'POSTS_PER_PAGE': 10,
        'THEMES': ['classic', 'dark'],
        'LEGACY_THEME_ALIASES': {'midnight': 'dark'},
        ...
    }
"""
from django.conf import settings

DEFAULTS = {
    # Posts
    "POSTS_PER_PAGE": 10,
    "SLUG_MAX_LENGTH": 100,
    "DEFAULT_CATEGORY": "general",

    # Theme preference. The first entry of THEMES is the default theme.
    "THEMES": ["classic", "dark"],
    "LEGACY_THEME_ALIASES": {"midnight": "dark"},
    "THEME_LABELS": {"classic": "Classic", "dark": "Dark"},
    "THEME_STORAGE_KEY": "preferred-theme",

    # Seeding
    "SEED_DIRECTORY": None,
    "SEED_AUTHOR_EMAIL": "admin@example.com",
    "MARKDOWN_EXTENSIONS": ["tables", "fenced_code"],
}


class BlogPressSettings:
    """
    Lazy settings object that reads from Django settings.

    Access via: from blogpress.conf import blog_settings
    """

    def __getattr__(self, name):
        if name not in DEFAULTS:
            raise AttributeError(f"Invalid blogpress setting: {name}")

        user_settings = getattr(settings, "BLOGPRESS", {})
        return user_settings.get(name, DEFAULTS[name])


blog_settings = BlogPressSettings()
