"""
django-blogpress - a small Django blog publishing app.

Features:
- Posts with slugs derived from their titles
- Publish flag with first-publish timestamping
- Rich-text (HTML) bodies stored alongside each post
- Slug-first, id-fallback post resolution
- Classic/dark theme preference with legacy theme aliases
- Markdown seeding from front-matter documents
"""

__version__ = "0.1.0"
