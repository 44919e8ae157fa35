"""
Slug derivation for post titles.
"""
import re
import unicodedata

from .conf import blog_settings

_NON_ALPHANUMERIC_RUN = re.compile(r"[^a-z0-9]+")


def derive_slug(title, max_length=None):
    """
    Turn a title into a URL-safe slug.

    Diacritics are stripped, the result is lowercased and every run of
    non-alphanumeric characters becomes a single hyphen:

        >>> derive_slug("Hello, World!")
        'hello-world'
        >>> derive_slug("Crème  brûlée__recipes")
        'creme-brulee-recipes'

    Unlike django.utils.text.slugify, punctuation inside a word separates
    it ("v1.2" -> "v1-2") and underscores never survive.

    Returns an empty string when the title has no ASCII-translatable
    alphanumerics.
    """
    if max_length is None:
        max_length = blog_settings.SLUG_MAX_LENGTH

    value = unicodedata.normalize("NFKD", str(title or ""))
    value = value.encode("ascii", "ignore").decode("ascii").lower()
    slug = _NON_ALPHANUMERIC_RUN.sub("-", value).strip("-")
    return slug[:max_length].rstrip("-")
