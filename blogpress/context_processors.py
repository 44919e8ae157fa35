"""
Template context processors for django-blogpress.

Add to TEMPLATES["OPTIONS"]["context_processors"]:

    "blogpress.context_processors.theme",
"""
from .theme import Document, ThemeController, UIContext, SessionStorage


def theme(request):
    """Expose the visitor's theme as ``active_theme`` and ``theme_label``."""
    session = getattr(request, "session", None)
    if session is None:
        return {}

    controller = ThemeController(UIContext(Document()), SessionStorage(session))
    active = controller.connect()
    return {
        "active_theme": active,
        "theme_label": controller.label_for(active),
        "theme_is_dark": active == "dark",
    }
