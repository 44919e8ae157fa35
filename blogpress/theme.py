"""
Theme preference controller.

Works against an explicit UI context (a document whose root element carries
the ``data-theme`` attribute, plus an optional toggle button and label) and a
key-value storage, so the same state machine drives the browser page and
server-side rendering:

    context = UIContext(Document(), button=Element(), label=Element())
    controller = ThemeController(context, SessionStorage(request.session))
    controller.connect()
    controller.toggle_click(UIEvent("click"))
"""
import logging

from .conf import blog_settings

logger = logging.getLogger(__name__)

THEME_ATTRIBUTE = "data-theme"
DARK_THEME = "dark"


class Element:
    """Minimal stand-in for a DOM element."""

    def __init__(self, text_content=""):
        self.attributes = {}
        self.class_list = set()
        self.text_content = text_content

    def get_attribute(self, name):
        return self.attributes.get(name)

    def set_attribute(self, name, value):
        self.attributes[name] = str(value)

    def toggle_class(self, name, force):
        if force:
            self.class_list.add(name)
        else:
            self.class_list.discard(name)


class Document:
    """Page document; only its root element is of interest."""

    def __init__(self, theme=None):
        self.document_element = Element()
        if theme:
            self.document_element.set_attribute(THEME_ATTRIBUTE, theme)


class UIContext:
    """Everything the controller is allowed to touch on the page."""

    def __init__(self, document, button=None, label=None):
        self.document = document
        self.button = button
        self.label = label


class UIEvent:
    """A click or keydown delivered to the controller."""

    def __init__(self, event_type, key=None):
        self.type = event_type
        self.key = key
        self.default_prevented = False

    def prevent_default(self):
        self.default_prevented = True


class MemoryStorage:
    """Dict-backed storage with the localStorage interface."""

    def __init__(self, initial=None):
        self._data = dict(initial or {})

    def get_item(self, key):
        return self._data.get(key)

    def set_item(self, key, value):
        self._data[key] = str(value)

    def remove_item(self, key):
        self._data.pop(key, None)


class SessionStorage:
    """Storage backed by a Django session."""

    def __init__(self, session):
        self.session = session

    def get_item(self, key):
        return self.session.get(key)

    def set_item(self, key, value):
        self.session[key] = str(value)

    def remove_item(self, key):
        self.session.pop(key, None)


class ThemeController:
    """
    Determines, applies and persists the active theme.

    ``themes`` lists the canonical theme names, the first being the default.
    ``legacy_aliases`` maps retired names to their canonical replacement.
    Storage failures are logged and otherwise ignored; the theme still
    applies to the page for the rest of the session.
    """

    def __init__(self, context, storage, themes=None, legacy_aliases=None,
                 labels=None, storage_key=None):
        self.context = context
        self.storage = storage
        self.themes = list(themes or blog_settings.THEMES)
        if legacy_aliases is None:
            legacy_aliases = blog_settings.LEGACY_THEME_ALIASES
        self.legacy_aliases = dict(legacy_aliases)
        self.labels = dict(labels or blog_settings.THEME_LABELS)
        self.storage_key = storage_key or blog_settings.THEME_STORAGE_KEY

    @property
    def default_theme(self):
        return self.themes[0]

    def connect(self):
        """Resolve the active theme, apply it and sync the toggle UI."""
        theme = self.determine_theme()
        self.apply_theme(theme)
        self.sync_ui(theme)
        return theme

    def toggle_click(self, event):
        event.prevent_default()
        current = self.normalize(self.current_theme()) or self.default_theme
        theme = self.next_theme(current)

        self.apply_theme(theme)
        self.persist_theme(theme)
        self.sync_ui(theme)
        return theme

    def handle_keydown(self, event):
        """Space and Enter act like a click; other keys are ignored."""
        if event.key in (" ", "Spacebar", "Enter"):
            event.prevent_default()
            return self.toggle_click(event)
        return None

    def determine_theme(self):
        stored_raw = self.read_stored_theme()
        stored = self.normalize(stored_raw)

        if stored:
            if stored != stored_raw:
                self.persist_theme(stored)
            return stored
        elif stored_raw:
            self.clear_stored_theme()

        current = self.normalize(self.current_theme())
        if current:
            return current

        return self.default_theme

    def normalize(self, theme):
        """Map a raw or legacy theme name to a canonical one, or None."""
        if not theme:
            return None
        theme = self.legacy_aliases.get(theme, theme)
        return theme if theme in self.themes else None

    def next_theme(self, theme):
        index = self.themes.index(theme)
        return self.themes[(index + 1) % len(self.themes)]

    def label_for(self, theme):
        return self.labels.get(theme, theme.title())

    def current_theme(self):
        return self.context.document.document_element.get_attribute(THEME_ATTRIBUTE)

    def apply_theme(self, theme):
        self.context.document.document_element.set_attribute(THEME_ATTRIBUTE, theme)

    def sync_ui(self, theme):
        is_dark = theme == DARK_THEME
        button = self.context.button
        label = self.context.label

        if button is not None:
            button.set_attribute("aria-checked", "true" if is_dark else "false")
            button.toggle_class("is-dark", is_dark)

        if label is not None:
            label.text_content = self.label_for(theme)

    def read_stored_theme(self):
        try:
            return self.storage.get_item(self.storage_key)
        except Exception:
            logger.warning("Unable to read theme preference", exc_info=True)
            return None

    def persist_theme(self, theme):
        try:
            self.storage.set_item(self.storage_key, theme)
        except Exception:
            logger.warning("Unable to save theme preference", exc_info=True)

    def clear_stored_theme(self):
        try:
            self.storage.remove_item(self.storage_key)
        except Exception:
            logger.warning("Unable to clear theme preference", exc_info=True)
