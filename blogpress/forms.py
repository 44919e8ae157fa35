"""
Forms for the blogpress admin views.
"""
from django import forms

from .models import Post


class PostForm(forms.ModelForm):
    """
    Editable post fields plus the HTML body.

    Only collects input; validation and saving happen in blogpress.services
    so that slug derivation and duplicate-slug races are handled in one place.
    """

    content = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={"rows": 20, "class": "rich-text"}),
        help_text="Post body (HTML).",
    )

    class Meta:
        model = Post
        fields = ["title", "slug", "excerpt", "category", "published", "published_at"]
        widgets = {
            "published_at": forms.DateTimeInput(attrs={"type": "datetime-local"}),
        }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # Blank slugs are derived from the title.
        self.fields["slug"].required = False
        if self.instance.pk:
            self.fields["content"].initial = self.instance.body_html

    def _post_clean(self):
        # Model validation runs in services.validate_post(), with the
        # author attached; skip the ModelForm copy of it.
        pass

    def post_attributes(self):
        """Cleaned data split into post fields and the body."""
        data = dict(self.cleaned_data)
        content = data.pop("content", None)
        return content, data

    def add_post_errors(self, errors):
        """Attach a services.PostValidationError mapping to this form."""
        for field, reasons in errors.items():
            target = field if field in self.fields else None
            for reason in reasons:
                self.add_error(target, reason)
