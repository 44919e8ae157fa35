"""
Django admin configuration for blogpress.
"""
from django.contrib import admin, messages
from django.http import HttpResponseRedirect

from . import services
from .exceptions import PostValidationError
from .models import Post, PostContent


class PostContentInline(admin.StackedInline):
    """Edit the HTML body on the post page."""

    model = PostContent
    can_delete = False
    fields = ["body"]


@admin.register(Post)
class PostAdmin(admin.ModelAdmin):
    list_display = [
        "title",
        "slug",
        "category",
        "author",
        "published",
        "published_at",
        "created_at",
    ]
    list_filter = ["published", "category", "created_at"]
    search_fields = ["title", "slug", "excerpt", "author__username"]
    date_hierarchy = "created_at"
    inlines = [PostContentInline]
    readonly_fields = ["author", "created_at", "updated_at"]
    prepopulated_fields = {"slug": ("title",)}

    fieldsets = (
        (None, {
            "fields": ("title", "slug", "excerpt", "category", "author")
        }),
        ("Publishing", {
            "fields": ("published", "published_at"),
        }),
        ("Metadata", {
            "fields": ("created_at", "updated_at"),
            "classes": ("collapse",),
        }),
    )

    actions = ["publish_posts", "unpublish_posts"]

    def save_model(self, request, obj, form, change):
        if not change:
            obj.author = request.user
        with services.guard_slug_race(obj):
            super().save_model(request, obj, form, change)

    def changeform_view(self, request, object_id=None, form_url="", extra_context=None):
        # A slug lost to a concurrent save surfaces after form validation;
        # the whole change is rolled back and the form is shown again.
        try:
            return super().changeform_view(request, object_id, form_url, extra_context)
        except PostValidationError as exc:
            for reasons in exc.errors.values():
                for reason in reasons:
                    self.message_user(request, reason, level=messages.ERROR)
            return HttpResponseRedirect(request.get_full_path())

    @admin.action(description="Publish selected posts")
    def publish_posts(self, request, queryset):
        # save() per post so first-publish timestamps are assigned
        for post in queryset:
            post.published = True
            post.save(update_fields=["published", "published_at", "updated_at"])
        self.message_user(request, f"{queryset.count()} posts published.")

    @admin.action(description="Unpublish selected posts")
    def unpublish_posts(self, request, queryset):
        count = queryset.update(published=False)
        self.message_user(request, f"{count} posts unpublished.")
