"""
Views for django-blogpress.
"""
from django.contrib.auth.mixins import LoginRequiredMixin, UserPassesTestMixin
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import get_object_or_404, redirect
from django.urls import reverse, reverse_lazy
from django.utils.http import url_has_allowed_host_and_scheme
from django.views import View
from django.views.generic import (
    ListView,
    DetailView,
    CreateView,
    UpdateView,
    DeleteView,
)

from . import services
from .conf import blog_settings
from .exceptions import PostValidationError
from .forms import PostForm
from .models import Post
from .theme import Document, SessionStorage, ThemeController, UIContext, UIEvent


def wants_json(request):
    return request.headers.get("Accept") == "application/json"


def post_payload(post):
    """JSON representation of a post for admin API responses."""
    return {
        "id": post.pk,
        "title": post.title,
        "slug": post.slug,
        "excerpt": post.excerpt,
        "category": post.category,
        "published": post.published,
        "published_at": post.published_at.isoformat() if post.published_at else None,
        "content": post.body_html,
        "author": post.author.get_username(),
        "created_at": post.created_at.isoformat(),
        "updated_at": post.updated_at.isoformat(),
        "url": reverse("blogpress:admin_post_detail", kwargs={"identifier": post.slug}),
    }


class PostListView(ListView):
    """List published posts with pagination."""

    template_name = "blogpress/post_list.html"
    context_object_name = "posts"
    paginate_by = blog_settings.POSTS_PER_PAGE

    def get_queryset(self):
        return services.list_published()


class PostDetailView(DetailView):
    """Display a single published post by slug."""

    template_name = "blogpress/post_detail.html"
    context_object_name = "post"

    def get_object(self, queryset=None):
        return get_object_or_404(
            Post.objects.published().select_related("author", "content"),
            slug=self.kwargs["slug"],
        )


class StaffRequiredMixin(LoginRequiredMixin, UserPassesTestMixin):
    """Restrict a view to logged-in staff users."""

    def test_func(self):
        return self.request.user.is_staff


class AdminPostMixin(StaffRequiredMixin):
    """Looks the post up by slug or id from the ``identifier`` URL kwarg."""

    context_object_name = "post"

    def get_object(self, queryset=None):
        try:
            return services.resolve_post(self.kwargs["identifier"])
        except Post.DoesNotExist:
            raise Http404("Post not found")


class PostFormMixin:
    """Shared create/update handling: services do the saving."""

    form_class = PostForm
    template_name = "blogpress/admin/post_form.html"

    def save_post(self, content, attributes):
        raise NotImplementedError

    def form_valid(self, form):
        content, attributes = form.post_attributes()
        try:
            self.object = self.save_post(content, attributes)
        except PostValidationError as exc:
            form.add_post_errors(exc.errors)
            return self.form_invalid(form)

        if wants_json(self.request):
            return JsonResponse(post_payload(self.object), status=self.success_status)
        return redirect(self.get_success_url())

    def form_invalid(self, form):
        if wants_json(self.request):
            errors = {
                field: [error["message"] for error in field_errors]
                for field, field_errors in form.errors.get_json_data().items()
            }
            return JsonResponse({"errors": errors}, status=422)
        return self.render_to_response(self.get_context_data(form=form), status=422)

    def get_success_url(self):
        return reverse("blogpress:admin_post_detail", kwargs={"identifier": self.object.slug})


class AdminPostListView(StaffRequiredMixin, ListView):
    """All posts, newest first."""

    template_name = "blogpress/admin/post_list.html"
    context_object_name = "posts"

    def get_queryset(self):
        return Post.objects.select_related("author").order_by("-created_at")


class AdminPostDetailView(AdminPostMixin, DetailView):
    template_name = "blogpress/admin/post_detail.html"

    def get(self, request, *args, **kwargs):
        self.object = self.get_object()
        if wants_json(request):
            return JsonResponse(post_payload(self.object))
        return self.render_to_response(self.get_context_data(object=self.object))


class AdminPostCreateView(StaffRequiredMixin, PostFormMixin, CreateView):
    """Create a post authored by the current user."""

    success_status = 201

    def save_post(self, content, attributes):
        return services.create_post(self.request.user, content=content, **attributes)


class AdminPostUpdateView(AdminPostMixin, PostFormMixin, UpdateView):
    """Edit an existing post. The author stays as it was."""

    success_status = 200

    def save_post(self, content, attributes):
        return services.update_post(self.object, content=content, **attributes)


class AdminPostDeleteView(AdminPostMixin, DeleteView):
    """Delete a post and its body."""

    template_name = "blogpress/admin/post_confirm_delete.html"
    success_url = reverse_lazy("blogpress:admin_post_list")

    def form_valid(self, form):
        services.delete_post(self.object)
        if wants_json(self.request):
            return HttpResponse(status=204)
        return redirect(self.success_url)


class ThemeToggleView(View):
    """Flip the visitor's theme preference stored in the session."""

    def post(self, request):
        controller = ThemeController(UIContext(Document()), SessionStorage(request.session))
        controller.connect()
        theme = controller.toggle_click(UIEvent("click"))

        if wants_json(request):
            return JsonResponse({"theme": theme, "label": controller.label_for(theme)})

        next_url = request.POST.get("next") or request.headers.get("Referer")
        if next_url and url_has_allowed_host_and_scheme(
            next_url,
            allowed_hosts={request.get_host()},
            require_https=request.is_secure(),
        ):
            return redirect(next_url)
        return redirect("blogpress:post_list")
