"""
URL configuration for django-blogpress.

Include in your project urls.py:

    path('blog/', include('blogpress.urls')),
"""
from django.urls import path

from . import views

app_name = "blogpress"

urlpatterns = [
    # Admin post management
    path("admin/posts/", views.AdminPostListView.as_view(), name="admin_post_list"),
    path("admin/posts/new/", views.AdminPostCreateView.as_view(), name="admin_post_create"),
    path("admin/posts/<str:identifier>/", views.AdminPostDetailView.as_view(), name="admin_post_detail"),
    path("admin/posts/<str:identifier>/edit/", views.AdminPostUpdateView.as_view(), name="admin_post_update"),
    path("admin/posts/<str:identifier>/delete/", views.AdminPostDeleteView.as_view(), name="admin_post_delete"),

    # Theme preference
    path("theme/toggle/", views.ThemeToggleView.as_view(), name="theme_toggle"),

    # Public blog
    path("", views.PostListView.as_view(), name="post_list"),
    path("<slug:slug>/", views.PostDetailView.as_view(), name="post_detail"),
]
