"""Root URL configuration for Rollcall."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("availability.urls")),
]
