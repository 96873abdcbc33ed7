"""URL routes for the availability app."""

from django.urls import path

from . import views

app_name = "availability"

urlpatterns = [
    path("health/", views.health_check, name="health_check"),
]
