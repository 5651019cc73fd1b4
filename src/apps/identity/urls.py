from __future__ import annotations

from django.urls import path

from apps.identity import views

urlpatterns = [
    path("roles", views.roles_endpoint, name="roles"),
    path("session", views.session_endpoint, name="session"),
    path("session/login", views.login_endpoint, name="session-login"),
    path("session/logout", views.logout_endpoint, name="session-logout"),
]
