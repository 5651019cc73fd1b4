from __future__ import annotations

from django.urls import path

from apps.records import views

urlpatterns = [
    path("<str:resource_type>", views.record_list_endpoint, name="records-list"),
    path("<str:resource_type>/<str:record_id>", views.record_detail_endpoint, name="records-detail"),
]
