from __future__ import annotations

from django.urls import include, path

from apps.core import api as core_api
from apps.records import views as records_views

urlpatterns = [
    path("api/health/live", core_api.health_live, name="health-live"),
    path("api/health/ready", core_api.health_ready, name="health-ready"),
    path("api/v1/authorize", core_api.authorize_endpoint, name="api-authorize"),
    path("api/v1/navigation", core_api.navigation_endpoint, name="api-navigation"),
    path("api/v1/metrics", core_api.metrics_payload, name="api-metrics"),
    path("api/v1/dashboard", records_views.dashboard_endpoint, name="api-dashboard"),
    path("api/v1/audit-logs", records_views.audit_log_endpoint, name="api-audit-logs"),
    path("api/v1/records/", include("apps.records.urls")),
    path("api/v1/", include("apps.identity.urls")),
]
