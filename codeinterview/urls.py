"""
URL configuration for the codeinterview project.

Paths mirror the editor front-end's API client (no trailing slashes under /api/).
"""
from django.urls import path

from realtime.views import api_health_view, create_session_view, index_view, session_detail_view
from .health import health

urlpatterns = [
    path("", index_view),
    # Load balancer target group health check
    path("health/", health),
    path("api/health", api_health_view),
    path("api/sessions", create_session_view),
    path("api/sessions/<str:session_id>", session_detail_view),
]
