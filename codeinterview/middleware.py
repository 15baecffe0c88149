"""
Middleware for codeinterview.

- HealthCheckAllowHttpMiddleware: lets load balancer health checks reach
  /health/ and /api/health over plain HTTP (no SSL redirect) from any origin.
"""

from __future__ import annotations

HEALTH_PATHS = ("/health", "/api/health")


def _is_health_path(request) -> bool:
    path = (request.path or "").rstrip("/") or "/"
    return path in HEALTH_PATHS


class HealthCheckAllowHttpMiddleware:
    """
    Run before SecurityMiddleware. For health paths:
    - Set proxy SSL header so Django does not redirect HTTP -> HTTPS (avoids 301).
    - In response, add permissive CORS so checks are not blocked by CORS.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        is_health = _is_health_path(request)
        if is_health:
            request.META["HTTP_X_FORWARDED_PROTO"] = "https"
        response = self.get_response(request)
        if is_health:
            response["Access-Control-Allow-Origin"] = "*"
        return response
