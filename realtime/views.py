"""
REST views for realtime app.

- POST /api/sessions: create a session and return its id and share link.
- GET /api/sessions/<session_id>: current code, language and user count.
- GET /api/health: liveness for the editor front-end.
- GET /: API banner.
"""

from __future__ import annotations

import json
import logging

from django.http import JsonResponse
from django.views.decorators.http import require_http_methods
from pydantic import ValidationError

from codeinterview.applib.config import config
from codeinterview.applib.exceptions import SessionNotFoundError
from codeinterview.applib.helpers import generate_share_link, is_supported_language
from realtime.hub import collaboration_hub
from realtime.serializers import CreateSessionRequest, CreateSessionResponse

logger = logging.getLogger(__name__)


@require_http_methods(["GET"])
async def index_view(request):
    return JsonResponse({"message": "Online Coding Interview API", "status": "running"})


@require_http_methods(["GET"])
async def api_health_view(request):
    return JsonResponse({"status": "ok"})


@require_http_methods(["POST"])
async def create_session_view(request):
    """POST /api/sessions - Create a session; body may carry {"language": "..."}."""
    try:
        body = json.loads(request.body) if request.body else {}
        request_data = CreateSessionRequest.model_validate(body)
    except json.JSONDecodeError:
        return JsonResponse({"detail": "Invalid JSON"}, status=400)
    except ValidationError as e:
        return JsonResponse({"detail": str(e)}, status=400)
    if request_data.language is not None and not is_supported_language(request_data.language):
        return JsonResponse({"detail": f"Unsupported language: {request_data.language}"}, status=400)

    session = await collaboration_hub.create_session(language=request_data.language)
    response = CreateSessionResponse(
        session_id=session.id,
        share_link=generate_share_link(session.id, config.SHARE_BASE_URL),
    )
    return JsonResponse(response.model_dump(by_alias=True))


@require_http_methods(["GET"])
async def session_detail_view(request, session_id: str):
    """GET /api/sessions/<session_id> - Session snapshot, 404 for unknown or malformed ids."""
    try:
        snapshot = collaboration_hub.snapshot(session_id)
    except SessionNotFoundError:
        return JsonResponse({"error": "Session not found"}, status=404)
    return JsonResponse(snapshot.model_dump(by_alias=True))
