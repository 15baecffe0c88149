from __future__ import annotations

import os
import time

from django.http import JsonResponse

from realtime.hub import collaboration_hub


def health(request):
    """
    Load balancer health check endpoint.

    Cheap and dependency-free: reads in-memory counters only, no channel layer call.
    """

    return JsonResponse(
        {
            "status": "ok",
            "ts": int(time.time()),
            "instance_id": os.environ.get("INSTANCE_ID", "unknown-instance"),
            "sessions": len(collaboration_hub.registry),
        }
    )
