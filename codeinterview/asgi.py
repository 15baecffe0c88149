"""
ASGI config for codeinterview project.

It exposes the ASGI callable as a module-level variable named ``application``.

For more information on this file, see
https://docs.djangoproject.com/en/5.0/howto/deployment/asgi/
"""

import os

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "codeinterview.settings")

from channels.routing import ProtocolTypeRouter, URLRouter
from channels.security.websocket import OriginValidator
from django.conf import settings
from django.core.asgi import get_asgi_application

# Standard Django ASGI application for HTTP; must be built before importing consumers.
django_asgi_app = get_asgi_application()

from codeinterview.lifespan import LifespanApp  # noqa: E402
from codeinterview.routing import websocket_urlpatterns  # noqa: E402
from realtime.hub import collaboration_hub  # noqa: E402

# Channels router for WebSockets.
#
# When DEBUG is off, handshakes must come from one of WEBSOCKET_ALLOWED_ORIGINS
# (the editor front-end). There is no authentication: anyone holding a session
# id can join it.
websocket_app = URLRouter(websocket_urlpatterns)
if not settings.DEBUG:
    websocket_app = OriginValidator(websocket_app, settings.WEBSOCKET_ALLOWED_ORIGINS)

application = ProtocolTypeRouter(
    {
        "http": django_asgi_app,
        "websocket": websocket_app,
        "lifespan": LifespanApp(collaboration_hub),
    }
)
