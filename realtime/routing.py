from django.urls import re_path

from .consumers import CollabConsumer


websocket_urlpatterns = [
    re_path(r"^ws/collab/$", CollabConsumer.as_asgi()),
]
