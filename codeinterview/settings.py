"""
Settings for the collaborative coding interview server (Django + Channels, ASGI).

- Environment-based configuration (optionally loaded from a `.env` file)
- InMemoryChannelLayer by default; RedisChannelLayer when REDIS_URL is set
- No database: all session state lives in the realtime app's in-memory registry
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

# Local dev can keep env vars in a `.env` file; real environment variables win.
load_dotenv()


BASE_DIR = Path(__file__).resolve().parent.parent


def _env(name: str, default: str | None = None) -> str | None:
    v = os.environ.get(name)
    return v if v not in (None, "") else default


def _env_bool(name: str, default: bool = False) -> bool:
    v = _env(name)
    if v is None:
        return default
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def _env_csv(name: str, default: str = "") -> List[str]:
    raw = _env(name, default) or ""
    return [x.strip() for x in raw.split(",") if x.strip()]


DEBUG = _env_bool("DJANGO_DEBUG", default=False)

SECRET_KEY = _env("DJANGO_SECRET_KEY", "dev-insecure-secret-key-change-me")
if not DEBUG and (not SECRET_KEY or SECRET_KEY.startswith("dev-insecure-")):
    raise RuntimeError("DJANGO_SECRET_KEY must be set in production")

ALLOWED_HOSTS = _env_csv("DJANGO_ALLOWED_HOSTS", default="localhost,127.0.0.1")

# CORS: the editor front-end (Vite dev server on :5173 by default)
CORS_ALLOWED_ORIGINS = _env_csv("CORS_ALLOWED_ORIGINS", default="http://localhost:5173,http://127.0.0.1:5173")

# WebSocket handshakes are checked against the same origins when DEBUG is off.
WEBSOCKET_ALLOWED_ORIGINS = _env_csv("WEBSOCKET_ALLOWED_ORIGINS", default=",".join(CORS_ALLOWED_ORIGINS))

# Behind a proxy, Django must respect X-Forwarded-* headers.
USE_X_FORWARDED_HOST = True
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = _env_bool("DJANGO_SECURE_SSL_REDIRECT", default=False)


INSTALLED_APPS = [
    "corsheaders",
    # Channels must be installed to enable ASGI + websocket routing.
    "channels",
    "realtime.apps.RealtimeConfig",
]

# HealthCheckAllowHttp first so /health/ is never redirected or blocked.
MIDDLEWARE = [
    "codeinterview.middleware.HealthCheckAllowHttpMiddleware",
    "corsheaders.middleware.CorsMiddleware",
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
]

ROOT_URLCONF = "codeinterview.urls"

ASGI_APPLICATION = "codeinterview.asgi.application"

# Sessions are never persisted.
DATABASES = {}

LANGUAGE_CODE = "en-us"
TIME_ZONE = "UTC"
USE_I18N = False
USE_TZ = True


#
# Channels configuration
#
# The session registry is process-local, so the in-memory layer is enough for a
# single instance. REDIS_URL switches the broadcast transport to Redis.
#
REDIS_URL = _env("REDIS_URL", None)
if REDIS_URL:
    CHANNEL_LAYERS = {
        "default": {
            "BACKEND": "channels_redis.core.RedisChannelLayer",
            "CONFIG": {
                # `hosts` accepts redis:// URLs.
                "hosts": [REDIS_URL],
                "capacity": int(_env("CHANNEL_LAYER_CAPACITY", "1000") or "1000"),
                "expiry": int(_env("CHANNEL_LAYER_EXPIRY", "60") or "60"),
            },
        }
    }
else:
    CHANNEL_LAYERS = {
        "default": {
            "BACKEND": "channels.layers.InMemoryChannelLayer",
            "CONFIG": {
                "capacity": int(_env("CHANNEL_LAYER_CAPACITY", "1000") or "1000"),
                "expiry": int(_env("CHANNEL_LAYER_EXPIRY", "60") or "60"),
            },
        }
    }


LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {"plain": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"}},
    "handlers": {"console": {"class": "logging.StreamHandler", "formatter": "plain"}},
    "root": {"handlers": ["console"], "level": _env("DJANGO_LOG_LEVEL", "INFO") or "INFO"},
}
