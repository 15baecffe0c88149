import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class RealtimeConfig(AppConfig):
    name = "realtime"

    def ready(self):
        from codeinterview.applib.config import config

        logger.info(
            "Realtime collaboration ready (grace=%ss, code size limit %s)",
            config.SESSION_GRACE_SECONDS,
            config.MAX_CODE_SIZE_BYTES if config.ENFORCE_CODE_SIZE_LIMIT else "off",
        )
