import logging

import structlog


def configure_logging(level: str | None = None):
    if level is None:
        from .config import settings

        level = settings.log_level
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format="%(message)s")
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
    )

    # httpx logs every request at INFO; keep it for debugging only
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str | None = None):
    if not structlog.is_configured():
        configure_logging()
    return structlog.get_logger(name)
