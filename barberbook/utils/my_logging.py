# barberbook/utils/my_logging.py
"""Logging configuration shared by the API process and the Celery worker"""
import logging
import sys
from barberbook.config.settings import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at INFO even in verbose mode
ALWAYS_WARNING = ["twilio.http_client", "kombu", "amqp"]

NOISY_LOGGERS = [
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic",
    "celery",
    "uvicorn",
    "uvicorn.error",
    "uvicorn.access",
]


def setup_logging(verbose=True):
    """
    Configure root logging once per process.
    verbose=False keeps only warnings from the app and errors from libraries.
    """
    settings = get_settings()

    if verbose:
        level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )

    for name in ALWAYS_WARNING:
        logging.getLogger(name).setLevel(logging.WARNING)

    if not verbose:
        for name in NOISY_LOGGERS:
            logger = logging.getLogger(name)
            logger.setLevel(logging.ERROR)
            logger.propagate = False
