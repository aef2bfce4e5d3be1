import logging
import os
import sys

from pythonjsonlogger import jsonlogger

_UVICORN_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error")


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configures structured JSON logging for the gateway.

    Every record is rendered as one JSON object on stdout with timestamp,
    level, logger name and message, plus the ddtrace correlation ids when
    tracing is enabled. Anything passed through ``extra=`` is merged into the
    object. The root logger and the uvicorn loggers share a single handler so
    access logs and application logs have the same shape.

    The level comes from ``level`` or the ``LOG_LEVEL`` environment variable
    and defaults to INFO.

    Returns:
        logging.Logger: The configured root logger instance.
    """
    log_level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    formatter = jsonlogger.JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(dd.trace_id)s %(dd.span_id)s"
    )
    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [stream_handler]

    for logger_name in _UVICORN_LOGGERS:
        u_logger = logging.getLogger(logger_name)
        u_logger.setLevel(log_level)
        u_logger.handlers = [stream_handler]
        u_logger.propagate = False

    return root_logger
