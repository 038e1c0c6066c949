"""Loguru configuration.

The package disables its own log namespace on import so that library users
see nothing unless they opt in. ``setup_logging`` opts in.
"""

import sys

from loguru import logger

from oapi_codec.config import CodecSettings

_HANDLER_ID: int | None = None


def setup_logging(settings: CodecSettings) -> None:
    """Enable oapi-codec logging with a stderr sink at the configured level.

    Replaces every existing sink, including loguru's default one, so each
    record is written once. Calling it again replaces the previous sink.
    """
    global _HANDLER_ID

    logger.remove()
    _HANDLER_ID = logger.add(
        sys.stderr,
        level=settings.log_level,
        serialize=settings.log_json,
        backtrace=False,
        diagnose=False,
        filter="oapi_codec",
    )
    logger.enable("oapi_codec")
    logger.debug("Logging configured at {} (json={})", settings.log_level, settings.log_json)
