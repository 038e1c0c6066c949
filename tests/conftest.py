import pytest
from loguru import logger

from oapi_codec import logging as codec_logging
from oapi_codec.config import get_settings


@pytest.fixture(autouse=True)
def _reset_runtime_state():
    """Drop sinks added by setup_logging and cached settings after each test."""
    yield
    if codec_logging._HANDLER_ID is not None:
        logger.remove(codec_logging._HANDLER_ID)
        codec_logging._HANDLER_ID = None
    logger.disable("oapi_codec")
    get_settings.cache_clear()
