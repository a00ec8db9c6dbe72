"""
Tests for loguru setup.
"""

import logging

import pytest
from loguru import logger

from src.utils.logger import get_logger, setup_logging


@pytest.fixture
def captured():
    messages = []
    setup_logging(level="DEBUG", log_to_file=False)
    sink_id = logger.add(messages.append, level="DEBUG", format="{message}")
    yield messages
    logger.remove(sink_id)


@pytest.mark.unit
class TestLogging:
    """Test logging setup and stdlib interception."""

    def test_get_logger_logs(self, captured):
        get_logger(__name__).info("note created")

        assert any("note created" in message for message in captured)

    def test_uvicorn_records_forwarded(self, captured):
        logging.getLogger("uvicorn.error").warning("server starting")

        assert any("server starting" in message for message in captured)

    def test_file_sink_creates_directory(self, tmp_path):
        log_dir = tmp_path / "logs"

        setup_logging(level="INFO", log_to_file=True, log_dir=str(log_dir))
        get_logger(__name__).info("to file")
        logger.complete()

        assert log_dir.is_dir()
        setup_logging(level="INFO", log_to_file=False)
