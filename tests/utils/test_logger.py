"""Tests for logging setup."""

import logging

from loguru import logger

from connectgraph.utils.logger import get_logger, setup_logging


class TestSetupLogging:
    """Sinks and stdlib interception."""

    def test_file_sink_creates_log_dir(self, tmp_path):
        log_dir = tmp_path / "logs"

        setup_logging(level="DEBUG", log_to_file=True, log_dir=str(log_dir))
        try:
            get_logger(__name__).info("file sink ready")
        finally:
            setup_logging(level="INFO", log_to_file=False)

        assert log_dir.is_dir()

    def test_stdlib_records_forwarded(self):
        setup_logging(level="DEBUG", log_to_file=False)
        messages = []
        sink_id = logger.add(messages.append, level="DEBUG", format="{message}")

        try:
            logging.getLogger("uvicorn.error").warning("server up")
        finally:
            logger.remove(sink_id)

        assert any("server up" in message for message in messages)

    def test_interception_can_be_disabled(self):
        logging.getLogger("aiosqlite").handlers = []

        setup_logging(level="INFO", log_to_file=False, intercept_stdlib=False)

        assert logging.getLogger("aiosqlite").handlers == []
