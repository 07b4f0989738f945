"""Test logging configuration."""

import logging
from pathlib import Path

import structlog
from structlog.testing import LogCapture

from ngrok_bot.common.logging import get_logger, mask_secrets, setup_logging


class TestLogging:
    """Test logging functionality."""

    def setup_method(self) -> None:
        """Reset structlog and root handlers before each test."""
        structlog.reset_defaults()
        root_logger = logging.getLogger()
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    def test_setup_logging_with_level(self) -> None:
        setup_logging(level="DEBUG")

        assert logging.getLogger().level == logging.DEBUG

    def test_level_is_case_insensitive(self) -> None:
        setup_logging(level="warning")

        assert logging.getLogger().level == logging.WARNING

    def test_httpx_request_logs_quieted(self) -> None:
        """Polling requests should not flood INFO output"""
        setup_logging(level="INFO")

        assert logging.getLogger("httpx").level == logging.WARNING

    def test_httpx_follows_stricter_level(self) -> None:
        setup_logging(level="ERROR")

        assert logging.getLogger("httpx").level == logging.ERROR

    def test_setup_replaces_handlers(self) -> None:
        """Repeated setup should not duplicate console output"""
        setup_logging()
        setup_logging()

        assert len(logging.getLogger().handlers) == 1

    def test_setup_logging_json_format(self) -> None:
        setup_logging(json_format=True)
        logger = get_logger("test")

        cap = LogCapture()
        structlog.configure(processors=[cap])

        logger.info("Ngrok started!", port=3000)

        assert len(cap.entries) == 1
        assert cap.entries[0]["event"] == "Ngrok started!"
        assert cap.entries[0]["port"] == 3000

    def test_setup_logging_with_file(self, tmp_path: Path) -> None:
        """Log file receives stdlib records"""
        log_file = tmp_path / "bot.log"
        setup_logging(log_file=str(log_file))

        logging.getLogger("test_file").info("test message")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.exists()
        assert "test message" in log_file.read_text()

    def test_get_logger(self) -> None:
        setup_logging()
        logger = get_logger("ngrok_bot.test")

        assert hasattr(logger, "info")
        assert hasattr(logger, "error")

    def test_bot_key_masked_in_output(self, capsys) -> None:
        """Bot key passed as context never reaches the output in clear text"""
        setup_logging(json_format=True)

        get_logger("ngrok_bot.test").info("Configuration", bot_key="123456:abcdef")

        output = capsys.readouterr().out
        assert "123456:abcdef" not in output
        assert "*********cdef" in output

    def test_mask_secrets_processor(self) -> None:
        event_dict = {"event": "Configuration", "bot_key": "123456:abcdef", "port": 22}

        masked = mask_secrets(None, "info", event_dict)

        assert masked == {
            "event": "Configuration",
            "bot_key": "*********cdef",
            "port": 22,
        }
