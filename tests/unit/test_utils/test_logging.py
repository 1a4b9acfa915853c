"""Tests for logging setup."""

from __future__ import annotations

import logging

from hellosvc.config.settings import LoggingConfig
from hellosvc.utils.logging import LOGGER_NAMES, setup_logging


def _reset() -> None:
    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)


class TestSetupLogging:
    def teardown_method(self) -> None:
        _reset()

    def test_defaults(self) -> None:
        setup_logging()
        for name in LOGGER_NAMES:
            logger = logging.getLogger(name)
            assert logger.level == logging.INFO
            assert len(logger.handlers) == 1

    def test_repeated_calls_do_not_stack_handlers(self) -> None:
        setup_logging(LoggingConfig(level="DEBUG"))
        setup_logging(LoggingConfig(level="DEBUG"))
        assert len(logging.getLogger("hellosvc").handlers) == 1
        assert logging.getLogger("uvicorn").level == logging.DEBUG

    def test_file_handler(self, tmp_path) -> None:
        path = tmp_path / "hellosvc.log"
        setup_logging(LoggingConfig(file=str(path), format="%(name)s %(message)s"))
        logging.getLogger("hellosvc.server").info("listening on port: %s", 8080)
        for handler in logging.getLogger("hellosvc").handlers:
            handler.flush()
        assert "hellosvc.server listening on port: 8080" in path.read_text()

    def test_unknown_level_falls_back_to_info(self) -> None:
        setup_logging(LoggingConfig(level="chatty"))
        assert logging.getLogger("hellosvc").level == logging.INFO
