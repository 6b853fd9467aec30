"""
Tests for the logging setup.
"""

import logging

import structlog

from utilities.logger import setup_logging


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "logs" / "api.log"
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)

    try:
        setup_logging(log_level="warning", log_format="json", log_file=str(log_file))
        assert log_file.parent.is_dir()
        assert root_logger.level == logging.WARNING
        file_handlers = [
            handler for handler in root_logger.handlers
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(log_file)
        ]
        assert len(file_handlers) == 1
    finally:
        for handler in root_logger.handlers[:]:
            if handler not in handlers_before:
                root_logger.removeHandler(handler)
                handler.close()
        structlog.reset_defaults()


def test_debug_adds_callsite_parameters():
    try:
        setup_logging(log_level="INFO", log_format="console", debug=True)
        processors = structlog.get_config()["processors"]
        assert any(isinstance(p, structlog.processors.CallsiteParameterAdder) for p in processors)
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    finally:
        structlog.reset_defaults()


def test_repeated_setup_keeps_single_file_handler(tmp_path):
    log_file = tmp_path / "api.log"
    root_logger = logging.getLogger()
    handlers_before = list(root_logger.handlers)

    try:
        setup_logging(log_level="INFO", log_file=str(log_file))
        setup_logging(log_level="ERROR", log_file=str(log_file))

        file_handlers = [
            handler for handler in root_logger.handlers
            if isinstance(handler, logging.FileHandler) and handler.baseFilename == str(log_file)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.ERROR
    finally:
        for handler in root_logger.handlers[:]:
            if handler not in handlers_before:
                root_logger.removeHandler(handler)
                handler.close()
        structlog.reset_defaults()
