import logging
from unittest.mock import patch

import pytest

from procdom.logic.utils.logging_config import setup_basic_logging


@pytest.fixture
def clean_logger():
    """Fixture to get a clean logger and reset it after the test."""
    logger = logging.getLogger("test_logger")
    original_handlers = logger.handlers[:]
    original_level = logger.level

    logger.handlers = []
    logger.setLevel(logging.NOTSET)

    yield logger

    for handler in logger.handlers:
        handler.close()
    logger.handlers = original_handlers
    logger.setLevel(original_level)


@patch("procdom.logic.utils.logging_config.get_env_var", return_value=None)
class TestSetupBasicLogging:
    def test_console_logging_only(self, mock_get_env, clean_logger):
        log_file = setup_basic_logging(logger_instance=clean_logger)
        assert log_file is None
        assert len(clean_logger.handlers) == 1
        assert isinstance(clean_logger.handlers[0], logging.StreamHandler)
        assert clean_logger.level == logging.INFO

    def test_file_logging_creates_file(self, mock_get_env, clean_logger, tmp_path):
        log_dir = tmp_path / "logs"
        log_file = setup_basic_logging(
            logger_instance=clean_logger, console_output=False, log_to_file=True, log_dir=str(log_dir)
        )

        assert log_file.parent == log_dir
        assert log_file.name.startswith("procdom_")
        assert len(clean_logger.handlers) == 1
        assert isinstance(clean_logger.handlers[0], logging.FileHandler)

        clean_logger.info("check=pmns outcome=pass")
        clean_logger.handlers[0].flush()
        assert "check=pmns outcome=pass" in log_file.read_text()

    def test_existing_handlers_replaced(self, mock_get_env, clean_logger):
        clean_logger.addHandler(logging.NullHandler())
        setup_basic_logging(logger_instance=clean_logger, level=logging.DEBUG, prefix="[verify]")
        assert len(clean_logger.handlers) == 1
        assert clean_logger.level == logging.DEBUG
        assert clean_logger.handlers[0].formatter._fmt.startswith("[verify] ")

    def test_env_level_overrides(self, mock_get_env, clean_logger):
        mock_get_env.return_value = "warning"
        setup_basic_logging(logger_instance=clean_logger, level=logging.DEBUG)
        assert clean_logger.level == logging.WARNING
