"""Tests for logging setup."""

import logging

import pytest

from fxsim.logging_config import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_levels = {name: logging.getLogger(name).level
                    for name in ('', 'fxsim.engine.evaluator', 'fxsim.engine.controller')}
    yield
    root.handlers = saved_handlers
    for name, level in saved_levels.items():
        logging.getLogger(name).setLevel(level)


@pytest.mark.unit
class TestSetupLogging:

    def test_json_config_levels(self, restore_logging):
        setup_logging()
        assert logging.getLogger('fxsim.engine.evaluator').level == logging.WARNING
        assert logging.getLogger('fxsim.engine.controller').level == logging.INFO

    def test_verbose_override(self, restore_logging):
        setup_logging(level=logging.DEBUG)
        assert logging.getLogger().level == logging.DEBUG
        assert logging.getLogger('fxsim.engine.evaluator').level == logging.DEBUG

    def test_missing_config_falls_back(self, restore_logging, tmp_path):
        setup_logging(config_path=str(tmp_path / "none.json"))
        assert logging.getLogger('fxsim.engine.evaluator').level == logging.WARNING

    def test_log_file_with_json_config(self, restore_logging, tmp_path):
        log_file = tmp_path / "fxsim.log"
        setup_logging(log_file=str(log_file))

        file_handlers = [h for h in logging.getLogger().handlers
                         if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        logging.getLogger('fxsim.test').info("written to file")
        file_handlers[0].flush()
        file_handlers[0].close()
        assert "written to file" in log_file.read_text()
