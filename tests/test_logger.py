# tests/test_logger.py
"""Tests for the logging setup."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import logging
from unittest.mock import patch
from parkki.utils import logger as logger_module
from parkki.utils.logger import _file_handler, configure_logging, get_logger


class TestFileHandler:
    def test_writes_into_log_dir(self, tmp_path):
        handler = _file_handler(str(tmp_path / "logs"), "events.log")
        try:
            assert handler.baseFilename == str(tmp_path / "logs" / "events.log")
            assert handler.maxBytes == 5 * 1024 * 1024
        finally:
            handler.close()

    def test_unwritable_dir_disables_file_logging(self):
        with patch("parkki.utils.logger.os.makedirs", side_effect=PermissionError("denied")):
            assert _file_handler("/nope", "events.log") is None


class TestConfigureLogging:
    def test_handlers_attached_only_once(self):
        root = logging.getLogger()
        before = list(root.handlers)
        level = root.level

        with patch.object(logger_module, "_configured", False), \
                patch("parkki.utils.logger._file_handler", return_value=None):
            configure_logging(level="debug")
            configure_logging(level="debug")
            added = [h for h in root.handlers if h not in before]

        try:
            assert len(added) == 1
            assert added[0].level == logging.DEBUG
            assert root.level == logging.DEBUG
        finally:
            for h in added:
                root.removeHandler(h)
            root.setLevel(level)

    def test_get_logger_returns_named_logger(self):
        assert get_logger("parkki.test").name == "parkki.test"
