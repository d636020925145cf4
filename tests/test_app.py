"""Tests for medibot.app entry point."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from medibot import app


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_creates_log_dir(self, tmp_path, restore_root_logger):
        log_dir = tmp_path / "logs"
        app.setup_logging(log_dir)

        assert log_dir.is_dir()
        assert any(isinstance(h, RotatingFileHandler) for h in restore_root_logger.handlers)
        assert restore_root_logger.level == logging.INFO

    def test_debug_level(self, tmp_path, restore_root_logger):
        app.setup_logging(tmp_path / "logs", debug=True)
        assert restore_root_logger.level == logging.DEBUG

    def test_debug_from_env(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setenv("MEDIBOT_DEBUG", "1")
        app.setup_logging(tmp_path / "logs")
        assert restore_root_logger.level == logging.DEBUG


class TestMain:
    """Tests for main()."""

    def test_exits_with_cli_code(self, tmp_path, monkeypatch, restore_root_logger):
        monkeypatch.setattr(app, "setup_logging", lambda: logging.getLogger("medibot.app"))
        monkeypatch.setattr(app, "run_cli", lambda: 3)

        with pytest.raises(SystemExit) as exc_info:
            app.main()
        assert exc_info.value.code == 3
