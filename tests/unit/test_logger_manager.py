"""LoggerManagerの単体テスト"""

import json
import logging
import sys
from unittest.mock import patch

import pytest

from example_com_client.configuration.config_manager import ConfigManager
from example_com_client.utils.logger_manager import (
    ROOT_LOGGER_NAME,
    JSONLogFormatter,
    LoggerManager,
)


@pytest.fixture(autouse=True)
def reset_singleton():
    """各テストの前後でシングルトンをリセット"""
    LoggerManager.reset()
    yield
    LoggerManager.reset()


@pytest.mark.unit
class TestLoggerManager:
    """LoggerManagerクラスのテスト"""

    def test_singleton_pattern(self, tmp_path):
        manager1 = LoggerManager(log_dir=tmp_path)
        manager2 = LoggerManager(log_dir=tmp_path / "other")

        assert manager1 is manager2
        assert manager2.log_dir == tmp_path

    def test_handlers_are_installed(self, tmp_path):
        LoggerManager(log_dir=tmp_path, log_level="INFO")

        handlers = logging.getLogger(ROOT_LOGGER_NAME).handlers
        assert len(handlers) == 3
        assert (tmp_path / "client.log").exists()
        assert (tmp_path / "errors.log").exists()

    def test_debug_mode_forces_debug_level(self, tmp_path):
        manager = LoggerManager(log_dir=tmp_path, log_level="WARNING", debug_mode=True)

        assert manager.log_level == "DEBUG"

    def test_env_defaults(self, tmp_path):
        env = {
            "EXAMPLE_COM_CLIENT_ENV": "production",
            "EXAMPLE_COM_CLIENT_LOG_DIR": str(tmp_path),
        }
        with patch.dict("os.environ", env, clear=True):
            manager = LoggerManager()

        assert manager.env == "production"
        assert manager.log_dir == tmp_path
        assert manager.log_level == "WARNING"

    def test_get_logger_prefix(self):
        assert LoggerManager.get_logger("tests").name == "example_com_client.tests"
        assert (
            LoggerManager.get_logger("example_com_client.core").name == "example_com_client.core"
        )

    def test_file_log_is_json(self, tmp_path):
        LoggerManager(log_dir=tmp_path)
        logger = LoggerManager.get_logger("test_module")
        logger.warning("request failed", extra={"status_code": 500})

        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        lines = (tmp_path / "client.log").read_text(encoding="utf-8").strip().splitlines()
        record = json.loads(lines[-1])
        assert record["message"] == "request failed"
        assert record["level"] == "WARNING"
        assert record["status_code"] == 500

    @pytest.mark.asyncio
    async def test_from_config_sets_console_level(self, tmp_path):
        """設定ファイルのgeneral.log_levelがコンソールに反映される"""
        config_path = tmp_path / "config.yaml"
        config_path.write_text("general:\n  log_level: ERROR\n", encoding="utf-8")

        with patch.dict("os.environ", {}, clear=True):
            config = ConfigManager(config_path)
            await config.initialize()
            manager = LoggerManager.from_config(config, log_dir=tmp_path / "logs")

        console = [
            handler
            for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers
            if type(handler) is logging.StreamHandler
        ]
        assert manager.log_level == "ERROR"
        assert len(console) == 1
        assert console[0].level == logging.ERROR


@pytest.mark.unit
class TestJSONLogFormatter:
    """JSONLogFormatterのテスト"""

    def _make_record(self, **kwargs):
        return logging.LogRecord(
            name="example_com_client.test",
            level=logging.ERROR,
            pathname=__file__,
            lineno=10,
            msg="failed: %s",
            args=("boom",),
            exc_info=kwargs.get("exc_info"),
        )

    def test_basic_fields(self):
        record = self._make_record()
        record.error_code = "E1000"

        data = json.loads(JSONLogFormatter().format(record))

        assert data["message"] == "failed: boom"
        assert data["logger"] == "example_com_client.test"
        assert data["error_code"] == "E1000"
        assert data["timestamp"].endswith("Z")

    def test_exception_info(self):
        try:
            raise ValueError("bad value")
        except ValueError:
            record = self._make_record(exc_info=sys.exc_info())

        data = json.loads(JSONLogFormatter().format(record))

        assert data["exception"]["type"] == "ValueError"
        assert data["exception"]["message"] == "bad value"
