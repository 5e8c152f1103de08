"""
ログ管理モジュール

example_com_client配下のロガーに統一されたハンドラーを設定する。
ライブラリとして組み込まれる場合は呼び出し側のlogging設定に従い、
このモジュールは明示的にLoggerManagerを生成したときだけ有効になる。
"""

import json
import logging
import logging.handlers
import os
import tempfile
import traceback
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from example_com_client.configuration.settings import (
    ENV_LOG_DIR,
    ENV_LOG_LEVEL,
    ENV_RUNTIME,
    LOGS_DIR,
)

if TYPE_CHECKING:
    from example_com_client.configuration.config_manager import ConfigManager

ROOT_LOGGER_NAME = "example_com_client"


class LoggerManager:
    """
    統一されたログ管理クラス（シングルトン）

    環境変数:
        EXAMPLE_COM_CLIENT_ENV: 実行環境 (development/test/production)
        EXAMPLE_COM_CLIENT_LOG_LEVEL: コンソールのログレベル
        EXAMPLE_COM_CLIENT_LOG_DIR: ログ出力先ディレクトリ

    Attributes:
        log_dir: ログファイルの出力ディレクトリ
        log_level: コンソールのログレベル
        debug_mode: デバッグモードフラグ
    """

    _instance: Optional["LoggerManager"] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        log_level: Optional[str] = None,
        debug_mode: bool = False,
    ):
        # 2回目以降の生成では設定を変更しない
        if LoggerManager._initialized:
            return

        env = os.getenv(ENV_RUNTIME, "development")

        self.log_dir = Path(log_dir) if log_dir is not None else self._get_default_log_dir(env)
        if log_level is None:
            log_level = self._get_default_log_level(env)

        self.log_level = "DEBUG" if debug_mode else log_level.upper()
        self.debug_mode = debug_mode
        self.env = env

        self.log_dir.mkdir(parents=True, exist_ok=True)
        self._setup_root_logger()

        LoggerManager._initialized = True

        self.get_logger("LoggerManager").info(
            "LoggerManager initialized",
            extra={"env": self.env, "log_dir": str(self.log_dir), "log_level": self.log_level},
        )

    def _get_default_log_dir(self, env: str) -> Path:
        if env_dir := os.getenv(ENV_LOG_DIR):
            return Path(env_dir)

        if env == "production":
            return Path.home() / ".example_com_client" / "logs"
        elif env == "test":
            return Path(tempfile.gettempdir()) / "example_com_client_test_logs"
        return LOGS_DIR

    def _get_default_log_level(self, env: str) -> str:
        if env_level := os.getenv(ENV_LOG_LEVEL):
            return env_level

        if env == "production":
            return "WARNING"
        elif env == "test":
            return "INFO"
        return "DEBUG"

    def _setup_root_logger(self):
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.setLevel(logging.DEBUG)  # ハンドラーで制御

        # 既存のハンドラーをクリア（ファイルハンドラーは閉じる）
        for handler in list(root_logger.handlers):
            handler.close()
        root_logger.handlers.clear()

        root_logger.addHandler(self._create_console_handler())
        root_logger.addHandler(
            self._create_file_handler(self.log_dir / "client.log", logging.DEBUG)
        )
        root_logger.addHandler(
            self._create_file_handler(self.log_dir / "errors.log", logging.ERROR)
        )

    def _create_console_handler(self) -> logging.StreamHandler:
        handler = logging.StreamHandler()
        handler.setLevel(getattr(logging, self.log_level, logging.INFO))

        if self.env == "development" or self.debug_mode:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        else:
            formatter = logging.Formatter("%(levelname)s - %(message)s")

        handler.setFormatter(formatter)
        return handler

    def _create_file_handler(
        self, log_file: Path, level: int
    ) -> logging.handlers.RotatingFileHandler:
        handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=10_485_760, backupCount=5, encoding="utf-8"  # 10MB
        )
        handler.setLevel(level)
        handler.setFormatter(JSONLogFormatter())
        return handler

    @classmethod
    def from_config(cls, config: "ConfigManager", **kwargs) -> "LoggerManager":
        """ConfigManagerのgeneral.log_levelをコンソールのログレベルとして生成

        Args:
            config: 初期化済みのConfigManager
            **kwargs: log_dir, debug_modeなど__init__に渡す引数
        """
        return cls(log_level=config.get("general.log_level"), **kwargs)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """
        example_com_client配下のロガーを取得

        Args:
            name: ロガー名（通常は__name__を使用）
        """
        if not name.startswith(ROOT_LOGGER_NAME):
            name = f"{ROOT_LOGGER_NAME}.{name}"
        return logging.getLogger(name)

    @classmethod
    def reset(cls):
        """シングルトンとハンドラーをリセット（テスト用）"""
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        for handler in list(root_logger.handlers):
            handler.close()
        root_logger.handlers.clear()
        cls._instance = None
        cls._initialized = False


class JSONLogFormatter(logging.Formatter):
    """
    JSON形式でログを出力するフォーマッター

    extraで渡されたフィールドも出力に含める。
    """

    STANDARD_FIELDS = {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
    }

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_FIELDS and not key.startswith("_"):
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": traceback.format_exception(*record.exc_info),
            }

        return json.dumps(log_data, ensure_ascii=False, default=str)
