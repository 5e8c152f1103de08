"""設定管理マネージャー

YAMLベースの設定ファイル管理とバリデーション機能を提供。
デフォルト値 < 設定ファイル < 環境変数 の順で優先される。
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from example_com_client.configuration.settings import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_USER_AGENT,
    ENV_PREFIX,
    LOG_LEVELS,
    get_config_path,
)
from example_com_client.core.base import ClientComponent, ComponentState
from example_com_client.core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigManager(ClientComponent):
    """設定管理マネージャー

    - 設定ファイルの読み込みと保存
    - 環境変数によるオーバーライド
    - 設定値のバリデーション
    - デフォルト値の提供

    Attributes:
        config_path: 設定ファイルのパス
        _config: 現在の設定値
        _defaults: デフォルト設定値
    """

    # 環境変数でオーバーライド可能なセクション
    SECTIONS = ("general", "transport")

    def __init__(self, config_path: Optional[Path] = None):
        """初期化

        Args:
            config_path: 設定ファイルのパス（Noneの場合は環境変数またはデフォルトパス）
        """
        super().__init__()
        self.config_path = Path(config_path) if config_path is not None else get_config_path()
        self._defaults = self._get_default_config()
        self._config: Dict[str, Any] = copy.deepcopy(self._defaults)

        logger.debug(f"ConfigManager created with path: {self.config_path}")

    async def initialize(self) -> None:
        """設定ファイルを読み込み、環境変数でオーバーライドする

        Raises:
            ConfigurationError: 設定ファイルの読み込みに失敗した場合
        """
        self._set_state(ComponentState.INITIALIZING)

        try:
            self._config = self.load_config(self.config_path)
            self._apply_env_overrides()
        except ConfigurationError as e:
            self._handle_error(e)
            raise

        errors = self.validate_config(self._config)
        if errors:
            logger.warning(f"Configuration validation warnings: {errors}")

        self._set_state(ComponentState.READY)
        logger.info("ConfigManager initialization completed")

    async def cleanup(self) -> None:
        self._set_state(ComponentState.TERMINATING)
        self._set_state(ComponentState.TERMINATED)

    def get(self, key: str, default: Any = None) -> Any:
        """設定値を取得

        ドット記法で階層的なキーを指定可能。
        例: "transport.read_timeout" → config["transport"]["read_timeout"]
        """
        value: Any = self._config
        for k in key.split("."):
            if not isinstance(value, dict) or value.get(k) is None:
                return default
            value = value[k]
        return value

    def set(self, key: str, value: Any) -> None:
        """設定値を設定（存在しない階層は作成される）"""
        keys = key.split(".")
        config = self._config

        for k in keys[:-1]:
            if not isinstance(config.get(k), dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        logger.debug(f"Configuration updated: {key} = {value}")

    def get_all(self) -> Dict[str, Any]:
        """全設定の深いコピーを取得"""
        return copy.deepcopy(self._config)

    def load_config(self, config_path: Path) -> Dict[str, Any]:
        """設定ファイルを読み込み、デフォルト値とマージする

        ファイルが存在しない場合はデフォルト値のみを返す。

        Raises:
            ConfigurationError: ファイル読み込み、パースエラー（E0001）
        """
        if not config_path.exists():
            logger.warning(f"Config file not found: {config_path}, using defaults")
            return copy.deepcopy(self._defaults)

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse YAML config file: {e}",
                config_file=str(config_path),
                cause=e,
            )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to load config file: {e}", config_file=str(config_path), cause=e
            )

        if not isinstance(config, dict):
            raise ConfigurationError(
                "Config file must contain a mapping at the top level",
                config_file=str(config_path),
            )

        logger.info(f"Configuration loaded from {config_path}")
        return self._deep_merge(copy.deepcopy(self._defaults), config)

    def save_config(self, config: Dict[str, Any], config_path: Optional[Path] = None) -> None:
        """設定をファイルに保存

        Raises:
            ConfigurationError: ファイル保存エラー（E0003）
        """
        config_path = config_path or self.config_path

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(config_path, "w", encoding="utf-8") as f:
                yaml.safe_dump(
                    config, f, default_flow_style=False, allow_unicode=True, sort_keys=False
                )
        except OSError as e:
            raise ConfigurationError(
                f"Failed to save config file: {e}",
                config_file=str(config_path),
                error_code="E0003",
                cause=e,
            )

        logger.info(f"Configuration saved to {config_path}")

    def validate_config(self, config: Dict[str, Any]) -> List[str]:
        """設定値のバリデーション

        Returns:
            List[str]: エラーメッセージのリスト（空の場合は有効）
        """
        errors = []

        log_level = config.get("general", {}).get("log_level")
        if log_level is not None and str(log_level).upper() not in LOG_LEVELS:
            errors.append(f"Invalid log level: {log_level}")

        transport = config.get("transport", {})
        for key in ("connect_timeout", "read_timeout"):
            value = transport.get(key)
            if value is None:
                continue
            if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
                errors.append(f"Invalid transport.{key}: {value} (must be > 0)")

        proxy = transport.get("proxy")
        if proxy and not str(proxy).startswith(("http://", "https://")):
            errors.append(f"Invalid proxy URL: {proxy} (must be http:// or https://)")

        return errors

    def _apply_env_overrides(self) -> None:
        """環境変数による設定のオーバーライド

        EXAMPLE_COM_CLIENT_<SECTION>_<KEY> を config[section][key] にマッピング。
        例: EXAMPLE_COM_CLIENT_TRANSPORT_READ_TIMEOUT → config["transport"]["read_timeout"]
        """
        for env_key, env_value in os.environ.items():
            if not env_key.startswith(ENV_PREFIX):
                continue

            section, _, key = env_key[len(ENV_PREFIX) :].lower().partition("_")
            if section not in self.SECTIONS or not key:
                continue

            value = self._parse_env_value(env_value)
            self.set(f"{section}.{key}", value)
            logger.debug(f"Environment override: {section}.{key} = {value}")

    def _parse_env_value(self, value: str) -> Any:
        """環境変数の値を適切な型に変換"""
        if value.lower() in ["true", "yes"]:
            return True
        elif value.lower() in ["false", "no"]:
            return False

        try:
            if "." in value:
                return float(value)
            return int(value)
        except ValueError:
            pass

        return value

    def _deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """辞書を再帰的にマージ"""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result

    def _get_default_config(self) -> Dict[str, Any]:
        return {
            "general": {
                "log_level": DEFAULT_LOG_LEVEL,
            },
            "transport": {
                "connect_timeout": DEFAULT_CONNECT_TIMEOUT,
                "read_timeout": DEFAULT_READ_TIMEOUT,
                "proxy": None,
                "user_agent": DEFAULT_USER_AGENT,
            },
        }

    def get_status(self) -> Dict[str, Any]:
        status = super().get_status()
        status["config_path"] = str(self.config_path)
        return status

    def __repr__(self) -> str:
        return (
            f"ConfigManager(config_path={self.config_path}, "
            f"state={self._state.value}, sections={list(self._config.keys())})"
        )
