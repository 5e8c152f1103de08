"""
設定管理パッケージ

ConfigManagerによる設定ファイル管理と、settingsモジュールによる定数管理。
"""

from example_com_client.configuration.config_manager import ConfigManager
from example_com_client.configuration.settings import (
    BASE_URL,
    DEFAULT_CONFIG_PATH,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    VERSION,
    mask_proxy_url,
)

__all__ = [
    "ConfigManager",
    "VERSION",
    "BASE_URL",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONNECT_TIMEOUT",
    "DEFAULT_READ_TIMEOUT",
    "mask_proxy_url",
]
