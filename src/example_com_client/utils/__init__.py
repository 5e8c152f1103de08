"""
ユーティリティパッケージ

ログ管理などの共通機能。
"""

from example_com_client.utils.logger_manager import JSONLogFormatter, LoggerManager

__all__ = [
    "LoggerManager",
    "JSONLogFormatter",
]
