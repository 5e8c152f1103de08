"""example-com-client 例外クラス階層

APIクライアントが返すエラー値と、設定読み込み時に送出する例外を定義。
クライアントの各操作はこれらを送出せず、Err(...)として返す。

エラーコード体系:
    E0001-E0099: 設定関連
    E1000-E1099: ドメインエラー（ステータスコード、レスポンス内容）
    E2000-E2099: デコードエラー
    E5200-E5599: トランスポートエラー
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union


class ErrorKind(Enum):
    """クライアントエラーの分類"""

    TRANSPORT = "transport"  # 通信そのものの失敗
    DECODING = "decoding"  # レスポンスがJSONとして解釈できない
    DOMAIN = "domain"  # 正常なHTTPレスポンスだが内容を受け入れられない
    CONFIGURATION = "configuration"


class ExampleComClientError(Exception):
    """プロジェクトの基底例外クラス

    Attributes:
        message: エラーメッセージ
        error_code: エラーコード（E1000など）
        details: 詳細情報の辞書
        cause: 原因となった例外
        timestamp: エラー発生時刻
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.cause = cause
        self.timestamp = datetime.now()
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        """エラー情報を辞書形式で取得（ログ出力用）"""
        return {
            "error_type": self.__class__.__name__,
            "kind": self.kind.value if self.kind else None,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        # メッセージはステータスコードとボディをそのまま含むため、コードは付けない
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, error_code={self.error_code!r})"


# ============================================================================
# 設定関連エラー (E0001-E0099)
# ============================================================================


class ConfigurationError(ExampleComClientError):
    """設定ファイルの読み込み、パース、保存に関するエラー"""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str, config_file: Optional[str] = None, **kwargs):
        if "error_code" not in kwargs:
            kwargs["error_code"] = "E0001"
        super().__init__(message, **kwargs)
        if config_file:
            self.details["config_file"] = config_file


# ============================================================================
# クライアントエラー
# ============================================================================


class TransportError(ExampleComClientError):
    """トランスポート層の失敗 (E5200-E5599)

    ネットワーク障害、DNS解決失敗、タイムアウトなど。
    HttpTransportの実装が送出し、クライアントは同じインスタンスをそのまま返す。

    エラーコード:
        E5200: 不明な通信エラー
        E5201: HTTPクライアントエラー
        E5203: プロキシ接続エラー
        E5205: タイムアウト
        E5502: 接続エラー
    """

    kind = ErrorKind.TRANSPORT

    def __init__(self, message: str, url: Optional[str] = None, **kwargs):
        if "error_code" not in kwargs:
            kwargs["error_code"] = "E5200"
        super().__init__(message, **kwargs)
        if url:
            self.details["url"] = url


class DecodingError(ExampleComClientError):
    """レスポンスボディがJSONとして不正 (E2000)"""

    kind = ErrorKind.DECODING

    def __init__(self, message: str, body: Optional[str] = None, **kwargs):
        if "error_code" not in kwargs:
            kwargs["error_code"] = "E2000"
        super().__init__(message, **kwargs)
        self.body = body
        if body is not None:
            self.details["body"] = body


class DomainError(ExampleComClientError):
    """APIがリクエストを受け入れなかった (E1000-E1099)

    エラーコード:
        E1000: 2xx以外のステータスコード
        E1001: レスポンスのコメントデータが不正
        E1002: 予期しない内部エラー

    Attributes:
        status_code: HTTPステータスコード（E1002ではNone）
        body: レスポンスボディ（そのままのテキスト）
    """

    kind = ErrorKind.DOMAIN

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
        **kwargs,
    ):
        if "error_code" not in kwargs:
            kwargs["error_code"] = "E1000"
        super().__init__(message, **kwargs)
        self.status_code = status_code
        self.body = body
        if status_code is not None:
            self.details["status_code"] = status_code
        if body is not None:
            self.details["body"] = body


# クライアントの各操作がErrに包んで返すエラー
ClientError = Union[TransportError, DecodingError, DomainError]
