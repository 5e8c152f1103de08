"""HTTP通信の抽象定義

APIクライアントが依存するトランスポート、リクエスト生成、ボディ生成の
インターフェースと、それらが受け渡す不変のリクエスト／レスポンス型。

実際のネットワーク処理（ソケット、TLS、接続プール、タイムアウト）は
HttpTransportの実装が担当する。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field, replace
from typing import Dict, Optional


@dataclass(frozen=True)
class HttpRequest:
    """送信するHTTPリクエスト（不変）

    with_header / with_bodyは変更済みの新しいインスタンスを返す。

    Attributes:
        method: HTTPメソッド（GET, POST, etc.）
        url: 完全なURL
        headers: リクエストヘッダー
        body: リクエストボディ（ボディなしの場合はNone）
    """

    method: str
    url: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Optional[bytes] = None

    def with_header(self, name: str, value: str) -> "HttpRequest":
        """ヘッダーを追加（同名のヘッダーは置き換え）したリクエストを返す"""
        headers = {k: v for k, v in self.headers.items() if k.lower() != name.lower()}
        headers[name] = value
        return replace(self, headers=headers)

    def with_body(self, body: bytes) -> "HttpRequest":
        """ボディを差し替えたリクエストを返す"""
        return replace(self, body=body)


@dataclass(frozen=True)
class HttpResponse:
    """受信したHTTPレスポンス（不変）

    Attributes:
        status: HTTPステータスコード
        headers: レスポンスヘッダー
        body: レスポンスボディの生バイト列
    """

    status: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def text(self) -> str:
        """ボディをUTF-8としてデコードした文字列"""
        return self.body.decode("utf-8", errors="replace")

    @property
    def is_success(self) -> bool:
        """ステータスコードが200-299の場合True"""
        return 200 <= self.status <= 299


class HttpTransport(ABC):
    """HTTPトランスポートのインターフェース

    リクエストを1回送信し、レスポンスを返す。リトライは行わない。
    通信に失敗した場合はTransportErrorを送出すること。
    ステータスコードの解釈は呼び出し側が行う。
    """

    @abstractmethod
    async def send_request(self, request: HttpRequest) -> HttpResponse:
        """リクエストを送信

        Args:
            request: 送信するリクエスト

        Returns:
            HttpResponse: 受信したレスポンス（ステータスコードに関わらず）

        Raises:
            TransportError: 通信に失敗した場合
        """


class RequestFactory(ABC):
    """リクエスト生成のインターフェース"""

    @abstractmethod
    def create_request(self, method: str, url: str) -> HttpRequest:
        """ヘッダー、ボディなしのリクエストを生成"""


class StreamFactory(ABC):
    """リクエストボディ生成のインターフェース"""

    @abstractmethod
    def create_stream(self, content: str) -> bytes:
        """文字列からリクエストボディを生成"""


class DefaultRequestFactory(RequestFactory):
    def create_request(self, method: str, url: str) -> HttpRequest:
        return HttpRequest(method=method.upper(), url=url)


class DefaultStreamFactory(StreamFactory):
    def create_stream(self, content: str) -> bytes:
        return content.encode("utf-8")
