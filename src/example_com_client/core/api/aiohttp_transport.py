"""aiohttpによるHttpTransport実装

セッション管理、SSL/TLS、タイムアウト、プロキシ、接続エラーの分類を担当する。
ステータスコードの解釈とリトライは行わない。
"""

# 標準ライブラリ
import asyncio
import logging
import ssl
from typing import TYPE_CHECKING, Dict, Optional

# サードパーティ
import aiohttp
import certifi

# プロジェクト内
from example_com_client.configuration.settings import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_USER_AGENT,
    mask_proxy_url,
)
from example_com_client.core.api.base import HttpRequest, HttpResponse, HttpTransport
from example_com_client.core.base import ClientComponent, ComponentState
from example_com_client.core.exceptions import TransportError

if TYPE_CHECKING:
    from example_com_client.configuration.config_manager import ConfigManager

logger = logging.getLogger(__name__)


class AiohttpTransport(ClientComponent, HttpTransport):
    """aiohttp.ClientSessionを使うトランスポート

    セッションは最初の送信時に生成される。async withで使うと終了時に閉じる。

    Attributes:
        connect_timeout: 接続タイムアウト（秒）
        read_timeout: ソケット読み取りタイムアウト（秒）
        proxy: プロキシURL
        user_agent: User-Agentヘッダー
        _session: aiohttp ClientSession
        _connector: 接続プール管理
    """

    # 接続プール設定
    CONNECTION_LIMIT = 100
    CONNECTION_LIMIT_PER_HOST = 50
    DNS_TTL = 300  # DNSキャッシュ（秒）

    def __init__(
        self,
        connect_timeout: Optional[float] = None,
        read_timeout: Optional[float] = None,
        proxy: Optional[str] = None,
        user_agent: Optional[str] = None,
    ):
        super().__init__()
        self.connect_timeout = connect_timeout or DEFAULT_CONNECT_TIMEOUT
        self.read_timeout = read_timeout or DEFAULT_READ_TIMEOUT
        self.proxy = proxy
        self.user_agent = user_agent or DEFAULT_USER_AGENT

        self._session: Optional[aiohttp.ClientSession] = None
        self._connector: Optional[aiohttp.TCPConnector] = None

    @classmethod
    def from_config(cls, config: "ConfigManager") -> "AiohttpTransport":
        """ConfigManagerのtransportセクションから生成"""
        return cls(
            connect_timeout=config.get("transport.connect_timeout"),
            read_timeout=config.get("transport.read_timeout"),
            proxy=config.get("transport.proxy"),
            user_agent=config.get("transport.user_agent"),
        )

    # ------------------------------------------------------------------------
    # 非同期コンテキストマネージャー
    # ------------------------------------------------------------------------

    async def __aenter__(self) -> "AiohttpTransport":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    # ------------------------------------------------------------------------
    # セッション管理
    # ------------------------------------------------------------------------

    async def _ensure_session(self) -> None:
        """セッションが存在しない、または閉じている場合は新規作成する"""
        if self._session is not None and not self._session.closed:
            return

        # read_timeoutはレスポンス全体ではなく、ソケット読み取りごとの待ち時間
        timeout = aiohttp.ClientTimeout(connect=self.connect_timeout, sock_read=self.read_timeout)

        self._connector = aiohttp.TCPConnector(
            ssl=self._create_ssl_context(),
            limit=self.CONNECTION_LIMIT,
            limit_per_host=self.CONNECTION_LIMIT_PER_HOST,
            ttl_dns_cache=self.DNS_TTL,
        )

        self._session = aiohttp.ClientSession(
            connector=self._connector,
            timeout=timeout,
            headers=self._get_default_headers(),
            trust_env=True,  # 環境変数のプロキシ設定を信頼
        )

        self._set_state(ComponentState.READY)
        logger.info(
            f"{self.__class__.__name__} session initialized",
            extra={"initialized_at": self._initialized_at.isoformat()},
        )

    def _create_ssl_context(self) -> ssl.SSLContext:
        ssl_context = ssl.create_default_context(cafile=certifi.where())
        ssl_context.check_hostname = True
        ssl_context.verify_mode = ssl.CERT_REQUIRED
        ssl_context.minimum_version = ssl.TLSVersion.TLSv1_2
        return ssl_context

    def _get_default_headers(self) -> Dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": "application/json"}

    async def close(self) -> None:
        """セッションとコネクターをクローズ"""
        if self._session:
            await self._session.close()
            self._session = None

        if self._connector:
            await self._connector.close()
            self._connector = None

        # 一度も開いていない場合は状態を変えない
        if self._state not in (ComponentState.NOT_INITIALIZED, ComponentState.TERMINATED):
            self._set_state(ComponentState.TERMINATING)
            self._set_state(ComponentState.TERMINATED)
        logger.info(f"{self.__class__.__name__} session closed")

    # ------------------------------------------------------------------------
    # リクエスト送信
    # ------------------------------------------------------------------------

    async def send_request(self, request: HttpRequest) -> HttpResponse:
        """リクエストを1回送信する

        Raises:
            TransportError: 接続、タイムアウト、プロキシなどの通信エラー
        """
        await self._ensure_session()

        logger.debug(
            f"Sending {request.method} {request.url}",
            extra={"method": request.method, "url": request.url},
        )

        try:
            async with self._session.request(
                method=request.method,
                url=request.url,
                headers=request.headers,
                data=request.body,
                proxy=self.proxy,
            ) as response:
                body = await response.read()
                return HttpResponse(
                    status=response.status,
                    headers=dict(response.headers),
                    body=body,
                )

        except asyncio.TimeoutError as e:
            # aiohttp.ServerTimeoutErrorもここで捕捉される
            logger.warning(
                f"Request timed out: {request.method} {request.url}",
                extra={"error_code": "E5205"},
            )
            raise TransportError(
                f"Request timed out: {request.method} {request.url}",
                url=request.url,
                error_code="E5205",
                cause=e,
            ) from e
        except aiohttp.ClientError as e:
            raise self._handle_connection_error(e, request) from e

    def _handle_connection_error(
        self, error: aiohttp.ClientError, request: HttpRequest
    ) -> TransportError:
        """aiohttpの例外をTransportErrorに分類する

        ClientProxyConnectionErrorはClientConnectorErrorのサブクラスなので先に判定する。
        """
        target = f"{request.method} {request.url}"

        if isinstance(error, aiohttp.ClientProxyConnectionError):
            message, code = f"Proxy connection failed: {target}", "E5203"
        elif isinstance(error, aiohttp.ClientConnectorError):
            message, code = f"Connection failed: {target}", "E5502"
        else:
            message, code = f"HTTP client error: {target}: {error}", "E5201"

        logger.warning(message, extra={"error_code": code, "error_type": type(error).__name__})
        return TransportError(message, url=request.url, error_code=code, cause=error)

    # ------------------------------------------------------------------------
    # ClientComponent必須メソッド
    # ------------------------------------------------------------------------

    async def initialize(self) -> None:
        """HTTPセッションと接続プールを初期化する"""
        if self._state == ComponentState.READY:
            return

        self._set_state(ComponentState.INITIALIZING)
        try:
            await self._ensure_session()
        except Exception as e:
            self._handle_error(e)
            raise

    async def cleanup(self) -> None:
        """HTTPセッションをクローズする。エラーはログのみ"""
        if self._state == ComponentState.TERMINATED:
            return

        try:
            await self.close()
        except Exception as e:
            logger.error(f"Cleanup error: {e}", extra={"error_type": type(e).__name__})

    def get_status(self) -> Dict[str, object]:
        status = super().get_status()
        status["session_open"] = self._session is not None and not self._session.closed
        return status

    def __repr__(self) -> str:
        proxy = mask_proxy_url(self.proxy) if self.proxy else None
        return (
            f"<{self.__class__.__name__} "
            f"proxy={proxy} "
            f"connect_timeout={self.connect_timeout} "
            f"read_timeout={self.read_timeout} "
            f"state={self._state.value}>"
        )
