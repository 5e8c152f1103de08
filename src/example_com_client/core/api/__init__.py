"""API通信関連モジュール

- base.py: HTTP抽象（トランスポート、リクエスト／ボディ生成）
- aiohttp_transport.py: aiohttpによるトランスポート実装
- comment_client.py: CommentApiClient
"""

from .aiohttp_transport import AiohttpTransport
from .base import (
    DefaultRequestFactory,
    DefaultStreamFactory,
    HttpRequest,
    HttpResponse,
    HttpTransport,
    RequestFactory,
    StreamFactory,
)
from .comment_client import CommentApiClient

__all__ = [
    "AiohttpTransport",
    "CommentApiClient",
    "DefaultRequestFactory",
    "DefaultStreamFactory",
    "HttpRequest",
    "HttpResponse",
    "HttpTransport",
    "RequestFactory",
    "StreamFactory",
]
