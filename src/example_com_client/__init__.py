"""
example-com-client

example.com コメントAPIの型付き非同期クライアント。
一覧取得、追加、更新の3操作を提供し、結果をOk / Errとして返す。
"""

__version__ = "0.1.0"
__license__ = "MIT"

from example_com_client.core.api.aiohttp_transport import AiohttpTransport
from example_com_client.core.api.base import (
    HttpRequest,
    HttpResponse,
    HttpTransport,
    RequestFactory,
    StreamFactory,
)
from example_com_client.core.api.comment_client import CommentApiClient
from example_com_client.core.exceptions import (
    ClientError,
    ConfigurationError,
    DecodingError,
    DomainError,
    ErrorKind,
    ExampleComClientError,
    TransportError,
)
from example_com_client.core.models import Comment
from example_com_client.core.result import Err, Ok, Result

__all__ = [
    "__version__",
    "__license__",
    # クライアント
    "CommentApiClient",
    "Comment",
    # HTTP抽象
    "HttpTransport",
    "HttpRequest",
    "HttpResponse",
    "RequestFactory",
    "StreamFactory",
    "AiohttpTransport",
    # 結果型
    "Ok",
    "Err",
    "Result",
    # 例外クラス
    "ExampleComClientError",
    "ClientError",
    "ErrorKind",
    "TransportError",
    "DecodingError",
    "DomainError",
    "ConfigurationError",
]
