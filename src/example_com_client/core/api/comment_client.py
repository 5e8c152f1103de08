"""example.com コメントAPIクライアント

3つの操作（一覧取得、追加、更新）をそれぞれ1回のHTTPリクエストに変換し、
レスポンスをCommentまたは分類済みのエラー値に変換する。

エラーは送出せず、すべてErr(...)として返す:
    - TransportError: トランスポートが送出したものをそのまま返す
    - DecodingError: レスポンスがJSONとして不正
    - DomainError: 2xx以外のステータス、または不正なコメントデータ
"""

import json
import logging
from typing import Any, Dict, List, Optional

from example_com_client.configuration.settings import BASE_URL, JSON_CONTENT_TYPE
from example_com_client.core.api.base import (
    DefaultRequestFactory,
    DefaultStreamFactory,
    HttpRequest,
    HttpResponse,
    HttpTransport,
    RequestFactory,
    StreamFactory,
)
from example_com_client.core.exceptions import (
    ClientError,
    DecodingError,
    DomainError,
    TransportError,
)
from example_com_client.core.models import Comment
from example_com_client.core.result import Err, Ok, Result

logger = logging.getLogger(__name__)


class CommentApiClient:
    """コメントAPIクライアント

    注入されたトランスポートとファクトリ以外の状態を持たない。
    並行呼び出しの安全性はトランスポートに依存する。

    Attributes:
        BASE_URL: APIのベースURL（固定）
    """

    BASE_URL = BASE_URL

    def __init__(
        self,
        transport: HttpTransport,
        request_factory: Optional[RequestFactory] = None,
        stream_factory: Optional[StreamFactory] = None,
    ):
        self._transport = transport
        self._request_factory = request_factory or DefaultRequestFactory()
        self._stream_factory = stream_factory or DefaultStreamFactory()

    # ------------------------------------------------------------------------
    # 公開API
    # ------------------------------------------------------------------------

    async def list_comments(self) -> Result[List[Comment], ClientError]:
        """コメント一覧を取得

        1件でも不正なレコードがあれば、部分的な結果は返さずDomainErrorとなる。

        Returns:
            Ok(List[Comment]): レスポンス配列の順序を保ったコメント
            Err(ClientError): 失敗時
        """
        try:
            request = self._request_factory.create_request("GET", f"{self.BASE_URL}/comments")
            response = await self._send(request)

            if not response.is_success:
                return self._status_error("Failed to get comments", response)

            body = response.text
            try:
                payload = json.loads(body)
            except json.JSONDecodeError as e:
                logger.warning(
                    f"Comments response is not valid JSON: {e.msg}",
                    extra={"status_code": response.status, "error_code": "E2000"},
                )
                return Err(
                    DecodingError(
                        f"Failed to decode comments response: {e.msg}", body=body, cause=e
                    )
                )

            comments = self._decode_comments(payload)
            if comments is None:
                logger.warning(
                    "Invalid comment data in response",
                    extra={"status_code": response.status, "error_code": "E1001"},
                )
                return Err(
                    DomainError(
                        f"Invalid comment data in response: Status code: {response.status}. "
                        f"Response body: {body}",
                        status_code=response.status,
                        body=body,
                        error_code="E1001",
                    )
                )

            return Ok(comments)

        except TransportError as e:
            return Err(e)
        except Exception as e:
            return self._unexpected_error(e)

    async def add_comment(self, name: str, text: str) -> Result[None, ClientError]:
        """コメントを追加

        空文字列もそのまま送信する。

        Returns:
            Ok(None): 2xxの場合
            Err(ClientError): 失敗時
        """
        try:
            request = self._json_request(
                "POST", f"{self.BASE_URL}/comment", {"name": name, "text": text}
            )
            response = await self._send(request)

            if not response.is_success:
                return self._status_error("Failed to add comment", response)

            return Ok(None)

        except TransportError as e:
            return Err(e)
        except Exception as e:
            return self._unexpected_error(e)

    async def update_comment(
        self,
        comment_id: int,
        name: Optional[str] = None,
        text: Optional[str] = None,
    ) -> Result[None, ClientError]:
        """コメントを更新

        指定されたフィールドのみ送信する。両方Noneの場合は空オブジェクトを送る。

        Args:
            comment_id: 更新するコメントのID
            name: 新しい投稿者名（Noneの場合は送信しない）
            text: 新しい本文（Noneの場合は送信しない）

        Returns:
            Ok(None): 2xxの場合
            Err(ClientError): 失敗時
        """
        body: Dict[str, str] = {}
        if name is not None:
            body["name"] = name
        if text is not None:
            body["text"] = text

        try:
            request = self._json_request("PUT", f"{self.BASE_URL}/comment/{comment_id}", body)
            response = await self._send(request)

            if not response.is_success:
                return self._status_error("Failed to update comment", response)

            return Ok(None)

        except TransportError as e:
            return Err(e)
        except Exception as e:
            return self._unexpected_error(e)

    # ------------------------------------------------------------------------
    # 内部処理
    # ------------------------------------------------------------------------

    def _json_request(self, method: str, url: str, payload: Dict[str, Any]) -> HttpRequest:
        return (
            self._request_factory.create_request(method, url)
            .with_header("Content-Type", JSON_CONTENT_TYPE)
            .with_body(self._stream_factory.create_stream(json.dumps(payload)))
        )

    async def _send(self, request: HttpRequest) -> HttpResponse:
        logger.debug(f"{request.method} {request.url}")
        response = await self._transport.send_request(request)
        logger.debug(
            f"{request.method} {request.url} -> {response.status}",
            extra={"status_code": response.status},
        )
        return response

    def _decode_comments(self, payload: Any) -> Optional[List[Comment]]:
        """JSON配列をCommentのリストに変換。1件でも不正ならNone"""
        if not isinstance(payload, list):
            return None

        comments = []
        for item in payload:
            comment = Comment.from_dict(item)
            if comment is None:
                return None
            comments.append(comment)
        return comments

    def _status_error(self, action: str, response: HttpResponse) -> Err[DomainError]:
        body = response.text
        logger.warning(
            f"{action}: status {response.status}",
            extra={"status_code": response.status, "error_code": "E1000"},
        )
        return Err(
            DomainError(
                f"{action}. Status code: {response.status}. Response body: {body}",
                status_code=response.status,
                body=body,
            )
        )

    def _unexpected_error(self, error: Exception) -> Err[DomainError]:
        logger.error(
            f"Unexpected error in comment API client: {error}",
            extra={"error_code": "E1002", "error_type": type(error).__name__},
            exc_info=True,
        )
        return Err(DomainError(str(error), error_code="E1002", cause=error))

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} base_url={self.BASE_URL} transport={self._transport!r}>"
