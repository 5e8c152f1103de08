"""
コア機能パッケージ

基底クラス、例外、結果型、データモデル、API通信を含む。
"""

from example_com_client.core.base import ClientComponent, ComponentState
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
    "ClientComponent",
    "ComponentState",
    "ExampleComClientError",
    "ClientError",
    "ErrorKind",
    "ConfigurationError",
    "TransportError",
    "DecodingError",
    "DomainError",
    "Comment",
    "Ok",
    "Err",
    "Result",
]
