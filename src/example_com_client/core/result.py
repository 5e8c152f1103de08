"""操作結果の型定義

APIクライアントはエラーを送出せず、Ok / Errのいずれかを返す。
呼び出し側はisinstanceまたはis_ok()で分岐し、必ずエラーを扱う。
"""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E", bound=BaseException)


@dataclass(frozen=True)
class Ok(Generic[T]):
    """成功結果

    Attributes:
        value: 操作の結果値（値を持たない操作ではNone）
    """

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value


@dataclass(frozen=True)
class Err(Generic[E]):
    """失敗結果

    Attributes:
        error: 発生したエラー（送出されずに保持される）
    """

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self):
        """保持しているエラーを送出する"""
        raise self.error

    def unwrap_or(self, default):
        return default


Result = Union[Ok[T], Err[E]]
