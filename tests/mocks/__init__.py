"""テスト用モック"""

from .mock_transport import MockTransport

__all__ = [
    "MockTransport",
]
