"""コンポーネント基底クラス

セッションや設定ファイルなど、ライフサイクルを持つコンポーネントが
継承する抽象基底クラスと状態定義。

CommentApiClient自体は状態を持たないため、このクラスを継承しない。
"""

import logging
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class ComponentState(Enum):
    """コンポーネントの状態

    状態遷移:
    NOT_INITIALIZED → INITIALIZING → READY
                    ↓                ↓
                    → ERROR ←--------┘
                    ↓
                    TERMINATING → TERMINATED
    """

    NOT_INITIALIZED = "not_initialized"
    INITIALIZING = "initializing"
    READY = "ready"
    ERROR = "error"
    TERMINATING = "terminating"
    TERMINATED = "terminated"

    def can_transition_to(self, target: "ComponentState") -> bool:
        """指定の状態に遷移可能か判定

        Args:
            target: 遷移先の状態

        Returns:
            bool: 遷移可能な場合True
        """
        valid_transitions = {
            ComponentState.NOT_INITIALIZED: [
                ComponentState.INITIALIZING,
                ComponentState.READY,  # セッションの遅延生成
            ],
            ComponentState.INITIALIZING: [ComponentState.READY, ComponentState.ERROR],
            ComponentState.READY: [ComponentState.ERROR, ComponentState.TERMINATING],
            ComponentState.ERROR: [ComponentState.INITIALIZING, ComponentState.TERMINATING],
            ComponentState.TERMINATING: [ComponentState.TERMINATED],
            # 閉じたセッションは次の送信で作り直される
            ComponentState.TERMINATED: [ComponentState.READY, ComponentState.INITIALIZING],
        }
        return target in valid_transitions.get(self, [])


class ClientComponent(ABC):
    """ライフサイクルを持つコンポーネントの抽象基底クラス

    Attributes:
        _state: 現在の状態
        _logger: コンポーネント専用のロガー
        _initialized_at: 初期化完了時刻
        _error: 最後に発生したエラー
    """

    def __init__(self):
        self._state: ComponentState = ComponentState.NOT_INITIALIZED
        self._logger: logging.Logger = logging.getLogger(self.__class__.__module__)
        self._initialized_at: Optional[datetime] = None
        self._error: Optional[Exception] = None

    @abstractmethod
    async def initialize(self) -> None:
        """非同期初期化処理

        状態遷移:
        - 成功時: NOT_INITIALIZED → INITIALIZING → READY
        - 失敗時: NOT_INITIALIZED → INITIALIZING → ERROR
        """

    @abstractmethod
    async def cleanup(self) -> None:
        """リソースのクリーンアップ

        エラーが発生してもログ記録のみで継続し、最終的にTERMINATEDとなる。
        """

    @property
    def state(self) -> ComponentState:
        """現在の状態"""
        return self._state

    def is_available(self) -> bool:
        """READY状態の場合True"""
        return self._state == ComponentState.READY

    def get_status(self) -> Dict[str, Any]:
        """コンポーネントの詳細ステータス取得

        Note:
            サブクラスはsuper().get_status()の結果に情報を追加して拡張する
        """
        return {
            "component": self.__class__.__name__,
            "state": self._state.value,
            "is_available": self.is_available(),
            "initialized_at": self._initialized_at.isoformat() if self._initialized_at else None,
            "error": str(self._error) if self._error else None,
        }

    def _set_state(self, new_state: ComponentState) -> None:
        """内部用：状態を変更し、遷移をログに記録する"""
        old_state = self._state
        if old_state == new_state:
            return

        if not old_state.can_transition_to(new_state):
            self._logger.warning(
                f"Unexpected state transition: {old_state.value} -> {new_state.value}",
                extra={
                    "component": self.__class__.__name__,
                    "old_state": old_state.value,
                    "new_state": new_state.value,
                },
            )

        self._state = new_state
        self._logger.debug(
            f"State transition: {old_state.value} -> {new_state.value}",
            extra={"component": self.__class__.__name__},
        )

        if new_state == ComponentState.READY:
            self._initialized_at = datetime.now()

    def _handle_error(self, error: Exception) -> None:
        """内部用：エラーを記録してERROR状態に遷移する"""
        self._error = error
        self._set_state(ComponentState.ERROR)
        self._logger.error(
            f"{self.__class__.__name__} error: {error}",
            extra={"component": self.__class__.__name__, "error_type": type(error).__name__},
            exc_info=True,
        )

    def __str__(self) -> str:
        return f"{self.__class__.__name__}({self._state.value})"
