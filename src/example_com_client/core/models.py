"""コメントAPIのデータモデル"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

REQUIRED_FIELDS = ("id", "name", "text")


@dataclass(frozen=True)
class Comment:
    """リモートサービス上のコメント

    Attributes:
        id: サービスが採番した識別子
        name: 投稿者名
        text: コメント本文
    """

    id: int
    name: str
    text: str

    @classmethod
    def from_dict(cls, data: Any) -> Optional["Comment"]:
        """デコード済みのレコードからCommentを生成

        必須フィールドが欠けている（nullを含む）場合や型が一致しない場合はNone。

        Args:
            data: JSON配列の1要素

        Returns:
            Optional[Comment]: 生成したCommentまたはNone
        """
        if not isinstance(data, dict):
            return None
        if any(data.get(key) is None for key in REQUIRED_FIELDS):
            return None

        comment_id, name, text = data["id"], data["name"], data["text"]
        # boolはintのサブクラスなので明示的に除外
        if isinstance(comment_id, bool) or not isinstance(comment_id, int):
            return None
        if not isinstance(name, str) or not isinstance(text, str):
            return None

        return cls(id=comment_id, name=name, text=text)

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "text": self.text}
