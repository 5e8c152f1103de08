"""pytest共通設定ファイル"""

import logging
import sys
from pathlib import Path

import pytest

# srcレイアウトをインストールせずにテストできるようにする
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


# =============================================================================
# ログ設定
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def setup_test_logging():
    """テスト実行時のログ設定"""
    logging.basicConfig(
        level=logging.DEBUG, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)


# =============================================================================
# 共通フィクスチャ
# =============================================================================


@pytest.fixture
def comments_body() -> str:
    """2件のコメントを含むレスポンスボディ"""
    return (
        '[{"id":1,"name":"name1","text":"comment1"},'
        '{"id":2,"name":"name2","text":"comment2"}]'
    )


# =============================================================================
# テストマーカー
# =============================================================================


def pytest_configure(config):
    """カスタムマーカーを定義"""
    config.addinivalue_line("markers", "unit: 単体テスト")
    config.addinivalue_line("markers", "integration: 統合テスト")
