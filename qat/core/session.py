"""
セッションレジストリ — 実行中ドライバセッションの保持

ライフサイクルハーネスが生成したドライバ（Selenium / Appium の WebDriver）を
保持し、アクション・検証ラッパーや失敗オブザーバーへ受け渡す。

主な機能:
  - SessionRegistry: set / get / clear / has_session / require
  - default_registry: プロセス既定のレジストリ

1 プロセスにつき 1 セッションを前提とし、スレッドセーフではない。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)


class SessionNotStartedError(RuntimeError):
    """セッションが登録されていない状態でドライバを参照した場合のエラー。"""


class SessionRegistry:
    """ドライバセッションを 1 つだけ保持するレジストリ。"""

    def __init__(self) -> None:
        self._session: Optional[WebDriver] = None

    def set(self, session: WebDriver) -> None:
        """セッションを登録する。既存の登録は置き換えられる。"""
        if self._session is not None and self._session is not session:
            logger.warning("既存のセッションを置き換えます")
        self._session = session

    def get(self) -> Optional[WebDriver]:
        """登録済みセッションを返す。未登録なら警告を出して None を返す。"""
        if self._session is None:
            logger.warning("ドライバセッションが未登録です（setup 前または teardown 後）")
        return self._session

    def require(self) -> WebDriver:
        """登録済みセッションを返す。

        Raises:
            SessionNotStartedError: セッションが未登録の場合
        """
        if self._session is None:
            raise SessionNotStartedError(
                "ドライバセッションが開始されていません。"
                "ライフサイクルハーネスの setup を先に実行してください"
            )
        return self._session

    def clear(self) -> None:
        """登録を解除する。セッション自体の終了は行わない。"""
        self._session = None

    def has_session(self) -> bool:
        return self._session is not None


default_registry = SessionRegistry()
