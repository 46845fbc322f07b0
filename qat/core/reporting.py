"""
Reporter — Allure レポートへの添付・ステップ記録

テスト結果レポート（Allure）にスクリーンショット・テキスト・HTML・
ステップを書き込むアダプタ。添付処理の失敗はログに記録するだけで、
テスト本体の結果には影響させない。

主な機能:
  - attach_screenshot(): ドライバのスクリーンショット（PNG）を添付
  - attach_text() / attach_html(): テキスト・HTML の添付
  - attach_page_source() / attach_current_url(): ページソース・URL の添付
  - add_step() / step(): Allure ステップの記録
  - clean_results_dir(): 結果ディレクトリの初期化
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Optional, TypeVar

import allure

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Reporter:
    """Allure への書き込みをまとめたクラス。"""

    # -------------------------------------------------------------------
    # 添付
    # -------------------------------------------------------------------

    def attach_screenshot(self, driver: Optional[WebDriver], name: str = "Screenshot") -> bool:
        """スクリーンショットを PNG で添付する。

        Returns:
            添付できた場合 True。ドライバが無い・取得に失敗した場合は False
        """
        if driver is None:
            logger.warning("ドライバが無いためスクリーンショットを取得できません: %s", name)
            return False
        try:
            png = driver.get_screenshot_as_png()
            allure.attach(png, name=name, attachment_type=allure.attachment_type.PNG)
            logger.info("スクリーンショットを添付しました: %s", name)
            return True
        except Exception as exc:
            logger.error("スクリーンショットの添付に失敗しました: %s", exc)
            return False

    def attach_text(self, name: str, content: str) -> bool:
        try:
            allure.attach(str(content), name=name, attachment_type=allure.attachment_type.TEXT)
            return True
        except Exception as exc:
            logger.error("テキストの添付に失敗しました（%s）: %s", name, exc)
            return False

    def attach_html(self, name: str, html: str) -> bool:
        try:
            allure.attach(html, name=name, attachment_type=allure.attachment_type.HTML)
            return True
        except Exception as exc:
            logger.error("HTML の添付に失敗しました（%s）: %s", name, exc)
            return False

    def attach_page_source(self, driver: Optional[WebDriver]) -> bool:
        if driver is None:
            return False
        try:
            source = driver.page_source
        except Exception as exc:
            logger.error("ページソースの取得に失敗しました: %s", exc)
            return False
        return self.attach_html("Page Source", source)

    def attach_current_url(self, driver: Optional[WebDriver]) -> bool:
        if driver is None:
            return False
        try:
            url = driver.current_url
        except Exception as exc:
            logger.error("URL の取得に失敗しました: %s", exc)
            return False
        return self.attach_text("Current URL", url)

    # -------------------------------------------------------------------
    # ステップ
    # -------------------------------------------------------------------

    def add_step(self, description: str) -> None:
        """本体を持たない完了済みステップを記録する。"""
        with allure.step(description):
            logger.info("ステップ: %s", description)

    def step(self, description: str, action: Callable[[], T]) -> T:
        """action をステップとして実行し、その戻り値を返す。

        action が例外を送出した場合、ステップは失敗として記録され、
        例外はそのまま呼び出し元へ伝播する。
        """
        logger.info("ステップ開始: %s", description)
        with allure.step(description):
            return action()

    # -------------------------------------------------------------------
    # 結果ディレクトリ
    # -------------------------------------------------------------------

    def clean_results_dir(self, results_dir: Path) -> None:
        """結果ディレクトリを削除して空の状態で作り直す。"""
        if results_dir.exists():
            try:
                shutil.rmtree(results_dir)
                logger.info("結果ディレクトリを削除しました: %s", results_dir)
            except OSError as exc:
                logger.warning("結果ディレクトリを削除できませんでした: %s（%s）", results_dir, exc)
                return
        results_dir.mkdir(parents=True, exist_ok=True)
