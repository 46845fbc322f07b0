"""
失敗オブザーバー — テスト結果イベントの受信と失敗時の証跡採取

テストフレームワークから開始・成功・失敗・スキップなどのイベントを受け取り、
ログ出力とレポートのメタデータ設定を行う。失敗時には登録済みセッションから
スクリーンショット・現在の URL（Web のみ）・例外テキストを添付する。

主な機能:
  - OutcomeStatus / Outcome: テスト結果イベント
  - FailureObserver: on_start / on_finish / on_test_* / notify

証跡採取はすべてベストエフォートで、採取の失敗がテスト結果を変えることはない。
結果ディレクトリの初期化はプロセス内で一度だけ行う。
"""

from __future__ import annotations

import enum
import logging
import traceback
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import allure
from appium.webdriver.webdriver import WebDriver as AppiumWebDriver

from qat.core.reporting import Reporter
from qat.core.session import SessionRegistry, default_registry

logger = logging.getLogger(__name__)

DEFAULT_SUITE_NAME = "Automation Test Suite"
DEFAULT_RESULTS_DIR = Path("target/allure-results")

# 結果ディレクトリを初期化済みか（プロセス全体で共有）
_results_cleared = False


# ---------------------------------------------------------------------------
# 結果イベント
# ---------------------------------------------------------------------------

class OutcomeStatus(enum.Enum):
    """テスト結果の種別。"""

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"
    FAILED_WITHIN_THRESHOLD = "failed_within_threshold"


@dataclass(frozen=True)
class Outcome:
    """テスト結果イベント。

    Attributes:
        name: テスト名
        status: 結果種別
        cause: 失敗・スキップの原因（例外またはテキスト）
    """

    name: str
    status: OutcomeStatus
    cause: Any = None


def format_cause(cause: Any) -> str:
    """原因をレポート添付用のテキストに整形する。"""
    if cause is None:
        return ""
    if isinstance(cause, BaseException):
        return "".join(traceback.format_exception(type(cause), cause, cause.__traceback__))
    return str(cause)


# ---------------------------------------------------------------------------
# オブザーバー
# ---------------------------------------------------------------------------

class FailureObserver:
    """テスト結果イベントを受け取り、失敗時に証跡を添付する。

    Args:
        registry: 証跡採取に使うセッションのレジストリ
        reporter: レポートへの書き込み先
        suite_name: レポート上の親スイート名
        results_dir: on_start で初期化する結果ディレクトリ（None で初期化しない）
    """

    def __init__(
        self,
        registry: Optional[SessionRegistry] = None,
        reporter: Optional[Reporter] = None,
        suite_name: str = DEFAULT_SUITE_NAME,
        results_dir: Optional[Path] = DEFAULT_RESULTS_DIR,
    ) -> None:
        self.registry = registry or default_registry
        self.reporter = reporter or Reporter()
        self.suite_name = suite_name
        self.results_dir = results_dir
        self.counts: Counter[OutcomeStatus] = Counter()

    # -------------------------------------------------------------------
    # スイート単位
    # -------------------------------------------------------------------

    def on_start(self, name: str = "") -> None:
        global _results_cleared
        if self.results_dir is not None and not _results_cleared:
            self.reporter.clean_results_dir(self.results_dir)
            _results_cleared = True
        logger.info("========== テストスイート開始: %s ==========", name or self.suite_name)

    def on_finish(self, name: str = "") -> None:
        logger.info(
            "========== テストスイート終了: %s（成功 %d / 失敗 %d / スキップ %d）==========",
            name or self.suite_name,
            self.counts[OutcomeStatus.PASSED],
            self.counts[OutcomeStatus.FAILED],
            self.counts[OutcomeStatus.SKIPPED],
        )

    # -------------------------------------------------------------------
    # テスト単位
    # -------------------------------------------------------------------

    def on_test_start(self, name: str) -> None:
        logger.info("---------- テスト開始: %s ----------", name)
        try:
            allure.dynamic.title(name)
            allure.dynamic.parent_suite(self.suite_name)
        except Exception as exc:
            logger.debug("レポートのメタデータを設定できませんでした: %s", exc)

    def on_test_success(self, name: str) -> None:
        self.counts[OutcomeStatus.PASSED] += 1
        logger.info("テスト成功: %s", name)

    def on_test_failure(self, name: str, cause: Any = None) -> None:
        self.counts[OutcomeStatus.FAILED] += 1
        logger.error("テスト失敗: %s", name)
        if cause is not None:
            logger.error("失敗原因: %s", cause)
        self._capture_failure(cause)

    def on_test_skipped(self, name: str, cause: Any = None) -> None:
        self.counts[OutcomeStatus.SKIPPED] += 1
        logger.warning("テストスキップ: %s%s", name, f"（{cause}）" if cause else "")

    def on_test_failed_within_threshold(self, name: str, cause: Any = None) -> None:
        self.counts[OutcomeStatus.FAILED_WITHIN_THRESHOLD] += 1
        logger.warning("テストは許容範囲内で失敗しました: %s", name)

    def notify(self, outcome: Outcome) -> None:
        """Outcome を対応する on_test_* に振り分ける。"""
        status = outcome.status
        if status == OutcomeStatus.PASSED:
            self.on_test_success(outcome.name)
        elif status == OutcomeStatus.FAILED:
            self.on_test_failure(outcome.name, outcome.cause)
        elif status == OutcomeStatus.SKIPPED:
            self.on_test_skipped(outcome.name, outcome.cause)
        else:
            self.on_test_failed_within_threshold(outcome.name, outcome.cause)

    # -------------------------------------------------------------------
    # 証跡採取
    # -------------------------------------------------------------------

    def _capture_failure(self, cause: Any) -> None:
        """スクリーンショット・URL・例外テキストを添付する。"""
        try:
            driver = self.registry.get() if self.registry.has_session() else None
            self.reporter.attach_screenshot(driver, "Failure Screenshot")
            if driver is not None and not isinstance(driver, AppiumWebDriver):
                self.reporter.attach_current_url(driver)
            if cause is not None:
                self.reporter.attach_text("Exception", format_cause(cause))
        except Exception as exc:
            logger.error("失敗時の証跡採取に失敗しました: %s", exc)
