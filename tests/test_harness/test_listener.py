"""
失敗オブザーバー テスト — 結果イベントと失敗時の証跡採取
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from appium.webdriver.webdriver import WebDriver as AppiumWebDriver

from qat.core.reporting import Reporter
from qat.harness import listener
from qat.harness.listener import FailureObserver, Outcome, OutcomeStatus, format_cause


@pytest.fixture
def reporter() -> MagicMock:
    return MagicMock(spec=Reporter)


@pytest.fixture
def observer(active_registry, reporter) -> FailureObserver:
    return FailureObserver(active_registry, reporter, suite_name="Mobile Suite", results_dir=None)


def attachment_names(reporter: MagicMock) -> list[str]:
    return [c.args[0] for c in reporter.attach_text.call_args_list]


# ---------------------------------------------------------------------------
# 失敗時の証跡
# ---------------------------------------------------------------------------

class TestFailureCapture:
    """on_test_failure の証跡採取テスト。"""

    def test_single_screenshot_and_exception(self, observer, reporter, fake_driver):
        """失敗 1 件につきスクリーンショットと例外テキストが 1 つずつ添付されること。"""
        observer.on_test_failure("test_checkout", AssertionError("total mismatch"))
        reporter.attach_screenshot.assert_called_once_with(fake_driver, "Failure Screenshot")
        assert attachment_names(reporter) == ["Exception"]
        assert "total mismatch" in reporter.attach_text.call_args.args[1]

    def test_web_session_attaches_url(self, observer, reporter, fake_driver):
        observer.on_test_failure("test_search", "boom")
        reporter.attach_current_url.assert_called_once_with(fake_driver)

    def test_mobile_session_skips_url(self, registry, reporter):
        driver = MagicMock(spec=AppiumWebDriver)
        registry.set(driver)
        FailureObserver(registry, reporter, results_dir=None).on_test_failure("test_cart", "boom")
        reporter.attach_screenshot.assert_called_once_with(driver, "Failure Screenshot")
        reporter.attach_current_url.assert_not_called()

    def test_no_session_still_attaches_exception(self, registry, reporter):
        """セッションが無くても例外テキストは添付されること。"""
        FailureObserver(registry, reporter, results_dir=None).on_test_failure("test_x", "boom")
        reporter.attach_screenshot.assert_called_once_with(None, "Failure Screenshot")
        assert attachment_names(reporter) == ["Exception"]

    def test_capture_error_is_swallowed(self, observer, reporter, caplog):
        reporter.attach_screenshot.side_effect = RuntimeError("allure broken")
        observer.on_test_failure("test_x", "boom")
        assert observer.counts[OutcomeStatus.FAILED] == 1
        assert "allure broken" in caplog.text

    def test_success_attaches_nothing(self, observer, reporter):
        observer.on_test_success("test_ok")
        reporter.attach_screenshot.assert_not_called()
        reporter.attach_text.assert_not_called()

    def test_skip_attaches_nothing(self, observer, reporter):
        observer.on_test_skipped("test_db", "db.enabled=false")
        reporter.attach_screenshot.assert_not_called()


class TestFormatCause:
    """format_cause のテスト。"""

    def test_exception_includes_traceback(self):
        try:
            raise ValueError("bad value")
        except ValueError as exc:
            text = format_cause(exc)
        assert "Traceback" in text
        assert "ValueError: bad value" in text

    def test_text(self):
        assert format_cause("assert 1 == 2") == "assert 1 == 2"

    def test_none(self):
        assert format_cause(None) == ""


# ---------------------------------------------------------------------------
# イベントの振り分け
# ---------------------------------------------------------------------------

class TestNotify:
    """notify のテスト。"""

    @pytest.mark.parametrize("status", list(OutcomeStatus))
    def test_counts_by_status(self, observer, status):
        observer.notify(Outcome("test_x", status, "cause"))
        assert observer.counts[status] == 1
        assert sum(observer.counts.values()) == 1

    def test_failed_within_threshold_is_not_captured(self, observer, reporter):
        observer.notify(Outcome("test_x", OutcomeStatus.FAILED_WITHIN_THRESHOLD, "flaky"))
        reporter.attach_screenshot.assert_not_called()

    def test_test_start_sets_report_metadata(self, observer):
        with patch("qat.harness.listener.allure.dynamic") as dynamic:
            observer.on_test_start("test_login")
        dynamic.title.assert_called_once_with("test_login")
        dynamic.parent_suite.assert_called_once_with("Mobile Suite")


# ---------------------------------------------------------------------------
# 結果ディレクトリ
# ---------------------------------------------------------------------------

class TestResultsDirCleaning:
    """結果ディレクトリの初期化テスト。"""

    def test_cleaned_once_per_process(self, registry, reporter, tmp_path, monkeypatch):
        monkeypatch.setattr(listener, "_results_cleared", False)
        results = tmp_path / "allure-results"
        FailureObserver(registry, reporter, results_dir=results).on_start("first")
        FailureObserver(registry, reporter, results_dir=results).on_start("second")
        reporter.clean_results_dir.assert_called_once_with(results)

    def test_disabled(self, registry, reporter, monkeypatch):
        monkeypatch.setattr(listener, "_results_cleared", False)
        FailureObserver(registry, reporter, results_dir=None).on_start()
        reporter.clean_results_dir.assert_not_called()
