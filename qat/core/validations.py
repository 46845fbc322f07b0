"""
検証ラッパー — 失敗時に例外を送出する検証と、例外を送出しない状態プローブ

主な機能:
  - validate_*: 期待と異なれば AssertionError を送出する
    （メッセージに論理名と "Expected: ..., Actual: ..." を含む）
  - is_displayed / is_enabled / is_selected / is_displayed_with_wait:
    いかなる失敗でも False を返すプローブ

両者は同じ状態取得プリミティブ（_read_state）を共有し、
失敗の伝え方だけが異なる。要素検証で待機がタイムアウトした場合は
タイムアウトを原因として連鎖させた AssertionError に変換する。
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from selenium.common.exceptions import NoSuchElementException, StaleElementReferenceException

from qat.core.locators import Locator, describe_element
from qat.core.session import SessionRegistry, default_registry
from qat.core.waits import DEFAULT_POLL_FREQUENCY, DEFAULT_TIMEOUT, ElementTimeoutError, Waits

logger = logging.getLogger(__name__)


def _mismatch(subject: str, expected: Any, actual: Any) -> str:
    return f"{subject}. Expected: {expected}, Actual: {actual}"


class Validations:
    """検証とプローブの集合。

    Args:
        registry: ドライバを参照するレジストリ
        default_timeout: 検証の待機秒数（timeout 省略時）
        poll_frequency: 待機のポーリング間隔（秒）
    """

    def __init__(
        self,
        registry: Optional[SessionRegistry] = None,
        default_timeout: float = DEFAULT_TIMEOUT,
        poll_frequency: float = DEFAULT_POLL_FREQUENCY,
    ) -> None:
        self.registry = registry or default_registry
        self.default_timeout = default_timeout
        self.waits = Waits(self.registry, poll_frequency=poll_frequency)

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.default_timeout if timeout is None else timeout

    # -----------------------------------------------------------------------
    # 状態取得プリミティブ
    # -----------------------------------------------------------------------

    def _read_state(self, target: Any, state: str, timeout: float) -> bool:
        """要素の状態を取得する。

        "displayed" / "hidden" は待機が成功すれば True。
        "enabled" / "selected" は可視化を待ってから状態を読む
        （timeout が 0 以下なら待機せず即時に解決する）。
        要素が見つからない・失効している場合も ElementTimeoutError とする。

        Raises:
            ElementTimeoutError: 待機がタイムアウトした場合
        """
        if state == "displayed":
            self.waits.until(target, "visible", timeout)
            return True
        if state == "hidden":
            self.waits.until(target, "invisible", timeout)
            return True

        if state not in ("enabled", "selected"):
            raise ValueError(f"未知の状態です: {state!r}")
        try:
            if timeout > 0:
                element = self.waits.until(target, "visible", timeout)
            else:
                element = self.waits.locate(target)
            if state == "enabled":
                return bool(element.is_enabled())
            return bool(element.is_selected())
        except (NoSuchElementException, StaleElementReferenceException) as exc:
            raise ElementTimeoutError(describe_element(target), "present", timeout) from exc

    def _probe(self, target: Any, state: str, timeout: float) -> bool:
        try:
            return self._read_state(target, state, timeout)
        except Exception as exc:
            logger.debug("プローブ %s は False（%s: %s）", state, type(exc).__name__, exc)
            return False

    def _assert_state(
        self,
        target: Any,
        state: str,
        expected: bool,
        name: Optional[str],
        timeout: Optional[float],
        labels: tuple[str, str],
    ) -> None:
        label = name or describe_element(target)
        positive, negative = labels
        want = positive if expected else negative
        try:
            actual = self._read_state(target, state, self._timeout(timeout))
        except ElementTimeoutError as exc:
            raise AssertionError(
                _mismatch(f"{label} is not {want}", want, f"not {want} within {exc.timeout}s")
            ) from exc
        if actual != expected:
            got = positive if actual else negative
            raise AssertionError(_mismatch(f"{label} is not {want}", want, got))
        logger.info("検証成功: %s は %s", label, want)

    def _text_of(self, target: Any, name: Optional[str], timeout: Optional[float]) -> str:
        label = name or describe_element(target)
        try:
            element = self.waits.wait_for_visible(target, self._timeout(timeout))
        except ElementTimeoutError as exc:
            raise AssertionError(
                _mismatch(f"{label} is not displayed", "displayed", "not displayed")
            ) from exc
        return element.text

    # -----------------------------------------------------------------------
    # 要素状態の検証
    # -----------------------------------------------------------------------

    def validate_element_is_displayed(
        self, target: Any, name: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        self._assert_state(target, "displayed", True, name, timeout, ("displayed", "not displayed"))

    def validate_element_is_not_displayed(
        self, target: Any, name: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        label = name or describe_element(target)
        try:
            self._read_state(target, "hidden", self._timeout(timeout))
        except ElementTimeoutError as exc:
            raise AssertionError(
                _mismatch(f"{label} is still displayed", "not displayed", "displayed")
            ) from exc
        logger.info("検証成功: %s は非表示", label)

    def validate_element_is_enabled(
        self, target: Any, name: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        self._assert_state(target, "enabled", True, name, timeout, ("enabled", "disabled"))

    def validate_element_is_disabled(
        self, target: Any, name: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        self._assert_state(target, "enabled", False, name, timeout, ("enabled", "disabled"))

    def validate_element_is_selected(
        self, target: Any, name: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        self._assert_state(target, "selected", True, name, timeout, ("selected", "not selected"))

    def validate_element_is_not_selected(
        self, target: Any, name: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        self._assert_state(target, "selected", False, name, timeout, ("selected", "not selected"))

    # -----------------------------------------------------------------------
    # テキストの検証
    # -----------------------------------------------------------------------

    def validate_text_equals(
        self, target: Any, expected: str, name: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        label = name or describe_element(target)
        actual = self._text_of(target, label, timeout)
        if actual != expected:
            raise AssertionError(_mismatch(f"{label} text mismatch", expected, actual))
        logger.info("検証成功: %s のテキストが一致（%s）", label, expected)

    def validate_text_contains(
        self, target: Any, expected: str, name: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        label = name or describe_element(target)
        actual = self._text_of(target, label, timeout)
        if expected not in actual:
            raise AssertionError(
                _mismatch(f"{label} text does not contain expected value", expected, actual)
            )
        logger.info("検証成功: %s のテキストが %s を含む", label, expected)

    def validate_text_not_contains(
        self, target: Any, unexpected: str, name: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        label = name or describe_element(target)
        actual = self._text_of(target, label, timeout)
        if unexpected in actual:
            raise AssertionError(
                _mismatch(f"{label} text contains unexpected value", f"not '{unexpected}'", actual)
            )

    def validate_text_is_not_empty(
        self, target: Any, name: Optional[str] = None, timeout: Optional[float] = None
    ) -> None:
        label = name or describe_element(target)
        actual = self._text_of(target, label, timeout)
        if not actual.strip():
            raise AssertionError(_mismatch(f"{label} text is empty", "non-empty text", repr(actual)))

    # -----------------------------------------------------------------------
    # ページの検証
    # -----------------------------------------------------------------------

    def validate_page_title(self, expected: str) -> None:
        actual = self.registry.require().title
        if actual != expected:
            raise AssertionError(_mismatch("Page title mismatch", expected, actual))
        logger.info("検証成功: ページタイトル = %s", expected)

    def validate_page_title_contains(self, expected: str) -> None:
        actual = self.registry.require().title
        if expected not in actual:
            raise AssertionError(
                _mismatch("Page title does not contain expected value", expected, actual)
            )
        logger.info("検証成功: ページタイトルが %s を含む", expected)

    def validate_url(self, expected: str) -> None:
        actual = self.registry.require().current_url
        if actual != expected:
            raise AssertionError(_mismatch("URL mismatch", expected, actual))

    def validate_url_contains(self, expected: str) -> None:
        actual = self.registry.require().current_url
        if expected not in actual:
            raise AssertionError(_mismatch("URL does not contain expected value", expected, actual))

    # -----------------------------------------------------------------------
    # 属性・件数の検証
    # -----------------------------------------------------------------------

    def validate_attribute(
        self, target: Any, attribute: str, expected: str, name: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        label = name or describe_element(target)
        actual = self._attribute_of(target, attribute, label, timeout)
        if actual != expected:
            raise AssertionError(_mismatch(f"{label} attribute '{attribute}' mismatch", expected, actual))

    def validate_attribute_contains(
        self, target: Any, attribute: str, expected: str, name: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        label = name or describe_element(target)
        actual = self._attribute_of(target, attribute, label, timeout)
        if actual is None or expected not in actual:
            raise AssertionError(
                _mismatch(f"{label} attribute '{attribute}' does not contain expected value",
                          expected, actual)
            )

    def _attribute_of(
        self, target: Any, attribute: str, label: str, timeout: Optional[float]
    ) -> Optional[str]:
        try:
            element = self.waits.wait_for_visible(target, self._timeout(timeout))
        except ElementTimeoutError as exc:
            raise AssertionError(
                _mismatch(f"{label} is not displayed", "displayed", "not displayed")
            ) from exc
        return element.get_attribute(attribute)

    def validate_count_equals(self, locator: Locator, expected: int, name: Optional[str] = None) -> None:
        label = name or locator.label
        actual = len(self.waits.find_all(locator))
        if actual != expected:
            raise AssertionError(_mismatch(f"{label} count mismatch", expected, actual))

    def validate_count_greater_than(
        self, locator: Locator, minimum: int, name: Optional[str] = None
    ) -> None:
        label = name or locator.label
        actual = len(self.waits.find_all(locator))
        if actual <= minimum:
            raise AssertionError(_mismatch(f"{label} count is not greater than {minimum}",
                                           f"> {minimum}", actual))

    # -----------------------------------------------------------------------
    # 値の検証
    # -----------------------------------------------------------------------

    def validate_true(self, condition: bool, message: str) -> None:
        if not condition:
            raise AssertionError(_mismatch(message, True, condition))

    def validate_false(self, condition: bool, message: str) -> None:
        if condition:
            raise AssertionError(_mismatch(message, False, condition))

    def validate_equals(self, actual: Any, expected: Any, message: str) -> None:
        if actual != expected:
            raise AssertionError(_mismatch(message, expected, actual))

    def validate_not_equals(self, actual: Any, unexpected: Any, message: str) -> None:
        if actual == unexpected:
            raise AssertionError(_mismatch(message, f"not {unexpected}", actual))

    # -----------------------------------------------------------------------
    # プローブ（例外を送出しない）
    # -----------------------------------------------------------------------

    def is_displayed(self, target: Any, timeout: float = 0) -> bool:
        return self._probe(target, "displayed", timeout)

    def is_enabled(self, target: Any, timeout: float = 0) -> bool:
        return self._probe(target, "enabled", timeout)

    def is_selected(self, target: Any, timeout: float = 0) -> bool:
        return self._probe(target, "selected", timeout)

    def is_displayed_with_wait(self, target: Any, timeout: float = DEFAULT_TIMEOUT) -> bool:
        """timeout 秒まで可視化を待ち、可視なら True。失敗はすべて False。"""
        return self._probe(target, "displayed", timeout)
