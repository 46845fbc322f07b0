"""
待機戦略 — WebDriverWait による要素状態の有界待機

要素が可視・クリック可能・不可視になるまで待機する。
対象は WebElement または Locator のどちらでもよく、
Locator の場合は待機の各ポーリングでセッションから再解決される。

主な機能:
  - Waits.wait_for_visible: 可視化待機
  - Waits.wait_for_clickable: クリック可能待機
  - Waits.wait_for_invisible: 不可視化待機
  - Waits.locate / find_all: 待機なしの即時解決

タイムアウト時は要素記述子・期待状態・秒数を含む ElementTimeoutError
（組み込み TimeoutError のサブクラス）を送出する。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait

from qat.core.locators import Locator, describe_element
from qat.core.session import SessionRegistry, default_registry

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
DEFAULT_POLL_FREQUENCY = 0.5


class ElementTimeoutError(TimeoutError):
    """要素が期待状態に到達しなかった場合のエラー。

    Attributes:
        element: 要素記述子
        state: 期待していた状態（"visible" / "clickable" / "invisible"）
        timeout: 待機した秒数
    """

    def __init__(self, element: str, state: str, timeout: float) -> None:
        self.element = element
        self.state = state
        self.timeout = timeout
        super().__init__(f"{element} が {timeout} 秒以内に {state} になりませんでした")


# ---------------------------------------------------------------------------
# 待機条件
# ---------------------------------------------------------------------------

def _visible(target: Any) -> Callable[[Any], Any]:
    if isinstance(target, Locator):
        return EC.visibility_of_element_located(target.as_tuple())
    return EC.visibility_of(target)


def _clickable(target: Any) -> Callable[[Any], Any]:
    if isinstance(target, Locator):
        return EC.element_to_be_clickable(target.as_tuple())
    return EC.element_to_be_clickable(target)


def _invisible(target: Any) -> Callable[[Any], Any]:
    if isinstance(target, Locator):
        return EC.invisibility_of_element_located(target.as_tuple())
    return EC.invisibility_of_element(target)


_CONDITIONS: dict[str, Callable[[Any], Callable[[Any], Any]]] = {
    "visible": _visible,
    "clickable": _clickable,
    "invisible": _invisible,
}


# ---------------------------------------------------------------------------
# 待機
# ---------------------------------------------------------------------------

class Waits:
    """セッションレジストリ上のドライバに対する有界待機。

    Args:
        registry: ドライバを参照するレジストリ
        poll_frequency: ポーリング間隔（秒）
    """

    def __init__(
        self,
        registry: Optional[SessionRegistry] = None,
        poll_frequency: float = DEFAULT_POLL_FREQUENCY,
    ) -> None:
        self.registry = registry or default_registry
        self.poll_frequency = poll_frequency

    @property
    def driver(self) -> WebDriver:
        return self.registry.require()

    def until(self, target: Any, state: str, timeout: float = DEFAULT_TIMEOUT) -> Any:
        """対象が state になるまで待機し、条件の戻り値を返す。

        timeout が 0 以下の場合はポーリングせず一度だけ判定する。

        Raises:
            ElementTimeoutError: タイムアウトまでに state にならなかった場合
            SessionNotStartedError: セッションが未登録の場合
            ValueError: 未知の state が指定された場合
        """
        try:
            condition = _CONDITIONS[state](target)
        except KeyError:
            raise ValueError(f"未知の待機状態です: {state!r}") from None

        driver = self.driver
        if timeout <= 0:
            try:
                value = condition(driver)
            except (NoSuchElementException, StaleElementReferenceException) as exc:
                raise ElementTimeoutError(describe_element(target), state, timeout) from exc
            if not value:
                raise ElementTimeoutError(describe_element(target), state, timeout)
            return value

        try:
            return WebDriverWait(
                driver, timeout, poll_frequency=self.poll_frequency
            ).until(condition)
        except TimeoutException as exc:
            raise ElementTimeoutError(describe_element(target), state, timeout) from exc

    def wait_for_visible(self, target: Any, timeout: float = DEFAULT_TIMEOUT) -> WebElement:
        """要素が可視になるまで待機し、その WebElement を返す。"""
        return self.until(target, "visible", timeout)

    def wait_for_clickable(self, target: Any, timeout: float = DEFAULT_TIMEOUT) -> WebElement:
        """要素がクリック可能になるまで待機し、その WebElement を返す。"""
        return self.until(target, "clickable", timeout)

    def wait_for_invisible(self, target: Any, timeout: float = DEFAULT_TIMEOUT) -> bool:
        """要素が不可視（または DOM から消失）になるまで待機する。"""
        self.until(target, "invisible", timeout)
        return True

    def locate(self, target: Any) -> WebElement:
        """待機せずに WebElement を解決する。"""
        if isinstance(target, Locator):
            return self.driver.find_element(*target.as_tuple())
        return target

    def find_all(self, locator: Locator) -> list[WebElement]:
        return list(self.driver.find_elements(*locator.as_tuple()))
