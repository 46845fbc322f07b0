"""
アクションラッパー — 待機付きの要素操作・ページ操作

すべての要素操作は、事前に可視またはクリック可能になるまでの有界待機を行い、
その後ドライバのネイティブ操作を実行する。各操作は操作名と要素記述子をログに出す。

主な機能:
  - 要素操作: click / double_click / right_click / type_text / append_text /
    clear_text / press_enter / press_tab / get_text / get_attribute /
    select_by_* / hover / scroll_to_element
  - ページ操作: get_page_title / get_current_url / navigate_to /
    refresh_page / go_back / go_forward
  - 待機: wait_for_visible / wait_for_clickable / wait_for_invisible

待機のタイムアウトは ElementTimeoutError としてそのまま呼び出し元へ伝播する。
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

from selenium.webdriver.common.action_chains import ActionChains
from selenium.webdriver.common.keys import Keys
from selenium.webdriver.support.ui import Select

from qat.core.locators import Locator, describe_element
from qat.core.session import SessionRegistry, default_registry
from qat.core.waits import DEFAULT_POLL_FREQUENCY, DEFAULT_TIMEOUT, Waits

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)


class Actions:
    """待機付き操作の集合。

    Args:
        registry: ドライバを参照するレジストリ
        default_timeout: timeout 省略時の待機秒数
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

    @property
    def driver(self) -> WebDriver:
        return self.registry.require()

    def _timeout(self, timeout: Optional[float]) -> float:
        return self.default_timeout if timeout is None else timeout

    def _log(self, action: str, target: Any, detail: str = "") -> None:
        # 記述子の取得失敗は "element" に落ちるため操作自体を妨げない
        suffix = f": {detail}" if detail else ""
        logger.info("%s %s%s", action, describe_element(target), suffix)

    # -----------------------------------------------------------------------
    # 要素操作
    # -----------------------------------------------------------------------

    def click(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_clickable(target, self._timeout(timeout))
        self._log("クリック", target)
        element.click()

    def double_click(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_clickable(target, self._timeout(timeout))
        self._log("ダブルクリック", target)
        ActionChains(self.driver).double_click(element).perform()

    def right_click(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_clickable(target, self._timeout(timeout))
        self._log("右クリック", target)
        ActionChains(self.driver).context_click(element).perform()

    def type_text(self, target: Any, text: str, timeout: Optional[float] = None) -> None:
        """既存の値をクリアしてからテキストを入力する。"""
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("入力", target, text)
        element.clear()
        element.send_keys(text)

    def append_text(self, target: Any, text: str, timeout: Optional[float] = None) -> None:
        """既存の値を残したままテキストを追記する。"""
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("追記", target, text)
        element.send_keys(text)

    def clear_text(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("クリア", target)
        element.clear()

    def press_enter(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("Enter 押下", target)
        element.send_keys(Keys.ENTER)

    def press_tab(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("Tab 押下", target)
        element.send_keys(Keys.TAB)

    def get_text(self, target: Any, timeout: Optional[float] = None) -> str:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        text = element.text
        self._log("テキスト取得", target, text)
        return text

    def get_attribute(
        self, target: Any, attribute: str, timeout: Optional[float] = None
    ) -> Optional[str]:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        value = element.get_attribute(attribute)
        self._log("属性取得", target, f"{attribute}={value}")
        return value

    def select_by_text(self, target: Any, text: str, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("選択（表示テキスト）", target, text)
        Select(element).select_by_visible_text(text)

    def select_by_value(self, target: Any, value: str, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("選択（値）", target, value)
        Select(element).select_by_value(value)

    def select_by_index(self, target: Any, index: int, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("選択（インデックス）", target, str(index))
        Select(element).select_by_index(index)

    def hover(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("ホバー", target)
        ActionChains(self.driver).move_to_element(element).perform()

    def scroll_to_element(self, target: Any, timeout: Optional[float] = None) -> None:
        element = self.waits.wait_for_visible(target, self._timeout(timeout))
        self._log("スクロール", target)
        self.driver.execute_script("arguments[0].scrollIntoView(true);", element)

    # -----------------------------------------------------------------------
    # 待機
    # -----------------------------------------------------------------------

    def wait_for_visible(self, target: Any, timeout: Optional[float] = None) -> WebElement:
        return self.waits.wait_for_visible(target, self._timeout(timeout))

    def wait_for_clickable(self, target: Any, timeout: Optional[float] = None) -> WebElement:
        return self.waits.wait_for_clickable(target, self._timeout(timeout))

    def wait_for_invisible(self, target: Any, timeout: Optional[float] = None) -> bool:
        return self.waits.wait_for_invisible(target, self._timeout(timeout))

    def find_elements(self, locator: Locator) -> list[WebElement]:
        """待機せずに一致する要素をすべて返す（0 件なら空リスト）。"""
        return self.waits.find_all(locator)

    # -----------------------------------------------------------------------
    # ページ操作
    # -----------------------------------------------------------------------

    def get_page_title(self) -> str:
        title = self.driver.title
        logger.info("ページタイトル: %s", title)
        return title

    def get_current_url(self) -> str:
        url = self.driver.current_url
        logger.info("現在の URL: %s", url)
        return url

    def navigate_to(self, url: str) -> None:
        logger.info("遷移: %s", url)
        self.driver.get(url)

    def refresh_page(self) -> None:
        logger.info("ページを再読み込みします")
        self.driver.refresh()

    def go_back(self) -> None:
        logger.info("前のページへ戻ります")
        self.driver.back()

    def go_forward(self) -> None:
        logger.info("次のページへ進みます")
        self.driver.forward()
