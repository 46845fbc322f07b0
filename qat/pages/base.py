"""
BasePage — ページオブジェクトの共通基底

ページオブジェクトは要素を Locator または PlatformLocator で宣言する。
PlatformLocator は操作のたびにセッションの platformName で
Android / iOS のどちらかへ解決される。

主な機能:
  - resolve(): PlatformLocator → Locator の解決
  - tap / type_text / text_of / is_visible / wait_visible / find_all:
    Actions / Validations への委譲
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional, Union

from qat.core.actions import Actions
from qat.core.locators import Locator, PlatformLocator, platform_of
from qat.core.session import SessionRegistry, default_registry
from qat.core.validations import Validations

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)

Element = Union[Locator, PlatformLocator]


class BasePage:
    """ページオブジェクトの基底クラス。

    Args:
        registry: ドライバを参照するレジストリ
        actions: 操作ラッパー（省略時は registry から生成）
        validations: 検証ラッパー（省略時は registry から生成）
    """

    def __init__(
        self,
        registry: Optional[SessionRegistry] = None,
        actions: Optional[Actions] = None,
        validations: Optional[Validations] = None,
    ) -> None:
        self.registry = registry or default_registry
        self.actions = actions or Actions(self.registry)
        self.validations = validations or Validations(self.registry)

    def _page(self, page_cls: type[BasePage]) -> BasePage:
        """同じ registry / ラッパーを共有する別ページを生成する。"""
        return page_cls(self.registry, self.actions, self.validations)

    @property
    def driver(self) -> WebDriver:
        return self.registry.require()

    @property
    def platform(self) -> str:
        return platform_of(self.driver)

    def resolve(self, element: Element) -> Locator:
        if isinstance(element, PlatformLocator):
            return element.for_platform(self.platform)
        return element

    # -----------------------------------------------------------------------
    # 委譲ヘルパー
    # -----------------------------------------------------------------------

    def tap(self, element: Element, timeout: Optional[float] = None) -> None:
        self.actions.click(self.resolve(element), timeout)

    def type_text(self, element: Element, text: str, timeout: Optional[float] = None) -> None:
        self.actions.type_text(self.resolve(element), text, timeout)

    def text_of(self, element: Element, timeout: Optional[float] = None) -> str:
        return self.actions.get_text(self.resolve(element), timeout)

    def wait_visible(self, element: Element, timeout: Optional[float] = None) -> WebElement:
        return self.actions.wait_for_visible(self.resolve(element), timeout)

    def is_visible(self, element: Element, timeout: float = 0) -> bool:
        """要素が可視なら True。失敗はすべて False（例外は送出しない）。"""
        try:
            locator = self.resolve(element)
        except Exception as exc:
            logger.debug("ロケータを解決できません: %s", exc)
            return False
        if timeout > 0:
            return self.validations.is_displayed_with_wait(locator, timeout)
        return self.validations.is_displayed(locator)

    def find_all(self, element: Element) -> list[WebElement]:
        return self.actions.find_elements(self.resolve(element))
