"""
GooglePage — 検索エンジンのトップページ
"""

from __future__ import annotations

from qat import constants
from qat.core.locators import by_name
from qat.pages.base import BasePage


class GooglePage(BasePage):
    """検索ボックスを持つトップページ。"""

    SEARCH_BOX = by_name("q", "Search box")
    SEARCH_BUTTON = by_name("btnK", "Google Search button")
    LUCKY_BUTTON = by_name("btnI", "I'm Feeling Lucky button")

    def open(self, url: str = constants.GOOGLE_URL) -> GooglePage:
        self.actions.navigate_to(url)
        return self

    def search_for(self, term: str) -> None:
        self.actions.type_text(self.SEARCH_BOX, term)
        self.actions.press_enter(self.SEARCH_BOX)

    def is_search_box_displayed(self) -> bool:
        return self.validations.is_displayed_with_wait(self.SEARCH_BOX, constants.TIMEOUT_DEFAULT)

    def search_box_value(self) -> str:
        return self.actions.get_attribute(self.SEARCH_BOX, "value") or ""

    def title(self) -> str:
        return self.actions.get_page_title()
