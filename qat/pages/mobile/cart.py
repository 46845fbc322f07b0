"""
CartPage — カート画面

主な機能:
  - total_price_value() / total_items_count(): 合計金額・合計点数の読み取り
  - verify_total_price(): 期待金額との比較（許容誤差 0.01）
  - increase_quantity() / decrease_quantity() / remove_all_items(): カート内容の操作
  - proceed_to_checkout() / go_shopping(): 画面遷移

金額表示（"$39.98"、"$1,049.90" など）と点数表示（"2 items"）の
解析は parse_price / parse_item_count として単独でも使える。
"""

from __future__ import annotations

import logging
import time

from qat.core.locators import PlatformLocator, accessibility_id, xpath
from qat.pages.base import BasePage

logger = logging.getLogger(__name__)

PRICE_TOLERANCE = 0.01

# remove_all_items() の 1 回あたりの待ち時間（秒）と上限回数
_REMOVE_INTERVAL = 0.5
_REMOVE_MAX_ATTEMPTS = 20


# ---------------------------------------------------------------------------
# 表示値の解析
# ---------------------------------------------------------------------------

def parse_price(text: str) -> float:
    """"$1,049.90" → 1049.9。"$" と "," と空白を除いて float にする。

    Raises:
        ValueError: 数値として解析できない場合
    """
    cleaned = text.replace("$", "").replace(",", "").strip()
    return float(cleaned)


def parse_item_count(text: str) -> int:
    """"2 items" → 2。数字以外を除いて int にする（数字が無ければ 0）。"""
    digits = "".join(ch for ch in text if ch.isdigit())
    return int(digits) if digits else 0


def prices_match(actual: float, expected: float, tolerance: float = PRICE_TOLERANCE) -> bool:
    return abs(actual - expected) < tolerance


# ---------------------------------------------------------------------------
# ページ
# ---------------------------------------------------------------------------

class CartPage(BasePage):
    """カート画面。"""

    CART_SCREEN = PlatformLocator.same(accessibility_id("cart screen", "Cart screen"))
    PROCEED_TO_CHECKOUT = PlatformLocator.same(
        accessibility_id("Proceed To Checkout button", "Proceed To Checkout button")
    )
    REMOVE_ITEM = PlatformLocator.same(accessibility_id("remove item", "Remove item"))
    COUNTER_PLUS = PlatformLocator.same(accessibility_id("counter plus button", "Counter plus"))
    COUNTER_MINUS = PlatformLocator.same(accessibility_id("counter minus button", "Counter minus"))
    COUNTER_AMOUNT = PlatformLocator.same(accessibility_id("counter amount", "Counter amount"))
    TOTAL_PRICE = PlatformLocator.same(accessibility_id("total price", "Total price"))
    TOTAL_NUMBER = PlatformLocator.same(accessibility_id("total number", "Total number of items"))
    PRODUCT_LABEL = PlatformLocator.same(accessibility_id("product label", "Product label"))
    PRODUCT_PRICE = PlatformLocator.same(accessibility_id("product price", "Product price"))
    PRODUCT_ROW = PlatformLocator.same(accessibility_id("product row", "Product row"))
    NO_ITEMS = PlatformLocator(
        android=xpath("//android.widget.TextView[contains(@text, 'No Items')]", "No Items message"),
        ios=xpath("//XCUIElementTypeStaticText[contains(@name, 'No Items')]", "No Items message"),
    )
    GO_SHOPPING = PlatformLocator.same(accessibility_id("Go Shopping button", "Go Shopping button"))

    def is_displayed(self, timeout: float = 10) -> bool:
        return self.is_visible(self.CART_SCREEN, timeout=timeout)

    # -------------------------------------------------------------------
    # 合計
    # -------------------------------------------------------------------

    def total_price_text(self) -> str:
        return self.text_of(self.TOTAL_PRICE)

    def total_price_value(self) -> float:
        return parse_price(self.total_price_text())

    def total_items_count(self) -> int:
        return parse_item_count(self.text_of(self.TOTAL_NUMBER))

    def verify_total_price(self, expected: float) -> bool:
        actual = self.total_price_value()
        matched = prices_match(actual, expected)
        if not matched:
            logger.warning("合計金額が一致しません（期待 %.2f / 実際 %.2f）", expected, actual)
        return matched

    # -------------------------------------------------------------------
    # 明細
    # -------------------------------------------------------------------

    def item_count(self) -> int:
        """カート内の明細行数。"""
        return len(self.find_all(self.PRODUCT_ROW))

    def item_names(self) -> list[str]:
        return [element.text for element in self.find_all(self.PRODUCT_LABEL)]

    def item_prices(self) -> list[float]:
        return [parse_price(element.text) for element in self.find_all(self.PRODUCT_PRICE)]

    def quantity(self) -> int:
        return int(self.text_of(self.COUNTER_AMOUNT).strip())

    def increase_quantity(self, times: int = 1) -> None:
        for _ in range(times):
            self.tap(self.COUNTER_PLUS)

    def decrease_quantity(self, times: int = 1) -> None:
        for _ in range(times):
            self.tap(self.COUNTER_MINUS)

    def remove_first_item(self) -> None:
        self.tap(self.REMOVE_ITEM)

    def remove_all_items(self) -> None:
        """削除ボタンが無くなるまで先頭の明細を削除する。"""
        for _ in range(_REMOVE_MAX_ATTEMPTS):
            buttons = self.find_all(self.REMOVE_ITEM)
            if not buttons:
                return
            buttons[0].click()
            time.sleep(_REMOVE_INTERVAL)
        logger.warning("remove_all_items: %d 回試行しても明細が残っています", _REMOVE_MAX_ATTEMPTS)

    def is_empty(self, timeout: float = 5) -> bool:
        return self.is_visible(self.NO_ITEMS, timeout=timeout)

    # -------------------------------------------------------------------
    # 遷移
    # -------------------------------------------------------------------

    def proceed_to_checkout(self) -> None:
        """チェックアウトへ進む。未ログインの場合はログイン画面が表示される。"""
        self.tap(self.PROCEED_TO_CHECKOUT)

    def go_shopping(self):
        from qat.pages.mobile.products import ProductsPage

        self.tap(self.GO_SHOPPING)
        return self._page(ProductsPage)
