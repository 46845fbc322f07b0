"""
ProductDetailsPage — 商品詳細画面

数量カウンター・カラー選択・レビュー評価・カート追加を操作する。
"""

from __future__ import annotations

import logging

from qat.catalog import Color
from qat.core.locators import PlatformLocator, accessibility_id, xpath
from qat.pages.base import BasePage
from qat.pages.mobile.cart import parse_price

logger = logging.getLogger(__name__)


class ProductDetailsPage(BasePage):
    """商品詳細画面。"""

    PRODUCT_SCREEN = PlatformLocator.same(accessibility_id("product screen", "Product screen"))
    PRODUCT_NAME = PlatformLocator(
        android=xpath(
            "//android.view.ViewGroup[@content-desc='container header']/android.widget.TextView",
            "Product name",
        ),
        ios=xpath(
            "//XCUIElementTypeOther[@name='container header']/XCUIElementTypeStaticText",
            "Product name",
        ),
    )
    PRODUCT_PRICE = PlatformLocator.same(accessibility_id("product price", "Product price"))
    ADD_TO_CART = PlatformLocator.same(accessibility_id("Add To Cart button", "Add To Cart button"))
    COUNTER_PLUS = PlatformLocator.same(accessibility_id("counter plus button", "Counter plus"))
    COUNTER_MINUS = PlatformLocator.same(accessibility_id("counter minus button", "Counter minus"))
    COUNTER_AMOUNT = PlatformLocator.same(accessibility_id("counter amount", "Counter amount"))
    CART_BADGE = PlatformLocator.same(accessibility_id("cart badge", "Cart badge"))

    @staticmethod
    def color_locator(color: Color) -> PlatformLocator:
        return PlatformLocator.same(accessibility_id(color.accessibility_id, f"{color.name} color"))

    @staticmethod
    def review_star_locator(stars: int) -> PlatformLocator:
        if not 1 <= stars <= 5:
            raise ValueError(f"評価は 1〜5 で指定してください: {stars}")
        return PlatformLocator.same(accessibility_id(f"review star {stars}", f"Review star {stars}"))

    def is_displayed(self, timeout: float = 10) -> bool:
        return self.is_visible(self.PRODUCT_SCREEN, timeout=timeout)

    def product_name(self) -> str:
        return self.text_of(self.PRODUCT_NAME)

    def price(self) -> float:
        return parse_price(self.text_of(self.PRODUCT_PRICE))

    def quantity(self) -> int:
        return int(self.text_of(self.COUNTER_AMOUNT).strip())

    def increase_quantity(self, times: int = 1) -> None:
        for _ in range(times):
            self.tap(self.COUNTER_PLUS)

    def decrease_quantity(self, times: int = 1) -> None:
        for _ in range(times):
            self.tap(self.COUNTER_MINUS)

    def set_quantity(self, quantity: int) -> None:
        """カウンターを quantity まで増減させる。"""
        current = self.quantity()
        if quantity > current:
            self.increase_quantity(quantity - current)
        elif quantity < current:
            self.decrease_quantity(current - quantity)

    def select_color(self, color: Color) -> None:
        logger.info("カラーを選択します: %s", color.name)
        self.tap(self.color_locator(color))

    def is_color_displayed(self, color: Color) -> bool:
        return self.is_visible(self.color_locator(color), timeout=5)

    def rate(self, stars: int) -> None:
        self.tap(self.review_star_locator(stars))

    def add_to_cart(self) -> None:
        self.tap(self.ADD_TO_CART)

    def open_cart(self):
        from qat.pages.mobile.cart import CartPage

        self.tap(self.CART_BADGE)
        return self._page(CartPage)
