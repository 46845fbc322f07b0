"""
ProductsPage — 商品一覧（カタログ）画面

主な機能:
  - open_product(): 一覧の n 番目（1 始まり）の商品詳細を開く
  - sort_by(): 名前・価格での並べ替え
  - product_names() / product_count(): 一覧の内容
  - cart_count() / open_cart(): カートバッジ
"""

from __future__ import annotations

import enum
import logging
from typing import Union

from qat.catalog import Product
from qat.core.locators import PlatformLocator, accessibility_id, xpath
from qat.pages.base import BasePage

logger = logging.getLogger(__name__)


class SortOption(enum.Enum):
    """並べ替えダイアログの選択肢（値は accessibility id）。"""

    NAME_ASC = "nameAsc"
    NAME_DESC = "nameDesc"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"


class ProductsPage(BasePage):
    """商品一覧画面。"""

    PRODUCTS_SCREEN = PlatformLocator.same(accessibility_id("products screen", "Products screen"))
    SORT_BUTTON = PlatformLocator.same(accessibility_id("sort button", "Sort button"))
    CART_BADGE = PlatformLocator.same(accessibility_id("cart badge", "Cart badge"))
    CART_BADGE_COUNT = PlatformLocator(
        android=xpath(
            "//android.view.ViewGroup[@content-desc='cart badge']/android.widget.TextView",
            "Cart badge count",
        ),
        ios=xpath(
            "//XCUIElementTypeOther[@name='cart badge']/XCUIElementTypeStaticText",
            "Cart badge count",
        ),
    )
    STORE_ITEM = PlatformLocator.same(accessibility_id("store item", "Store item"))
    STORE_ITEM_TEXT = PlatformLocator.same(accessibility_id("store item text", "Store item name"))
    STORE_ITEM_PRICE = PlatformLocator.same(accessibility_id("store item price", "Store item price"))

    @staticmethod
    def product_locator(index: int) -> PlatformLocator:
        """一覧の n 番目（1 始まり）の商品を指すロケータ。"""
        return PlatformLocator(
            android=xpath(
                f"(//android.view.ViewGroup[@content-desc='store item'])[{index}]",
                f"Store item #{index}",
            ),
            ios=xpath(
                f"(//XCUIElementTypeOther[@name='store item'])[{index}]",
                f"Store item #{index}",
            ),
        )

    def is_displayed(self, timeout: float = 10) -> bool:
        return self.is_visible(self.PRODUCTS_SCREEN, timeout=timeout)

    def open_product(self, product: Union[Product, int]):
        from qat.pages.mobile.product_details import ProductDetailsPage

        index = product.index if isinstance(product, Product) else product
        logger.info("商品 #%d の詳細を開きます", index)
        self.tap(self.product_locator(index))
        return self._page(ProductDetailsPage)

    def product_count(self) -> int:
        return len(self.find_all(self.STORE_ITEM))

    def product_names(self) -> list[str]:
        self.wait_visible(self.STORE_ITEM_TEXT)
        return [element.text for element in self.find_all(self.STORE_ITEM_TEXT)]

    def product_prices(self) -> list[float]:
        from qat.pages.mobile.cart import parse_price

        self.wait_visible(self.STORE_ITEM_PRICE)
        return [parse_price(element.text) for element in self.find_all(self.STORE_ITEM_PRICE)]

    def sort_by(self, option: SortOption) -> None:
        self.tap(self.SORT_BUTTON)
        self.tap(PlatformLocator.same(accessibility_id(option.value, f"Sort {option.name}")))

    def cart_count(self) -> int:
        """カートバッジの数値。バッジが無ければ 0。"""
        if not self.is_visible(self.CART_BADGE_COUNT, timeout=2):
            return 0
        digits = "".join(ch for ch in self.text_of(self.CART_BADGE_COUNT) if ch.isdigit())
        return int(digits) if digits else 0

    def open_cart(self):
        from qat.pages.mobile.cart import CartPage

        self.tap(self.CART_BADGE)
        return self._page(CartPage)
