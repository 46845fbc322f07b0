"""
CheckoutPage — 配送先・支払い情報の入力と注文完了

主な機能:
  - fill_shipping_address() / to_payment(): 配送先フォーム
  - fill_payment() / review_order(): 支払いフォーム
  - place_order() / is_complete() / continue_shopping(): 注文確定
"""

from __future__ import annotations

from dataclasses import dataclass

from qat import constants
from qat.core.locators import PlatformLocator, accessibility_id
from qat.pages.base import BasePage


def _field(label: str) -> PlatformLocator:
    return PlatformLocator.same(accessibility_id(label, label.replace(" input field", "")))


@dataclass(frozen=True)
class ShippingAddress:
    full_name: str = constants.CHECKOUT_FULL_NAME
    address_line1: str = constants.CHECKOUT_ADDRESS_1
    address_line2: str = constants.CHECKOUT_ADDRESS_2
    city: str = constants.CHECKOUT_CITY
    state: str = constants.CHECKOUT_STATE
    zip_code: str = constants.CHECKOUT_ZIP
    country: str = constants.CHECKOUT_COUNTRY


@dataclass(frozen=True)
class PaymentCard:
    holder: str = constants.CARD_HOLDER
    number: str = constants.CARD_NUMBER
    expiration: str = constants.CARD_EXPIRATION
    security_code: str = constants.CARD_SECURITY_CODE


class CheckoutPage(BasePage):
    """チェックアウト（配送先 → 支払い → 確認 → 完了）画面群。"""

    FULL_NAME = _field("Full Name* input field")
    ADDRESS_LINE1 = _field("Address Line 1* input field")
    ADDRESS_LINE2 = _field("Address Line 2 input field")
    CITY = _field("City* input field")
    STATE = _field("State/Region input field")
    ZIP_CODE = _field("Zip Code* input field")
    COUNTRY = _field("Country* input field")
    TO_PAYMENT = PlatformLocator.same(accessibility_id("To Payment button", "To Payment button"))

    PAYMENT_SCREEN = PlatformLocator.same(accessibility_id("checkout payment screen", "Payment screen"))
    CARD_HOLDER = _field("Full Name* input field")
    CARD_NUMBER = _field("Card Number* input field")
    EXPIRATION = _field("Expiration Date* input field")
    SECURITY_CODE = _field("Security Code* input field")
    REVIEW_ORDER = PlatformLocator.same(accessibility_id("Review Order button", "Review Order button"))

    PLACE_ORDER = PlatformLocator.same(accessibility_id("Place Order button", "Place Order button"))
    COMPLETE_SCREEN = PlatformLocator.same(
        accessibility_id("checkout complete screen", "Checkout complete screen")
    )
    CONTINUE_SHOPPING = PlatformLocator.same(
        accessibility_id("Continue Shopping button", "Continue Shopping button")
    )

    def is_address_form_displayed(self, timeout: float = 10) -> bool:
        return self.is_visible(self.FULL_NAME, timeout=timeout)

    def fill_shipping_address(self, address: ShippingAddress = ShippingAddress()) -> None:
        self.type_text(self.FULL_NAME, address.full_name)
        self.type_text(self.ADDRESS_LINE1, address.address_line1)
        self.type_text(self.ADDRESS_LINE2, address.address_line2)
        self.type_text(self.CITY, address.city)
        self.type_text(self.STATE, address.state)
        self.type_text(self.ZIP_CODE, address.zip_code)
        self.type_text(self.COUNTRY, address.country)

    def to_payment(self) -> None:
        self.tap(self.TO_PAYMENT)

    def is_payment_displayed(self, timeout: float = 10) -> bool:
        return self.is_visible(self.PAYMENT_SCREEN, timeout=timeout)

    def fill_payment(self, card: PaymentCard = PaymentCard()) -> None:
        self.type_text(self.CARD_HOLDER, card.holder)
        self.type_text(self.CARD_NUMBER, card.number)
        self.type_text(self.EXPIRATION, card.expiration)
        self.type_text(self.SECURITY_CODE, card.security_code)

    def review_order(self) -> None:
        self.tap(self.REVIEW_ORDER)

    def place_order(self) -> None:
        self.tap(self.PLACE_ORDER)

    def is_complete(self, timeout: float = 10) -> bool:
        return self.is_visible(self.COMPLETE_SCREEN, timeout=timeout)

    def continue_shopping(self):
        from qat.pages.mobile.products import ProductsPage

        self.tap(self.CONTINUE_SHOPPING)
        return self._page(ProductsPage)
