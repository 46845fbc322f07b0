"""
スイート共通フィクスチャ — ページオブジェクトの生成

ドライバのライフサイクル・設定・ラッパーのフィクスチャは qat.harness.plugin が提供する。
ここではそれらを束ねたページオブジェクトを提供する。
"""

from __future__ import annotations

import pytest

from qat.pages.mobile import (
    CartPage,
    CheckoutPage,
    HomePage,
    LoginPage,
    ProductDetailsPage,
    ProductsPage,
)
from qat.pages.web import GooglePage


def _build(page_cls, session_registry, actions, validations):
    return page_cls(session_registry, actions, validations)


# ---------------------------------------------------------------------------
# モバイル
# ---------------------------------------------------------------------------

@pytest.fixture
def home_page(mobile_driver, session_registry, actions, validations) -> HomePage:
    return _build(HomePage, session_registry, actions, validations)


@pytest.fixture
def login_page(mobile_driver, session_registry, actions, validations) -> LoginPage:
    return _build(LoginPage, session_registry, actions, validations)


@pytest.fixture
def products_page(mobile_driver, session_registry, actions, validations) -> ProductsPage:
    return _build(ProductsPage, session_registry, actions, validations)


@pytest.fixture
def details_page(mobile_driver, session_registry, actions, validations) -> ProductDetailsPage:
    return _build(ProductDetailsPage, session_registry, actions, validations)


@pytest.fixture
def cart_page(mobile_driver, session_registry, actions, validations) -> CartPage:
    return _build(CartPage, session_registry, actions, validations)


@pytest.fixture
def checkout_page(mobile_driver, session_registry, actions, validations) -> CheckoutPage:
    return _build(CheckoutPage, session_registry, actions, validations)


@pytest.fixture
def add_to_cart(home_page: HomePage, products_page: ProductsPage):
    """商品を順にカートへ追加し、毎回カタログへ戻るヘルパー。"""

    def _add(*products, quantity: int = 1) -> None:
        for product in products:
            details = products_page.open_product(product)
            assert details.is_displayed(), f"{product.name} の詳細画面が表示されません"
            details.set_quantity(quantity)
            details.add_to_cart()
            home_page.go_to_catalog()

    return _add


# ---------------------------------------------------------------------------
# Web
# ---------------------------------------------------------------------------

@pytest.fixture
def google_page(web_driver, session_registry, actions, validations) -> GooglePage:
    return _build(GooglePage, session_registry, actions, validations).open()
