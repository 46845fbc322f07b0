"""
HomePage — アプリ共通のメニュー操作

ハンバーガーメニューからログイン・ログアウト・カタログ・リセットへ遷移する。
"""

from __future__ import annotations

from qat.core.locators import PlatformLocator, accessibility_id, xpath
from qat.pages.base import BasePage


class HomePage(BasePage):
    """メニュー（ドロワー）を持つ共通画面。"""

    MENU_BUTTON = PlatformLocator(
        android=accessibility_id("open menu", "Menu button"),
        ios=xpath("//XCUIElementTypeButton[contains(@label, 'Menu')]", "Menu button"),
    )
    MENU_LOG_IN = PlatformLocator(
        android=accessibility_id("menu item log in", "Log In menu item"),
        ios=xpath("//*[@label='Log In']", "Log In menu item"),
    )
    MENU_LOG_OUT = PlatformLocator.same(accessibility_id("menu item log out", "Log Out menu item"))
    MENU_CATALOG = PlatformLocator.same(accessibility_id("menu item catalog", "Catalog menu item"))
    MENU_ABOUT = PlatformLocator.same(accessibility_id("menu item about", "About menu item"))
    MENU_RESET_APP = PlatformLocator.same(
        accessibility_id("menu item reset app", "Reset App State menu item")
    )
    RESET_CONFIRM = PlatformLocator.same(
        accessibility_id("longpress reset app", "Reset App confirmation")
    )

    def open_menu(self) -> None:
        self.tap(self.MENU_BUTTON)

    def go_to_login(self):
        from qat.pages.mobile.login import LoginPage

        self.open_menu()
        self.tap(self.MENU_LOG_IN)
        return self._page(LoginPage)

    def go_to_catalog(self):
        from qat.pages.mobile.products import ProductsPage

        self.open_menu()
        self.tap(self.MENU_CATALOG)
        return self._page(ProductsPage)

    def go_to_about(self) -> None:
        self.open_menu()
        self.tap(self.MENU_ABOUT)

    def log_out(self) -> None:
        self.open_menu()
        self.tap(self.MENU_LOG_OUT)

    def reset_app_state(self) -> None:
        """メニューの Reset App State でカート・ログイン状態を初期化する。"""
        self.open_menu()
        self.tap(self.MENU_RESET_APP)
        if self.is_visible(self.RESET_CONFIRM, timeout=2):
            self.tap(self.RESET_CONFIRM)
