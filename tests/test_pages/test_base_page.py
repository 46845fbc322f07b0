"""
BasePage テスト — PlatformLocator の解決と可視判定
"""

from __future__ import annotations

import pytest
from selenium.common.exceptions import NoSuchElementException

from qat.core.locators import PlatformLocator, accessibility_id, xpath
from qat.pages.base import BasePage
from qat.pages.mobile.login import LoginPage

MENU = PlatformLocator(
    android=accessibility_id("open menu", "Menu button"),
    ios=xpath("//XCUIElementTypeButton[@name='tab bar option menu']", "Menu button"),
)


class TestResolve:
    """resolve のテスト。"""

    def test_android(self, active_registry):
        assert BasePage(active_registry).resolve(MENU) == MENU.android

    def test_ios(self, active_registry, fake_driver):
        fake_driver.capabilities = {"platformName": "iOS"}
        assert BasePage(active_registry).resolve(MENU) == MENU.ios

    def test_plain_locator_passes_through(self, active_registry):
        locator = accessibility_id("cart badge")
        assert BasePage(active_registry).resolve(locator) is locator


class TestIsVisible:
    """is_visible のテスト。"""

    def test_visible(self, active_registry, fake_driver, element_factory):
        fake_driver.find_element.return_value = element_factory(displayed=True)
        assert BasePage(active_registry).is_visible(MENU) is True

    def test_missing(self, active_registry, fake_driver):
        fake_driver.find_element.side_effect = NoSuchElementException()
        assert BasePage(active_registry).is_visible(MENU) is False

    def test_unknown_platform_is_false(self, active_registry, fake_driver):
        """解決できないプラットフォームでも例外にならず False を返すこと。"""
        fake_driver.capabilities = {"platformName": "Windows"}
        assert BasePage(active_registry).is_visible(MENU) is False

    def test_no_session_is_false(self, registry):
        assert BasePage(registry).is_visible(MENU) is False


class TestPageNavigation:
    """ページ間の遷移テスト。"""

    def test_shared_wrappers(self, active_registry):
        """遷移先のページが同じ registry とラッパーを共有すること。"""
        page = BasePage(active_registry)
        login = page._page(LoginPage)
        assert isinstance(login, LoginPage)
        assert login.registry is page.registry
        assert login.actions is page.actions

    @pytest.mark.parametrize("platform", ["Android", "iOS"])
    def test_login_form_locators_resolve(self, active_registry, fake_driver, platform):
        fake_driver.capabilities = {"platformName": platform}
        page = LoginPage(active_registry)
        assert page.resolve(page.USERNAME_INPUT).value
        assert page.resolve(page.LOGIN_BUTTON).value
