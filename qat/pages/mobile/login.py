"""
LoginPage — ログイン画面

主な機能:
  - login(): ユーザー名・パスワードを入力してログインボタンを押す
  - autofill_valid_user() / autofill_locked_out_user(): 画面下部の自動入力リンク
  - *_error_text(): 入力エラーメッセージの取得
"""

from __future__ import annotations

from qat.core.locators import PlatformLocator, accessibility_id, xpath
from qat.pages.base import BasePage


class LoginPage(BasePage):
    """ログイン画面。"""

    LOGIN_SCREEN = PlatformLocator.same(accessibility_id("login screen", "Login screen"))
    USERNAME_INPUT = PlatformLocator(
        android=accessibility_id("Username input field", "Username input"),
        ios=xpath("//XCUIElementTypeTextField", "Username input"),
    )
    PASSWORD_INPUT = PlatformLocator(
        android=accessibility_id("Password input field", "Password input"),
        ios=xpath("//XCUIElementTypeSecureTextField", "Password input"),
    )
    LOGIN_BUTTON = PlatformLocator(
        android=accessibility_id("Login button", "Login button"),
        ios=xpath("//XCUIElementTypeStaticText[@label='Login']", "Login button"),
    )
    AUTOFILL_VALID_USER = PlatformLocator.same(
        accessibility_id("bob@example.com-autofill", "bob autofill")
    )
    AUTOFILL_LOCKED_OUT_USER = PlatformLocator.same(
        accessibility_id("alice@example.com (locked out)-autofill", "alice (locked out) autofill")
    )
    USERNAME_ERROR = PlatformLocator.same(
        accessibility_id("Username-error-message", "Username error message")
    )
    PASSWORD_ERROR = PlatformLocator.same(
        accessibility_id("Password-error-message", "Password error message")
    )
    GENERIC_ERROR = PlatformLocator.same(
        accessibility_id("generic-error-message", "Generic error message")
    )

    def is_displayed(self, timeout: float = 10) -> bool:
        return self.is_visible(self.LOGIN_SCREEN, timeout=timeout)

    def enter_username(self, username: str) -> None:
        self.type_text(self.USERNAME_INPUT, username)

    def enter_password(self, password: str) -> None:
        self.type_text(self.PASSWORD_INPUT, password)

    def tap_login(self) -> None:
        self.tap(self.LOGIN_BUTTON)

    def login(self, username: str, password: str) -> None:
        self.enter_username(username)
        self.enter_password(password)
        self.tap_login()

    def autofill_valid_user(self) -> None:
        self.tap(self.AUTOFILL_VALID_USER)

    def autofill_locked_out_user(self) -> None:
        self.tap(self.AUTOFILL_LOCKED_OUT_USER)

    def is_login_button_displayed(self, timeout: float = 5) -> bool:
        return self.is_visible(self.LOGIN_BUTTON, timeout=timeout)

    def username_error_text(self) -> str:
        return self.text_of(self.USERNAME_ERROR)

    def password_error_text(self) -> str:
        return self.text_of(self.PASSWORD_ERROR)

    def generic_error_text(self) -> str:
        return self.text_of(self.GENERIC_ERROR)
