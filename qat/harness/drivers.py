"""
ドライバファクトリ — Selenium / Appium セッションの生成

設定ビュー（WebSettings / MobileSettings）からドライバオプションを組み立て、
WebDriver セッションを生成する。生成の失敗は致命的で、再試行は行わない。

主な機能:
  - build_browser_options / create_web_driver: Chrome / Firefox / Edge
  - build_mobile_options / create_mobile_driver: UiAutomator2 / XCUITest
"""

from __future__ import annotations

import logging
from typing import Any

from appium import webdriver as appium_webdriver
from appium.options.android import UiAutomator2Options
from appium.options.ios import XCUITestOptions
from selenium import webdriver
from selenium.common.exceptions import WebDriverException

from qat.core.config import MobileSettings, WebSettings

logger = logging.getLogger(__name__)


class DriverCreationError(RuntimeError):
    """ドライバセッションを生成できなかった場合のエラー。"""


# ---------------------------------------------------------------------------
# Web
# ---------------------------------------------------------------------------

_CHROMIUM_HEADLESS_ARGS = (
    "--headless=new",
    "--disable-gpu",
    "--no-sandbox",
    "--disable-dev-shm-usage",
)


def build_browser_options(settings: WebSettings) -> Any:
    """ブラウザ種別に応じたオプションを生成する。

    Raises:
        ValueError: 未対応のブラウザが指定された場合
    """
    browser = settings.browser
    if browser == "chrome":
        options: Any = webdriver.ChromeOptions()
    elif browser == "edge":
        options = webdriver.EdgeOptions()
    elif browser == "firefox":
        options = webdriver.FirefoxOptions()
    else:
        raise ValueError(f"未対応のブラウザです: {browser!r}")

    if not settings.headless:
        return options

    if browser == "firefox":
        options.add_argument("--headless")
        options.add_argument(f"--width={settings.window_width}")
        options.add_argument(f"--height={settings.window_height}")
    else:
        for arg in _CHROMIUM_HEADLESS_ARGS:
            options.add_argument(arg)
        options.add_argument(f"--window-size={settings.window_width},{settings.window_height}")
    return options


def create_web_driver(settings: WebSettings) -> webdriver.Remote:
    """ローカルブラウザの WebDriver を生成する。

    ドライバ実行ファイルの解決は Selenium Manager に任せる。

    Raises:
        DriverCreationError: ブラウザの起動に失敗した場合
    """
    options = build_browser_options(settings)
    factories = {
        "chrome": webdriver.Chrome,
        "edge": webdriver.Edge,
        "firefox": webdriver.Firefox,
    }
    logger.info("ブラウザを起動しています... (%s, headless=%s)", settings.browser, settings.headless)
    try:
        driver = factories[settings.browser](options=options)
    except WebDriverException as exc:
        raise DriverCreationError(f"ブラウザを起動できませんでした: {settings.browser}") from exc
    if settings.page_load_timeout:
        driver.set_page_load_timeout(settings.page_load_timeout)
    return driver


# ---------------------------------------------------------------------------
# モバイル
# ---------------------------------------------------------------------------

def build_mobile_options(settings: MobileSettings) -> Any:
    """プラットフォームに応じた Appium オプションを生成する。

    追加 capability（extra_capabilities）は最後に適用され、既定値を上書きする。

    Raises:
        ValueError: android / ios 以外のプラットフォームが指定された場合
    """
    if settings.platform_name == "android":
        options: Any = UiAutomator2Options()
        options.app_package = settings.app_package
    elif settings.platform_name == "ios":
        options = XCUITestOptions()
        options.bundle_id = settings.app_package
    else:
        raise ValueError(f"未対応のプラットフォームです: {settings.platform_name!r}")

    options.device_name = settings.device_name
    options.automation_name = settings.automation_name
    if settings.platform_version:
        options.platform_version = settings.platform_version
    if settings.app:
        options.app = settings.app
    if settings.extra_capabilities:
        options.load_capabilities(settings.extra_capabilities)
    return options


def create_mobile_driver(settings: MobileSettings) -> appium_webdriver.Remote:
    """Appium サーバーに接続してモバイルセッションを生成する。

    Raises:
        DriverCreationError: セッションの生成に失敗した場合
    """
    options = build_mobile_options(settings)
    logger.info(
        "Appium セッションを生成しています... (%s, %s, %s)",
        settings.platform_name, settings.device_name, settings.server_url,
    )
    try:
        return appium_webdriver.Remote(command_executor=settings.server_url, options=options)
    except WebDriverException as exc:
        raise DriverCreationError(
            f"Appium セッションを生成できませんでした: {settings.server_url}"
        ) from exc
