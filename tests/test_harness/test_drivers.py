"""
ドライバファクトリ テスト

実ブラウザ・Appium サーバーには接続せず、オプション組み立てと
ドライバクラスの呼び出しだけを検証する。
"""

from __future__ import annotations

from unittest.mock import patch

import pytest
from selenium.common.exceptions import WebDriverException

from qat.core.config import MobileSettings, WebSettings
from qat.harness import drivers
from qat.harness.drivers import (
    DriverCreationError,
    build_browser_options,
    build_mobile_options,
    create_mobile_driver,
    create_web_driver,
)


# ---------------------------------------------------------------------------
# Web
# ---------------------------------------------------------------------------

class TestBrowserOptions:
    """build_browser_options のテスト。"""

    def test_chrome_headless_args(self):
        options = build_browser_options(
            WebSettings(browser="chrome", headless=True, window_width=1280, window_height=720)
        )
        assert "--headless=new" in options.arguments
        assert "--no-sandbox" in options.arguments
        assert "--window-size=1280,720" in options.arguments

    def test_edge_uses_chromium_args(self):
        options = build_browser_options(WebSettings(browser="edge", headless=True))
        assert "--headless=new" in options.arguments

    def test_firefox_headless_args(self):
        options = build_browser_options(
            WebSettings(browser="firefox", headless=True, window_width=1280, window_height=720)
        )
        assert options.arguments == ["--headless", "--width=1280", "--height=720"]

    def test_headed_has_no_args(self):
        """ヘッドレスでなければ引数を追加しないこと。"""
        options = build_browser_options(WebSettings(browser="chrome", headless=False))
        assert options.arguments == []

    def test_unknown_browser(self):
        settings = WebSettings.model_construct(browser="netscape", headless=False)
        with pytest.raises(ValueError, match="netscape"):
            build_browser_options(settings)


class TestCreateWebDriver:
    """create_web_driver のテスト。"""

    def test_launches_selected_browser(self):
        with patch.object(drivers.webdriver, "Firefox") as firefox:
            driver = create_web_driver(WebSettings(browser="firefox", page_load_timeout=45))
        firefox.assert_called_once()
        assert driver is firefox.return_value
        driver.set_page_load_timeout.assert_called_once_with(45)

    def test_launch_failure_raises_creation_error(self):
        """起動失敗は DriverCreationError になり、原因が連結されること。"""
        with patch.object(drivers.webdriver, "Chrome", side_effect=WebDriverException("no chrome")):
            with pytest.raises(DriverCreationError) as excinfo:
                create_web_driver(WebSettings(browser="chrome"))
        assert isinstance(excinfo.value.__cause__, WebDriverException)


# ---------------------------------------------------------------------------
# モバイル
# ---------------------------------------------------------------------------

class TestMobileOptions:
    """build_mobile_options のテスト。"""

    def test_android(self):
        caps = build_mobile_options(MobileSettings()).to_capabilities()
        assert caps["platformName"].lower() == "android"
        assert caps["appium:appPackage"] == "com.saucelabs.mydemoapp.rn"
        assert caps["appium:deviceName"] == "emulator-5554"

    def test_ios_uses_bundle_id(self):
        settings = MobileSettings(
            platform_name="ios", device_name="iPhone 16 Pro", automation_name="XCUITest",
        )
        caps = build_mobile_options(settings).to_capabilities()
        assert caps["platformName"].lower() == "ios"
        assert caps["appium:bundleId"] == "com.saucelabs.mydemoapp.rn"
        assert caps["appium:deviceName"] == "iPhone 16 Pro"

    def test_extra_capabilities_applied_last(self):
        """追加 capability が既定値を上書きすること。"""
        settings = MobileSettings(extra_capabilities={"appium:deviceName": "Pixel 8"})
        caps = build_mobile_options(settings).to_capabilities()
        assert caps["appium:deviceName"] == "Pixel 8"


class TestCreateMobileDriver:
    """create_mobile_driver のテスト。"""

    def test_connects_to_server(self):
        with patch.object(drivers.appium_webdriver, "Remote") as remote:
            driver = create_mobile_driver(MobileSettings(server_url="http://grid:4723/"))
        assert driver is remote.return_value
        _, kwargs = remote.call_args
        assert kwargs["command_executor"] == "http://grid:4723/"

    def test_connection_failure(self):
        with patch.object(
            drivers.appium_webdriver, "Remote",
            side_effect=WebDriverException("connection refused"),
        ):
            with pytest.raises(DriverCreationError, match="grid"):
                create_mobile_driver(MobileSettings(server_url="http://grid:4723/"))

    def test_other_errors_propagate(self):
        """WebDriverException 以外の例外は変換しないこと。"""
        with patch.object(drivers.appium_webdriver, "Remote", side_effect=OSError("boom")):
            with pytest.raises(OSError):
                create_mobile_driver(MobileSettings())
