"""
テスト共通フィクスチャ

実ブラウザ・実端末は使わず、WebDriver / WebElement を MagicMock で代替する。
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement

from qat.core.config import reset_config
from qat.core.session import SessionRegistry


# ---------------------------------------------------------------------------
# pytest フィクスチャ
# ---------------------------------------------------------------------------

SAMPLE_PROPERTIES = """\
# サンプル設定
platformName=android
browser = firefox
appium.server.url=http://127.0.0.1:4723/
! 感嘆符もコメント
timeout.default: 7
db.host=
"""


@pytest.fixture
def properties_file(tmp_path: Path) -> Path:
    """サンプルの properties ファイル。"""
    path = tmp_path / "application.properties"
    path.write_text(SAMPLE_PROPERTIES, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _reset_default_config():
    """プロセス既定の Config をテストごとに破棄する。"""
    yield
    reset_config()


@pytest.fixture
def registry() -> SessionRegistry:
    return SessionRegistry()


def make_element(
    displayed: bool = True,
    enabled: bool = True,
    selected: bool = False,
    text: str = "",
    tag: str = "div",
    attributes: dict | None = None,
) -> MagicMock:
    """WebElement のモックを生成する。"""
    element = MagicMock(spec=WebElement)
    element.is_displayed.return_value = displayed
    element.is_enabled.return_value = enabled
    element.is_selected.return_value = selected
    element.text = text
    element.tag_name = tag
    attrs = attributes or {}
    element.get_attribute.side_effect = lambda name: attrs.get(name)
    return element


@pytest.fixture
def element_factory():
    return make_element


@pytest.fixture
def fake_driver() -> MagicMock:
    """Android セッションを模した WebDriver のモック。"""
    driver = MagicMock(spec=WebDriver)
    driver.capabilities = {"platformName": "Android"}
    driver.title = "Swag Labs"
    driver.current_url = "https://example.com/inventory"
    driver.get_screenshot_as_png.return_value = b"\x89PNG"
    return driver


@pytest.fixture
def active_registry(registry: SessionRegistry, fake_driver: MagicMock) -> SessionRegistry:
    """fake_driver を登録済みのレジストリ。"""
    registry.set(fake_driver)
    return registry
