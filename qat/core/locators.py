"""
ロケータ定義 — 要素特定方式とプラットフォーム別セレクタ

ページオブジェクトが要素を宣言するための不変なロケータ型を提供する。

主な機能:
  - Locator: (by, value, name) の組。ドライバで遅延解決される
  - accessibility_id / xpath / css / by_name / by_id: Locator の生成ヘルパー
  - PlatformLocator: Android / iOS のセレクタ組。セッションのプラットフォームで解決する
  - platform_of: ドライバの capability からプラットフォーム名を判定する
  - describe_element: ログ用の要素記述子（ベストエフォート）
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional, Union

from appium.webdriver.common.appiumby import AppiumBy
from selenium.webdriver.common.by import By

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver
    from selenium.webdriver.remote.webelement import WebElement

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# ロケータ
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Locator:
    """要素の特定方式。

    Attributes:
        by: Selenium / Appium の By 戦略（"xpath", "accessibility id" 等）
        value: セレクタ文字列
        name: ログ・検証メッセージ用の論理名（省略時は value）
    """

    by: str
    value: str
    name: Optional[str] = None

    def as_tuple(self) -> tuple[str, str]:
        """expected_conditions に渡す (by, value) タプルを返す。"""
        return (self.by, self.value)

    @property
    def label(self) -> str:
        return self.name or f"{self.by}={self.value}"

    def __str__(self) -> str:
        return self.label


def accessibility_id(value: str, name: Optional[str] = None) -> Locator:
    return Locator(AppiumBy.ACCESSIBILITY_ID, value, name)


def xpath(value: str, name: Optional[str] = None) -> Locator:
    return Locator(By.XPATH, value, name)


def css(value: str, name: Optional[str] = None) -> Locator:
    return Locator(By.CSS_SELECTOR, value, name)


def by_name(value: str, name: Optional[str] = None) -> Locator:
    return Locator(By.NAME, value, name)


def by_id(value: str, name: Optional[str] = None) -> Locator:
    return Locator(By.ID, value, name)


# ---------------------------------------------------------------------------
# プラットフォーム別セレクタ
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PlatformLocator:
    """Android / iOS それぞれのセレクタを持つ組。

    どちらのプラットフォームを使うかは宣言時ではなく、
    セッションの platformName に基づいて解決時に決まる。
    """

    android: Locator
    ios: Locator

    @classmethod
    def same(cls, locator: Locator) -> PlatformLocator:
        """両プラットフォームで同じセレクタを使う組を作る。"""
        return cls(android=locator, ios=locator)

    def for_platform(self, platform: str) -> Locator:
        """プラットフォーム名に対応するロケータを返す。

        Raises:
            ValueError: android / ios 以外が指定された場合
        """
        key = platform.strip().lower()
        if key == "android":
            return self.android
        if key == "ios":
            return self.ios
        raise ValueError(f"未対応のプラットフォームです: {platform!r}")


Target = Union["WebElement", Locator]


def platform_of(driver: WebDriver) -> str:
    """ドライバの capability から "android" / "ios" / その他（小文字）を返す。"""
    caps: dict[str, Any] = getattr(driver, "capabilities", None) or {}
    raw = caps.get("platformName") or caps.get("appium:platformName") or ""
    value = str(raw).strip().lower()
    if value in ("ios", "iphone", "ipados"):
        return "ios"
    return value


# ---------------------------------------------------------------------------
# 要素記述子
# ---------------------------------------------------------------------------

def describe_element(target: Any) -> str:
    """ログ用の短い要素記述子を返す。

    Locator なら論理名、WebElement なら tag#id / tag[name=..] / tag.class の順。
    記述子の取得に失敗しても例外は送出せず "element" を返す。
    """
    if isinstance(target, Locator):
        return target.label
    try:
        tag = target.tag_name
        elem_id = target.get_attribute("id")
        if elem_id:
            return f"{tag}#{elem_id}"
        name = target.get_attribute("name")
        if name:
            return f"{tag}[name={name}]"
        classes = target.get_attribute("class")
        if classes and classes.split():
            return f"{tag}.{classes.split()[0]}"
        return str(tag)
    except Exception as exc:
        logger.debug("要素記述子の取得に失敗しました: %s", exc)
        return "element"
