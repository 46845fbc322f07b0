"""
ライフサイクルハーネス — ドライバセッションの setup / reset / teardown

状態遷移:
  UNINITIALIZED --setup--> READY --teardown--> TORN_DOWN

主な機能:
  - WebHarness: テストごとにブラウザセッションを生成・破棄する
  - MobileHarness: スイート単位で Appium セッションを保持し、
    テスト間で reset_app() によりアプリを初期状態に戻す

setup でのセッション生成失敗は致命的で、再試行しない。
teardown は冪等で、何度呼んでもセッションは一度だけ終了される。
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from qat.core.config import Config, MobileSettings, WebSettings, get_config
from qat.core.locators import platform_of
from qat.core.session import SessionRegistry, default_registry
from qat.harness.drivers import create_mobile_driver, create_web_driver

if TYPE_CHECKING:
    from selenium.webdriver.remote.webdriver import WebDriver

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# 状態
# ---------------------------------------------------------------------------

class HarnessState(enum.Enum):
    """ハーネスの状態。"""

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    TORN_DOWN = "torn_down"


class ResetResult(enum.Enum):
    """reset_app() の結果。"""

    CLEARED = "cleared"        # データ消去 + 再起動
    RESTARTED = "restarted"    # フォールバック（データ消去なし）
    FAILED = "failed"


# ---------------------------------------------------------------------------
# 共通基底
# ---------------------------------------------------------------------------

class _Harness:
    """セッション 1 つ分のライフサイクルを管理する基底クラス。"""

    kind = "session"

    def __init__(
        self,
        config: Optional[Config] = None,
        registry: Optional[SessionRegistry] = None,
        driver_factory: Optional[Callable[[Any], WebDriver]] = None,
    ) -> None:
        self.config = config or get_config()
        self.registry = registry or default_registry
        self._driver_factory = driver_factory
        self._state = HarnessState.UNINITIALIZED
        self._driver: Optional[WebDriver] = None

    @property
    def state(self) -> HarnessState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state == HarnessState.READY

    @property
    def driver(self) -> Optional[WebDriver]:
        return self._driver if self.is_ready else None

    def _start(self, settings: Any, factory: Callable[[Any], WebDriver]) -> WebDriver:
        if self._state == HarnessState.READY:
            raise RuntimeError(
                f"既に {self.kind} セッションが起動しています。先に teardown() を呼んでください。"
            )
        driver = (self._driver_factory or factory)(settings)
        self._driver = driver
        self.registry.set(driver)
        self._state = HarnessState.READY
        logger.info("%s セッションを開始しました", self.kind)
        return driver

    def teardown(self) -> None:
        """セッションを終了してレジストリを空にする。

        READY 以外の状態では何もしない。quit() の失敗は警告ログのみ。
        """
        if self._state != HarnessState.READY:
            logger.debug("%s セッションは起動していません（%s）", self.kind, self._state.value)
            return
        driver, self._driver = self._driver, None
        try:
            if driver is not None:
                driver.quit()
            logger.info("%s セッションを終了しました", self.kind)
        except Exception as exc:
            logger.warning("%s セッション終了中にエラー: %s", self.kind, exc)
        finally:
            self.registry.clear()
            self._state = HarnessState.TORN_DOWN

    def __enter__(self):
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()

    def setup(self) -> WebDriver:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Web
# ---------------------------------------------------------------------------

class WebHarness(_Harness):
    """ブラウザセッションのハーネス（テスト単位）。"""

    kind = "web"

    def setup(self) -> WebDriver:
        """ブラウザを起動して登録する。ヘッドレスでなければ最大化する。
        最大化に失敗した場合はセッションを終了してから例外を送出する。

        Raises:
            ValueError: 設定値が不正な場合
            DriverCreationError: ブラウザの起動に失敗した場合
        """
        settings = WebSettings.from_config(self.config)
        driver = self._start(settings, create_web_driver)
        try:
            if not settings.headless:
                driver.maximize_window()
        except BaseException:
            # 登録済みのセッションを残さない
            self.teardown()
            raise
        return driver


# ---------------------------------------------------------------------------
# モバイル
# ---------------------------------------------------------------------------

class MobileHarness(_Harness):
    """Appium セッションのハーネス（スイート単位）。"""

    kind = "mobile"

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.settings: Optional[MobileSettings] = None

    def setup(self) -> WebDriver:
        """Appium セッションを生成して登録する。

        Raises:
            ValueError: プラットフォームやサーバー URL が不正な場合
            DriverCreationError: セッションの生成に失敗した場合
        """
        self.settings = MobileSettings.from_config(self.config)
        return self._start(self.settings, create_mobile_driver)

    @property
    def app_id(self) -> str:
        settings = self.settings or MobileSettings.from_config(self.config)
        return settings.app_package

    def reset_app(self) -> ResetResult:
        """アプリを初期状態に戻す。

        Android はデータ消去（mobile: clearApp）後に起動、iOS は終了後に起動する。
        いずれかが失敗した場合は原因の例外種別をログに残したうえで
        終了 + 起動（データ消去なし）にフォールバックする。
        フォールバックの失敗はエラーログのみで送出しない。

        Raises:
            SessionNotStartedError: セッションが未登録の場合
        """
        driver = self.registry.require()
        app_id = self.app_id
        platform = platform_of(driver) or (self.settings.platform_name if self.settings else "")

        try:
            if platform == "ios":
                driver.terminate_app(app_id)
            else:
                driver.execute_script("mobile: clearApp", {"appId": app_id})
            driver.activate_app(app_id)
            logger.info("アプリをリセットしました: %s (%s)", app_id, platform)
            return ResetResult.CLEARED
        except Exception as exc:
            logger.warning(
                "アプリのリセットに失敗したため再起動にフォールバックします（%s: %s）",
                type(exc).__name__, exc,
            )

        try:
            driver.terminate_app(app_id)
            driver.activate_app(app_id)
            logger.info("アプリを再起動しました（データ消去なし）: %s", app_id)
            return ResetResult.RESTARTED
        except Exception as exc:
            logger.error("アプリの再起動にも失敗しました（%s: %s）", type(exc).__name__, exc)
            return ResetResult.FAILED
