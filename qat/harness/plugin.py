"""
pytest プラグイン — 設定・セッション・失敗オブザーバーの結線

エントリポイント（pytest11）から読み込まれ、以下を提供する。

コマンドラインオプション:
  -D / --define KEY=VALUE : 設定値の起動時オーバーライド（複数指定可）
  --qat-settings PATH     : 設定ファイルのパス

フィクスチャ:
  qat_config, session_registry, reporter, web_driver, mobile_harness,
  mobile_driver, actions, validations, api_client, database

失敗オブザーバーは pytest_configure で QatPlugin としてプラグインマネージャに
明示的に登録され、各テストの結果を Outcome として受け取る。
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

import pytest

from qat.clients.api import ApiClient
from qat.clients.database import DatabaseClient
from qat.core.actions import Actions
from qat.core.config import (
    ApiSettings,
    Config,
    ConfigError,
    DatabaseSettings,
    configure,
    parse_overrides,
)
from qat.core.reporting import Reporter
from qat.core.session import SessionRegistry, default_registry
from qat.core.validations import Validations
from qat.harness.lifecycle import MobileHarness, WebHarness
from qat.harness.listener import (
    DEFAULT_SUITE_NAME,
    FailureObserver,
    Outcome,
    OutcomeStatus,
)

logger = logging.getLogger(__name__)

CONFIG_KEY = pytest.StashKey[Config]()
OBSERVER_KEY = pytest.StashKey[FailureObserver]()

_MARKERS = (
    "mobile: Appium セッションが必要なテスト",
    "web: ブラウザセッションが必要なテスト",
    "api: ネットワーク接続が必要な API テスト",
    "db: データベース接続が必要なテスト",
)


# ---------------------------------------------------------------------------
# オプション・初期化
# ---------------------------------------------------------------------------

def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("qat", "qat テスト自動化ハーネス")
    group.addoption(
        "-D", "--define",
        action="append", dest="qat_defines", default=[], metavar="KEY=VALUE",
        help="設定値をオーバーライドする（例: -D platformName=ios）",
    )
    group.addoption(
        "--qat-settings",
        dest="qat_settings", default=None, metavar="PATH",
        help="設定ファイル（properties 形式）のパス",
    )


def pytest_configure(config: pytest.Config) -> None:
    for marker in _MARKERS:
        config.addinivalue_line("markers", marker)

    try:
        overrides = parse_overrides(config.getoption("qat_defines"))
        qat_config = configure(config.getoption("qat_settings"), overrides)
        level = qat_config.get("log.level")
        if level:
            logging.getLogger("qat").setLevel(level.strip().upper())
    except (ValueError, ConfigError) as exc:
        raise pytest.UsageError(str(exc)) from exc
    config.stash[CONFIG_KEY] = qat_config

    results_dir: Optional[Path] = None
    if qat_config.get_bool("report.cleanResults", True):
        results_dir = Path(qat_config.get("report.resultsDir", "target/allure-results"))
    observer = FailureObserver(
        registry=default_registry,
        reporter=Reporter(),
        suite_name=qat_config.get("report.suite.name", DEFAULT_SUITE_NAME),
        results_dir=results_dir,
    )
    config.stash[OBSERVER_KEY] = observer
    config.pluginmanager.register(QatPlugin(observer), "qat-observer")


# ---------------------------------------------------------------------------
# 失敗オブザーバーへの結線
# ---------------------------------------------------------------------------

def outcome_from_report(report: pytest.TestReport) -> Optional[Outcome]:
    """TestReport を Outcome に変換する。通知不要なフェーズなら None。

    call フェーズの結果と、setup フェーズでの失敗・スキップを通知対象とする。
    xfail（想定内の失敗）は FAILED_WITHIN_THRESHOLD として扱う。
    """
    if report.when == "teardown":
        return None
    if report.when == "setup" and report.passed:
        return None

    name = report.nodeid
    if hasattr(report, "wasxfail"):
        if report.skipped:
            return Outcome(name, OutcomeStatus.FAILED_WITHIN_THRESHOLD, report.wasxfail or None)
        return Outcome(name, OutcomeStatus.PASSED)
    if report.failed:
        return Outcome(name, OutcomeStatus.FAILED, report.longreprtext)
    if report.skipped:
        reason = report.longrepr[2] if isinstance(report.longrepr, tuple) else None
        return Outcome(name, OutcomeStatus.SKIPPED, reason)
    return Outcome(name, OutcomeStatus.PASSED)


class QatPlugin:
    """pytest のフックを FailureObserver のイベントに変換するプラグイン。"""

    def __init__(self, observer: FailureObserver) -> None:
        self.observer = observer

    def pytest_sessionstart(self, session: pytest.Session) -> None:
        self.observer.on_start(session.name)

    def pytest_runtest_setup(self, item: pytest.Item) -> None:
        self.observer.on_test_start(item.name)

    @pytest.hookimpl(hookwrapper=True)
    def pytest_runtest_makereport(self, item: pytest.Item, call: pytest.CallInfo):
        result = yield
        report = result.get_result()
        outcome = outcome_from_report(report)
        if outcome is not None:
            # call フェーズの makereport はフィクスチャの teardown より前に呼ばれる
            self.observer.notify(outcome)

    def pytest_sessionfinish(self, session: pytest.Session, exitstatus: int) -> None:
        self.observer.on_finish(session.name)


# ---------------------------------------------------------------------------
# フィクスチャ
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def qat_config(pytestconfig: pytest.Config) -> Config:
    """起動時に解決された Config。"""
    return pytestconfig.stash[CONFIG_KEY]


@pytest.fixture(scope="session")
def session_registry() -> SessionRegistry:
    return default_registry


@pytest.fixture(scope="session")
def reporter() -> Reporter:
    return Reporter()


@pytest.fixture
def web_driver(qat_config: Config, session_registry: SessionRegistry) -> Iterator:
    """テストごとに起動・終了するブラウザセッション。"""
    harness = WebHarness(qat_config, session_registry)
    driver = harness.setup()
    yield driver
    harness.teardown()


@pytest.fixture(scope="session")
def mobile_harness(qat_config: Config, session_registry: SessionRegistry) -> Iterator[MobileHarness]:
    """スイート全体で共有する Appium セッション。"""
    harness = MobileHarness(qat_config, session_registry)
    harness.setup()
    yield harness
    harness.teardown()


@pytest.fixture
def mobile_driver(mobile_harness: MobileHarness) -> Iterator:
    """テストの前にアプリを初期状態に戻したモバイルセッション。"""
    mobile_harness.reset_app()
    yield mobile_harness.driver


@pytest.fixture
def actions(qat_config: Config, session_registry: SessionRegistry) -> Actions:
    return Actions(session_registry, default_timeout=qat_config.get_int("timeout.default", 10))


@pytest.fixture
def validations(qat_config: Config, session_registry: SessionRegistry) -> Validations:
    return Validations(session_registry, default_timeout=qat_config.get_int("timeout.default", 10))


@pytest.fixture
def api_client(qat_config: Config) -> Iterator[ApiClient]:
    client = ApiClient.from_settings(ApiSettings.from_config(qat_config))
    yield client
    client.close()


@pytest.fixture(scope="session")
def database(qat_config: Config) -> Iterator[DatabaseClient]:
    """設定済みのデータベース接続。db.enabled が false ならテストをスキップする。"""
    settings = DatabaseSettings.from_config(qat_config)
    if not settings.enabled:
        pytest.skip("データベースが設定されていません（db.enabled=false）")
    client = DatabaseClient.from_settings(settings)
    yield client
    client.close()
