"""
設定プロバイダ — 起動時オーバーライド・環境変数・設定ファイルからの値解決

テスト実行に必要な設定値（プラットフォーム、ブラウザ、接続先など）を
文字列キーで解決する。
起動時オーバーライド > 環境変数 > 設定ファイル > デフォルト値 の優先順位で適用される。

主な機能:
  - Config: キー単位の値解決（get / get_bool / get_int）
  - configure / get_config / get: プロセス既定インスタンスの管理
  - WebSettings / MobileSettings / DatabaseSettings / ApiSettings:
    Pydantic による型付き・検証済みの設定ビュー
  - load_capabilities_file: 追加 capability 定義（YAML）の読み込み

環境変数はキーを大文字化し "." を "_" に置き換えて QAT_ を前置したもの
（例: appium.server.url → QAT_APPIUM_SERVER_URL）。
設定ファイルは Java properties 形式の平坦な key=value テキスト。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Literal, Mapping, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator
from ruamel.yaml import YAML

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# 定数
# ---------------------------------------------------------------------------

_ENV_PREFIX = "QAT_"
_ENV_SETTINGS_FILE = "QAT_SETTINGS_FILE"

DEFAULT_SETTINGS_PATH = (
    Path(__file__).resolve().parent.parent / "resources" / "application.properties"
)


class ConfigError(Exception):
    """設定ファイルが読み込めない場合の致命的エラー。"""


# ---------------------------------------------------------------------------
# ヘルパー関数
# ---------------------------------------------------------------------------

def _parse_bool(value: Optional[str]) -> bool:
    """文字列を bool に変換する。

    Args:
        value: "true", "1", "yes", "on" → True、それ以外（None 含む） → False

    Returns:
        変換結果
    """
    if value is None:
        return False
    return value.strip().lower() in ("true", "1", "yes", "on")


def env_key(key: str) -> str:
    """設定キーに対応する環境変数名を返す。"""
    return _ENV_PREFIX + key.upper().replace(".", "_")


def load_properties(path: Path) -> dict[str, str]:
    """Java properties 形式のファイルを辞書として読み込む。

    "#" / "!" で始まる行はコメント、区切りは最初の "=" または ":"。
    値の前後の空白は除去する。継続行（末尾 "\\"）は扱わない。

    Args:
        path: 設定ファイルのパス

    Returns:
        キー → 値 の辞書

    Raises:
        ConfigError: ファイルが存在しない、または読み込めない場合
    """
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"設定ファイルを読み込めません: {path}") from exc

    props: dict[str, str] = {}
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line[0] in "#!":
            continue
        positions = [p for p in (line.find("="), line.find(":")) if p >= 0]
        if not positions:
            props[line] = ""
            continue
        sep = min(positions)
        props[line[:sep].strip()] = line[sep + 1:].strip()
    return props


def parse_overrides(pairs: Optional[list[str]]) -> dict[str, str]:
    """"key=value" 形式の文字列リストをオーバーライド辞書に変換する。

    Raises:
        ValueError: "=" を含まない要素がある場合
    """
    overrides: dict[str, str] = {}
    for pair in pairs or []:
        if "=" not in pair:
            raise ValueError(f"オーバーライドは key=value 形式で指定してください: {pair!r}")
        key, value = pair.split("=", 1)
        overrides[key.strip()] = value.strip()
    return overrides


# ---------------------------------------------------------------------------
# 設定プロバイダ
# ---------------------------------------------------------------------------

class Config:
    """キー単位で設定値を解決するプロバイダ。

    設定ファイルは生成時に一度だけ読み込まれ、以後の再読み込みは行わない。

    Args:
        settings_path: 設定ファイルのパス。None の場合は環境変数
            QAT_SETTINGS_FILE、それも無ければ同梱の application.properties
        overrides: 起動時オーバーライド（最優先）
        environ: 環境変数のマッピング（None の場合は os.environ）

    Raises:
        ConfigError: 設定ファイルが読み込めない場合
    """

    def __init__(
        self,
        settings_path: Optional[Path | str] = None,
        overrides: Optional[Mapping[str, str]] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        if settings_path is None:
            settings_path = self._environ.get(_ENV_SETTINGS_FILE) or DEFAULT_SETTINGS_PATH
        self.settings_path = Path(settings_path)
        self._overrides = dict(overrides or {})
        self._file_values = load_properties(self.settings_path)
        logger.debug(
            "設定ファイルを読み込みました: %s（%d 件）",
            self.settings_path, len(self._file_values),
        )

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """設定値を解決する。

        オーバーライド > 環境変数 > 設定ファイル > default の順に参照する。
        どこにも無ければ default を返し、エラーにはしない。
        """
        if key in self._overrides:
            return self._overrides[key]
        name = env_key(key)
        if name in self._environ:
            return self._environ[name]
        if key in self._file_values:
            return self._file_values[key]
        return default

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        return default if value is None else _parse_bool(value)

    def get_int(self, key: str, default: int) -> int:
        value = self.get(key)
        if value is None or value.strip() == "":
            return default
        try:
            return int(value)
        except ValueError:
            logger.warning("%s の値が整数ではありません: %s", key, value)
            return default

    def keys(self) -> list[str]:
        """設定ファイル・オーバーライド・QAT_ 環境変数に現れるキーの一覧を返す。

        環境変数だけに現れるキーは、既知のキーに対応しなければ
        小文字・"." 区切りに戻した名前で返す。
        """
        known = set(self._file_values) | set(self._overrides)
        env_names = {env_key(key) for key in known}
        for name in self._environ:
            if name == _ENV_SETTINGS_FILE or name in env_names:
                continue
            if name.startswith(_ENV_PREFIX) and len(name) > len(_ENV_PREFIX):
                known.add(name[len(_ENV_PREFIX):].lower().replace("_", "."))
        return sorted(known)

    def as_dict(self) -> dict[str, Optional[str]]:
        """既知のキーすべてを解決済みの値で返す。"""
        return {key: self.get(key) for key in self.keys()}


# ---------------------------------------------------------------------------
# プロセス既定インスタンス
# ---------------------------------------------------------------------------

_default_config: Optional[Config] = None


def configure(
    settings_path: Optional[Path | str] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> Config:
    """プロセス既定の Config を生成して登録する。"""
    global _default_config
    _default_config = Config(settings_path=settings_path, overrides=overrides)
    return _default_config


def get_config() -> Config:
    """プロセス既定の Config を返す。未生成なら既定設定で生成する。"""
    if _default_config is None:
        return configure()
    return _default_config


def reset_config() -> None:
    """プロセス既定の Config を破棄する。"""
    global _default_config
    _default_config = None


def get(key: str, default: Optional[str] = None) -> Optional[str]:
    """プロセス既定の Config から値を解決する。"""
    return get_config().get(key, default)


# ---------------------------------------------------------------------------
# 型付き設定ビュー
# ---------------------------------------------------------------------------

class WebSettings(BaseModel):
    """Web ブラウザセッションの設定。"""

    browser: Literal["chrome", "firefox", "edge"] = Field(
        default="chrome", description="使用するブラウザ"
    )
    headless: bool = Field(default=False, description="ヘッドレス実行するか")
    window_width: int = Field(default=1920, gt=0)
    window_height: int = Field(default=1080, gt=0)
    page_load_timeout: int = Field(default=30, ge=0, description="ページ読み込みタイムアウト（秒）")

    @field_validator("browser", mode="before")
    @classmethod
    def _normalize_browser(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @classmethod
    def from_config(cls, config: Config) -> WebSettings:
        return cls(
            browser=config.get("browser", "chrome"),
            headless=config.get_bool("headless"),
            window_width=config.get_int("web.windowWidth", 1920),
            window_height=config.get_int("web.windowHeight", 1080),
            page_load_timeout=config.get_int("web.pageLoadTimeout", 30),
        )


class MobileSettings(BaseModel):
    """Appium モバイルセッションの設定。

    server_url は http(s) スキームとホストを持つ URL でなければならない。
    不正な場合は pydantic.ValidationError（ValueError のサブクラス）となる。
    """

    platform_name: Literal["android", "ios"] = Field(default="android")
    server_url: str = Field(default="http://127.0.0.1:4723/")
    device_name: str = Field(default="emulator-5554")
    automation_name: str = Field(default="UIAutomator2")
    platform_version: Optional[str] = Field(default=None)
    app: Optional[str] = Field(default=None, description="アプリ本体のパス")
    app_package: str = Field(default="com.saucelabs.mydemoapp.rn",
                             description="Android パッケージ名 / iOS バンドル ID")
    extra_capabilities: dict[str, Any] = Field(default_factory=dict)

    @field_validator("platform_name", mode="before")
    @classmethod
    def _normalize_platform(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("server_url")
    @classmethod
    def _validate_server_url(cls, v: str) -> str:
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"Appium サーバー URL が不正です: {v!r}")
        return v

    @classmethod
    def from_config(cls, config: Config) -> MobileSettings:
        platform = (config.get("platformName", "android") or "android").strip().lower()
        defaults = {
            "android": ("emulator-5554", "UIAutomator2"),
            "ios": ("iPhone 16 Pro", "XCUITest"),
        }
        device, automation = defaults.get(platform, ("", ""))
        extra: dict[str, Any] = {}
        caps_file = config.get("mobile.capabilities.file")
        if caps_file:
            extra = load_capabilities_file(Path(caps_file))
        return cls(
            platform_name=platform,
            server_url=config.get("appium.server.url", "http://127.0.0.1:4723/"),
            device_name=config.get(f"{platform}.deviceName", device),
            automation_name=config.get(f"{platform}.automationName", automation),
            platform_version=config.get(f"{platform}.platformVersion") or None,
            app=config.get(f"{platform}.app") or None,
            app_package=config.get("app.package", "com.saucelabs.mydemoapp.rn"),
            extra_capabilities=extra,
        )


class DatabaseSettings(BaseModel):
    """SQL データベース接続の設定。"""

    enabled: bool = False
    db_type: str = Field(default="sqlserver")
    host: str = ""
    port: Optional[int] = None
    name: str = ""
    username: str = ""
    password: str = ""

    @classmethod
    def from_config(cls, config: Config) -> DatabaseSettings:
        port = config.get("db.port")
        return cls(
            enabled=config.get_bool("db.enabled"),
            db_type=config.get("db.type", "sqlserver"),
            host=config.get("db.host", ""),
            port=int(port) if port else None,
            name=config.get("db.name", ""),
            username=config.get("db.username", ""),
            password=config.get("db.password", ""),
        )


class ApiSettings(BaseModel):
    """REST API クライアントの設定。"""

    base_url: str = ""
    token: Optional[str] = None
    subscription_key: Optional[str] = None
    timeout: int = Field(default=30, gt=0)

    @classmethod
    def from_config(cls, config: Config) -> ApiSettings:
        return cls(
            base_url=config.get("api.baseUrl", ""),
            token=config.get("api.token") or None,
            subscription_key=config.get("api.subscriptionKey") or None,
            timeout=config.get_int("api.timeout", 30),
        )


# ---------------------------------------------------------------------------
# capability ファイル
# ---------------------------------------------------------------------------

def load_capabilities_file(path: Path) -> dict[str, Any]:
    """追加 capability を YAML ファイルから読み込む。

    トップレベルがマッピングでない場合は ConfigError を送出する。

    Raises:
        ConfigError: ファイルが読み込めない、または形式が不正な場合
    """
    yaml = YAML(typ="safe")
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.load(f)
    except OSError as exc:
        raise ConfigError(f"capability ファイルを読み込めません: {path}") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"capability ファイルのトップレベルはマッピングである必要があります: {path}")
    return dict(data)
