"""
Config テスト — 設定プロバイダの単体テスト

オーバーライド・環境変数・設定ファイル・デフォルト値の優先順位と、
型付き設定ビューの検証を確認する。
"""

from __future__ import annotations

import os
from unittest.mock import patch

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from pydantic import ValidationError

from qat.core import config as config_module
from qat.core.config import (
    Config,
    ConfigError,
    DatabaseSettings,
    MobileSettings,
    WebSettings,
    _parse_bool,
    env_key,
    load_capabilities_file,
    load_properties,
    parse_overrides,
)

config_keys = st.from_regex(r"[a-z][a-zA-Z]{0,8}(\.[a-z][a-zA-Z]{0,8}){0,2}", fullmatch=True)
config_values = st.text(alphabet=st.characters(blacklist_categories=("Cs", "Cc")), max_size=20)


# ---------------------------------------------------------------------------
# properties ファイルの読み込み
# ---------------------------------------------------------------------------

class TestLoadProperties:
    """load_properties のテスト。"""

    def test_parses_equals_and_colon(self, properties_file):
        """"=" と ":" のどちらの区切りも解釈すること。"""
        props = load_properties(properties_file)
        assert props["platformName"] == "android"
        assert props["timeout.default"] == "7"

    def test_strips_whitespace_around_separator(self, properties_file):
        """区切りの前後の空白を除去すること。"""
        assert load_properties(properties_file)["browser"] == "firefox"

    def test_skips_comments(self, properties_file):
        """"#" と "!" のコメント行を読み飛ばすこと。"""
        props = load_properties(properties_file)
        assert not any(key.startswith(("#", "!")) for key in props)

    def test_empty_value(self, properties_file):
        """値が空のキーは空文字列になること。"""
        assert load_properties(properties_file)["db.host"] == ""

    def test_value_may_contain_separator(self, tmp_path):
        """値の中の "=" や ":" はそのまま残ること。"""
        path = tmp_path / "p.properties"
        path.write_text("appium.server.url=http://h:4723/?a=b\n", encoding="utf-8")
        assert load_properties(path)["appium.server.url"] == "http://h:4723/?a=b"

    def test_missing_file_raises_config_error(self, tmp_path):
        """存在しないファイルは試行したパスを含む ConfigError になること。"""
        missing = tmp_path / "nope.properties"
        with pytest.raises(ConfigError, match="nope.properties"):
            load_properties(missing)


# ---------------------------------------------------------------------------
# 優先順位
# ---------------------------------------------------------------------------

class TestConfigPrecedence:
    """Config.get の優先順位テスト。"""

    def test_file_value(self, properties_file):
        """設定ファイルの値を返すこと。"""
        config = Config(properties_file, environ={})
        assert config.get("platformName") == "android"

    def test_env_overrides_file(self, properties_file):
        """環境変数が設定ファイルより優先されること。"""
        config = Config(properties_file, environ={"QAT_PLATFORMNAME": "ios"})
        assert config.get("platformName") == "ios"

    def test_override_beats_env(self, properties_file):
        """起動時オーバーライドが環境変数より優先されること。"""
        config = Config(
            properties_file,
            overrides={"platformName": "web"},
            environ={"QAT_PLATFORMNAME": "ios"},
        )
        assert config.get("platformName") == "web"

    def test_missing_key_returns_default(self, properties_file):
        """どこにも無いキーは default を返すこと。"""
        config = Config(properties_file, environ={})
        assert config.get("no.such.key") is None
        assert config.get("no.such.key", "fallback") == "fallback"

    def test_dotted_key_env_name(self):
        """"." を "_" に置き換えた大文字の環境変数名になること。"""
        assert env_key("appium.server.url") == "QAT_APPIUM_SERVER_URL"

    def test_reads_os_environ_by_default(self, properties_file):
        """environ 省略時は os.environ を参照すること。"""
        with patch.dict(os.environ, {"QAT_BROWSER": "edge"}):
            assert Config(properties_file).get("browser") == "edge"

    def test_settings_file_from_env(self, properties_file):
        """QAT_SETTINGS_FILE で設定ファイルを指定できること。"""
        config = Config(environ={"QAT_SETTINGS_FILE": str(properties_file)})
        assert config.settings_path == properties_file

    def test_packaged_defaults(self):
        """同梱の設定ファイルが読み込めること。"""
        config = Config(environ={})
        assert config.get("app.package") == "com.saucelabs.mydemoapp.rn"
        assert config.get("appium.server.url") == "http://127.0.0.1:4723/"

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture], max_examples=50)
    @given(key=config_keys, env_value=config_values, override=config_values)
    def test_override_always_wins(self, properties_file, key, env_value, override):
        """任意のキーでオーバーライドの値が返ること。"""
        config = Config(properties_file, overrides={key: override}, environ={env_key(key): env_value})
        assert config.get(key, "default") == override

    @settings(suppress_health_check=[HealthCheck.function_scoped_fixture], max_examples=50)
    @given(key=config_keys, env_value=config_values)
    def test_env_wins_without_override(self, properties_file, key, env_value):
        """オーバーライドが無ければ環境変数の値が返ること。"""
        config = Config(properties_file, environ={env_key(key): env_value})
        assert config.get(key, "default") == env_value

    def test_keys_include_env_only_keys(self, properties_file):
        """QAT_ 環境変数だけで与えたキーも keys / as_dict に現れること。"""
        config = Config(
            properties_file,
            environ={
                "QAT_REPORT_SUITE_NAME": "Nightly",
                "QAT_PLATFORMNAME": "ios",
                "QAT_SETTINGS_FILE": str(properties_file),
                "HOME": "/root",
            },
        )
        values = config.as_dict()
        assert values["report.suite.name"] == "Nightly"
        assert values["platformName"] == "ios"
        assert "platformname" not in values
        assert "settings.file" not in values
        assert "home" not in values


# ---------------------------------------------------------------------------
# 型変換ヘルパー
# ---------------------------------------------------------------------------

class TestConversions:
    """bool / int 変換のテスト。"""

    @pytest.mark.parametrize("value", ["true", "TRUE", "1", "yes", "on", " true "])
    def test_parse_bool_true(self, value):
        assert _parse_bool(value) is True

    @pytest.mark.parametrize("value", ["false", "0", "no", "", "maybe", None])
    def test_parse_bool_false(self, value):
        assert _parse_bool(value) is False

    def test_get_int(self, properties_file):
        config = Config(properties_file, environ={})
        assert config.get_int("timeout.default", 10) == 7

    def test_get_int_invalid_falls_back(self, properties_file):
        """整数でない値は default になること。"""
        config = Config(properties_file, overrides={"timeout.default": "abc"}, environ={})
        assert config.get_int("timeout.default", 10) == 10

    def test_get_bool_default(self, properties_file):
        config = Config(properties_file, environ={})
        assert config.get_bool("headless", default=True) is True


class TestParseOverrides:
    """parse_overrides のテスト。"""

    def test_pairs(self):
        assert parse_overrides(["a=1", "b.c = x=y"]) == {"a": "1", "b.c": "x=y"}

    def test_none(self):
        assert parse_overrides(None) == {}

    def test_missing_equals_raises(self):
        with pytest.raises(ValueError, match="key=value"):
            parse_overrides(["platformName"])


# ---------------------------------------------------------------------------
# プロセス既定インスタンス
# ---------------------------------------------------------------------------

class TestDefaultConfig:
    """configure / get_config / get のテスト。"""

    def test_configure_replaces_default(self, properties_file):
        configured = config_module.configure(properties_file, {"browser": "chrome"})
        assert config_module.get_config() is configured
        assert config_module.get("browser") == "chrome"

    def test_get_config_creates_once(self):
        """未生成なら生成し、以後は同じインスタンスを返すこと。"""
        first = config_module.get_config()
        assert config_module.get_config() is first


# ---------------------------------------------------------------------------
# 型付き設定ビュー
# ---------------------------------------------------------------------------

class TestSettingsViews:
    """WebSettings / MobileSettings / DatabaseSettings のテスト。"""

    def test_web_settings(self, properties_file):
        config = Config(properties_file, overrides={"headless": "true"}, environ={})
        web = WebSettings.from_config(config)
        assert web.browser == "firefox"
        assert web.headless is True
        assert (web.window_width, web.window_height) == (1920, 1080)

    def test_web_settings_rejects_unknown_browser(self, properties_file):
        """未対応のブラウザは ValueError になること。"""
        config = Config(properties_file, overrides={"browser": "netscape"}, environ={})
        with pytest.raises(ValueError):
            WebSettings.from_config(config)

    def test_mobile_settings_android(self, properties_file):
        mobile = MobileSettings.from_config(Config(properties_file, environ={}))
        assert mobile.platform_name == "android"
        assert mobile.device_name == "emulator-5554"
        assert mobile.automation_name == "UIAutomator2"

    def test_mobile_settings_ios(self, properties_file):
        config = Config(properties_file, overrides={"platformName": "iOS"}, environ={})
        mobile = MobileSettings.from_config(config)
        assert mobile.platform_name == "ios"
        assert mobile.device_name == "iPhone 16 Pro"
        assert mobile.automation_name == "XCUITest"

    def test_mobile_settings_rejects_unknown_platform(self, properties_file):
        config = Config(properties_file, overrides={"platformName": "symbian"}, environ={})
        with pytest.raises(ValidationError):
            MobileSettings.from_config(config)

    @pytest.mark.parametrize("url", ["not a url", "127.0.0.1:4723", "ftp://host/", "http://"])
    def test_mobile_settings_rejects_malformed_endpoint(self, url):
        """不正なサーバー URL は ValueError になること。"""
        with pytest.raises(ValueError, match="URL"):
            MobileSettings(server_url=url)

    def test_mobile_settings_merges_capability_file(self, properties_file, tmp_path):
        caps = tmp_path / "caps.yaml"
        caps.write_text("appium:newCommandTimeout: 300\nappium:noReset: true\n", encoding="utf-8")
        config = Config(
            properties_file, overrides={"mobile.capabilities.file": str(caps)}, environ={}
        )
        mobile = MobileSettings.from_config(config)
        assert mobile.extra_capabilities == {
            "appium:newCommandTimeout": 300,
            "appium:noReset": True,
        }

    def test_capability_file_must_be_mapping(self, tmp_path):
        caps = tmp_path / "caps.yaml"
        caps.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_capabilities_file(caps)

    def test_database_settings(self, properties_file):
        config = Config(
            properties_file,
            overrides={"db.enabled": "true", "db.type": "postgres", "db.port": "6543"},
            environ={},
        )
        db = DatabaseSettings.from_config(config)
        assert db.enabled is True
        assert db.db_type == "postgres"
        assert db.port == 6543
        assert db.host == ""
