# コアモジュール
# 設定プロバイダ、セッションレジストリ、ロケータ、待機、アクション・検証ラッパー、レポート添付を提供

from .actions import Actions
from .config import Config, ConfigError, configure, get, get_config
from .locators import Locator, PlatformLocator, accessibility_id, describe_element, xpath
from .reporting import Reporter
from .session import SessionNotStartedError, SessionRegistry, default_registry
from .validations import Validations
from .waits import ElementTimeoutError, Waits

__all__ = [
    "Actions",
    "Config",
    "ConfigError",
    "ElementTimeoutError",
    "Locator",
    "PlatformLocator",
    "Reporter",
    "SessionNotStartedError",
    "SessionRegistry",
    "Validations",
    "Waits",
    "accessibility_id",
    "configure",
    "default_registry",
    "describe_element",
    "get",
    "get_config",
    "xpath",
]
