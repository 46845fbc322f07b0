# ハーネスモジュール
# ドライバ生成、ライフサイクル管理、失敗オブザーバー、pytest プラグインを提供

from .drivers import DriverCreationError, create_mobile_driver, create_web_driver
from .lifecycle import HarnessState, MobileHarness, ResetResult, WebHarness
from .listener import FailureObserver, Outcome, OutcomeStatus

__all__ = [
    "DriverCreationError",
    "FailureObserver",
    "HarnessState",
    "MobileHarness",
    "Outcome",
    "OutcomeStatus",
    "ResetResult",
    "WebHarness",
    "create_mobile_driver",
    "create_web_driver",
]
