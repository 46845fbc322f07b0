"""
API クライアント — requests による REST API 呼び出しと応答検証

主な機能:
  - ApiClient: ベース URL・Bearer トークン・任意ヘッダーを保持する HTTP クライアント
  - get / post / put / patch / delete: JSON ボディの送受信
  - validate_status_code / validate_json_field / validate_json_field_contains:
    期待と異なれば AssertionError
  - get_json_value: "data.items[0].id" 形式のパスによる値取得

通信エラー（requests.RequestException）は呼び出し元へそのまま伝播する。
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

import requests

from qat.core.config import ApiSettings

logger = logging.getLogger(__name__)

_PATH_TOKEN = re.compile(r"\[(\d+)\]|([^.\[\]]+)")

# ログに出すボディの最大文字数
_LOG_BODY_LIMIT = 2000


# ---------------------------------------------------------------------------
# JSON パス
# ---------------------------------------------------------------------------

def _path_tokens(path: str) -> list[Any]:
    tokens: list[Any] = []
    for index, key in _PATH_TOKEN.findall(path):
        tokens.append(int(index) if index else key)
    return tokens


def extract_json_value(data: Any, path: str) -> Any:
    """ネストした dict / list から path の値を取り出す。

    "a.b", "items[0].id", "[1].name", "items.0.id" の形式に対応する。
    途中で見つからなければ None を返す。
    """
    current = data
    for token in _path_tokens(path):
        if isinstance(current, list):
            try:
                current = current[int(token)]
            except (ValueError, IndexError):
                return None
        elif isinstance(current, dict):
            if token not in current and str(token) not in current:
                return None
            current = current[token] if token in current else current[str(token)]
        else:
            return None
    return current


# ---------------------------------------------------------------------------
# クライアント
# ---------------------------------------------------------------------------

class ApiClient:
    """REST API クライアント。

    Args:
        base_url: 相対パスの前に付けるベース URL
        token: Bearer トークン
        headers: 追加ヘッダー
        timeout: リクエストのタイムアウト（秒）
        session: 利用する requests.Session（None なら新規生成）
    """

    def __init__(
        self,
        base_url: str = "",
        token: Optional[str] = None,
        headers: Optional[dict[str, str]] = None,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.session = session or requests.Session()
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })
        self.base_url = base_url
        self.timeout = timeout
        if token:
            self.set_auth_token(token)
        for name, value in (headers or {}).items():
            self.set_header(name, value)

    @classmethod
    def from_settings(cls, settings: ApiSettings) -> ApiClient:
        client = cls(base_url=settings.base_url, token=settings.token, timeout=settings.timeout)
        if settings.subscription_key:
            client.set_header("Ocp-Apim-Subscription-Key", settings.subscription_key)
        return client

    # -------------------------------------------------------------------
    # 設定
    # -------------------------------------------------------------------

    def set_base_url(self, base_url: str) -> None:
        self.base_url = base_url
        logger.info("ベース URL: %s", base_url)

    def set_auth_token(self, token: str) -> None:
        self.session.headers["Authorization"] = f"Bearer {token}"
        logger.info("Bearer トークンを設定しました")

    def set_header(self, name: str, value: str) -> None:
        self.session.headers[name] = value
        logger.debug("ヘッダーを設定しました: %s", name)

    def build_url(self, path: str) -> str:
        """ベース URL と path を結合する。絶対 URL はそのまま返す。"""
        if path.startswith(("http://", "https://")) or not self.base_url:
            return path
        base = self.base_url.rstrip("/")
        if not path:
            return base
        return f"{base}/{path.lstrip('/')}"

    # -------------------------------------------------------------------
    # リクエスト
    # -------------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        body: Any = None,
        params: Optional[dict[str, Any]] = None,
    ) -> requests.Response:
        url = self.build_url(path)
        logger.info("%s %s", method, url)
        if params:
            logger.debug("クエリパラメータ: %s", params)
        response = self.session.request(
            method, url, json=body, params=params, timeout=self.timeout,
        )
        logger.info("%s %s -> %d", method, url, response.status_code)
        return response

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> requests.Response:
        return self.request("GET", path, params=params)

    def post(self, path: str, body: Any = None) -> requests.Response:
        return self.request("POST", path, body=body)

    def put(self, path: str, body: Any = None) -> requests.Response:
        return self.request("PUT", path, body=body)

    def patch(self, path: str, body: Any = None) -> requests.Response:
        return self.request("PATCH", path, body=body)

    def delete(self, path: str) -> requests.Response:
        return self.request("DELETE", path)

    # -------------------------------------------------------------------
    # 応答の検証
    # -------------------------------------------------------------------

    def validate_status_code(self, response: requests.Response, expected: int) -> None:
        actual = response.status_code
        if actual != expected:
            raise AssertionError(
                f"Expected status {expected} but got {actual}. Body: {response.text[:500]}"
            )
        logger.info("ステータスコード検証成功: %d", actual)

    def get_json_value(self, response: requests.Response, path: str) -> Any:
        """応答 JSON から path の値を取り出す（見つからなければ None）。"""
        return extract_json_value(response.json(), path)

    def validate_json_field(self, response: requests.Response, path: str, expected: Any) -> None:
        actual = self.get_json_value(response, path)
        matches = actual == expected or (
            isinstance(expected, str) and actual is not None and str(actual) == expected
        )
        if not matches:
            raise AssertionError(
                f"JSON field '{path}' mismatch. Expected: {expected}, Actual: {actual}"
            )
        logger.info("JSON フィールド検証成功: %s = %s", path, actual)

    def validate_json_field_contains(
        self, response: requests.Response, path: str, expected: str
    ) -> None:
        actual = self.get_json_value(response, path)
        if actual is None or expected not in str(actual):
            raise AssertionError(
                f"JSON field '{path}' does not contain expected value. "
                f"Expected: {expected}, Actual: {actual}"
            )

    def log_response(self, response: requests.Response) -> None:
        try:
            body = json.dumps(response.json(), ensure_ascii=False, indent=2)
        except ValueError:
            body = response.text
        logger.info("応答 %d:\n%s", response.status_code, body[:_LOG_BODY_LIMIT])

    # -------------------------------------------------------------------
    # 後始末
    # -------------------------------------------------------------------

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
