"""
データベースクライアント — SQLAlchemy による SQL 実行

テストデータの検証用に、生 SQL を実行して結果を辞書のリストで返す。
プレースホルダーは JDBC と同じ "?" で、位置順にバインドされる。

主な機能:
  - DatabaseClient: 接続の確立（失敗は DatabaseError で致命的）
  - execute_query / execute_scalar / execute_update / execute_insert
  - is_connected / close

対応する種別: mysql, postgresql (postgres), sqlserver (mssql), sqlite
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Connection, Engine
from sqlalchemy.exc import SQLAlchemyError

from qat.core.config import DatabaseSettings

logger = logging.getLogger(__name__)

# 種別 → (SQLAlchemy ドライバ名, 既定ポート)
_DIALECTS: dict[str, tuple[str, Optional[int]]] = {
    "mysql": ("mysql+pymysql", 3306),
    "postgresql": ("postgresql+psycopg2", 5432),
    "postgres": ("postgresql+psycopg2", 5432),
    "sqlserver": ("mssql+pyodbc", 1433),
    "mssql": ("mssql+pyodbc", 1433),
    "sqlite": ("sqlite", None),
}

_MSSQL_ODBC_DRIVER = "ODBC Driver 18 for SQL Server"


class DatabaseError(RuntimeError):
    """接続または SQL 実行に失敗した場合のエラー。"""


# ---------------------------------------------------------------------------
# ヘルパー関数
# ---------------------------------------------------------------------------

def build_url(
    db_type: str,
    host: str = "",
    port: Optional[int] = None,
    database: str = "",
    username: str = "",
    password: str = "",
) -> URL:
    """接続 URL を組み立てる。ポート省略時は種別ごとの既定ポートを使う。

    Raises:
        ValueError: 未対応の種別が指定された場合
    """
    key = db_type.strip().lower()
    if key not in _DIALECTS:
        raise ValueError(f"未対応のデータベース種別です: {db_type!r}")
    driver, default_port = _DIALECTS[key]

    if key == "sqlite":
        return URL.create(driver, database=database or None)

    query = {"driver": _MSSQL_ODBC_DRIVER, "TrustServerCertificate": "yes"} if driver.startswith("mssql") else {}
    return URL.create(
        driver,
        username=username or None,
        password=password or None,
        host=host or None,
        port=port or default_port,
        database=database or None,
        query=query,
    )


def convert_placeholders(sql: str, params: tuple[Any, ...]) -> tuple[str, dict[str, Any]]:
    """"?" プレースホルダーを名前付きバインド（:p0, :p1, ...）に置き換える。

    文字列リテラル（'...'）内の "?" は置き換えない。

    Raises:
        ValueError: プレースホルダー数と引数の数が一致しない場合
    """
    out: list[str] = []
    binds: dict[str, Any] = {}
    in_quote = False
    for ch in sql:
        if ch == "'":
            in_quote = not in_quote
        if ch == "?" and not in_quote:
            name = f"p{len(binds)}"
            if len(binds) >= len(params):
                raise ValueError(f"SQL のプレースホルダー数が引数より多いです: {sql}")
            binds[name] = params[len(binds)]
            out.append(f":{name}")
        else:
            out.append(ch)
    if len(binds) != len(params):
        raise ValueError(
            f"SQL のプレースホルダー数（{len(binds)}）と引数の数（{len(params)}）が一致しません"
        )
    return "".join(out), binds


# ---------------------------------------------------------------------------
# クライアント
# ---------------------------------------------------------------------------

class DatabaseClient:
    """SQL データベースへの接続を 1 本保持するクライアント。

    生成時に接続を確立する。

    Raises:
        DatabaseError: 接続に失敗した場合
    """

    def __init__(self, url: URL | str, **engine_kwargs: Any) -> None:
        self.url = url
        display = url.render_as_string(hide_password=True) if isinstance(url, URL) else "<url>"
        logger.info("データベースに接続しています: %s", display)
        try:
            self._engine: Optional[Engine] = create_engine(url, **engine_kwargs)
            self._conn: Optional[Connection] = self._engine.connect()
        except SQLAlchemyError as exc:
            raise DatabaseError(f"データベースに接続できませんでした: {display}") from exc
        logger.info("データベースに接続しました")

    @classmethod
    def connect(
        cls,
        db_type: str,
        host: str = "",
        port: Optional[int] = None,
        database: str = "",
        username: str = "",
        password: str = "",
    ) -> DatabaseClient:
        return cls(build_url(db_type, host, port, database, username, password))

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> DatabaseClient:
        return cls.connect(
            settings.db_type, settings.host, settings.port,
            settings.name, settings.username, settings.password,
        )

    @property
    def connection(self) -> Connection:
        if self._conn is None or self._conn.closed:
            raise DatabaseError("データベース接続は閉じられています")
        return self._conn

    def _execute(self, sql: str, params: tuple[Any, ...]):
        statement, binds = convert_placeholders(sql, params)
        logger.info("SQL 実行: %s", sql)
        if binds:
            logger.debug("バインド値: %s", list(binds.values()))
        conn = self.connection
        try:
            return conn.execute(text(statement), binds)
        except SQLAlchemyError as exc:
            conn.rollback()
            raise DatabaseError(f"SQL の実行に失敗しました: {sql}") from exc

    # -------------------------------------------------------------------
    # 実行
    # -------------------------------------------------------------------

    def execute_query(self, sql: str, *params: Any) -> list[dict[str, Any]]:
        """SELECT を実行し、列名 → 値 の辞書（列順を保持）のリストを返す。"""
        result = self._execute(sql, params)
        rows = [dict(row._mapping) for row in result]
        self.connection.commit()
        logger.info("%d 行を取得しました", len(rows))
        return rows

    def execute_scalar(self, sql: str, *params: Any) -> Any:
        """先頭行の先頭列を返す。行が無ければ None。"""
        result = self._execute(sql, params)
        value = result.scalar()
        self.connection.commit()
        return value

    def execute_update(self, sql: str, *params: Any) -> int:
        """UPDATE / DELETE などを実行し、影響行数を返す。"""
        result = self._execute(sql, params)
        count = result.rowcount
        self.connection.commit()
        logger.info("%d 行を更新しました", count)
        return count

    def execute_insert(self, sql: str, *params: Any) -> Any:
        """INSERT を実行し、生成されたキーを返す。取得できなければ -1。

        RETURNING / OUTPUT 句で行を返す文の場合はその先頭列を生成キーとする。
        """
        result = self._execute(sql, params)
        key: Any = None
        if result.returns_rows:
            key = result.scalar()
        else:
            try:
                key = result.lastrowid
            except (AttributeError, SQLAlchemyError):
                key = None
        self.connection.commit()
        return key if key is not None else -1

    # -------------------------------------------------------------------
    # 状態・後始末
    # -------------------------------------------------------------------

    def is_connected(self) -> bool:
        return self._conn is not None and not self._conn.closed

    def close(self) -> None:
        """接続を閉じる。複数回呼んでもよい。"""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            logger.info("データベース接続を閉じました")

    def __enter__(self) -> DatabaseClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
