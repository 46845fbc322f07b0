"""
CLI — qat コマンドラインインターフェース

typer で実装したテスト実行・設定確認用のコマンド群。

主な機能:
  - qat run     : スイートを pytest で実行（-D key=value で設定をオーバーライド）
  - qat config  : 解決済みの設定値を YAML で表示
  - qat catalog : デモアプリの商品テーブルを表示
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

import pytest
import typer
from ruamel.yaml import YAML

from qat.catalog import PRODUCTS
from qat.core.config import Config, ConfigError, parse_overrides

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s - %(message)s"

# 表示時に値を伏せるキー
_SECRET_KEYS = ("db.password", "api.token", "api.subscriptionKey")


# ---------------------------------------------------------------------------
# Typer アプリ定義
# ---------------------------------------------------------------------------

app = typer.Typer(
    help=(
        "qat — Selenium / Appium テスト自動化ハーネス\n\n"
        "基本の流れ:\n"
        "  1. qat config                   解決済み設定を確認\n"
        "  2. qat run suites/mobile        モバイルスイートを実行\n"
        "  3. qat run suites/web --headless  Web スイートをヘッドレスで実行\n\n"
        "詳しくは各コマンドに --help を付けてください。"
    ),
    no_args_is_help=True,
)


def setup_logging(level: str = "INFO") -> None:
    """ルートロガーを設定する。不正なレベル名は INFO として扱う。

    ハンドラ設定済みの場合はレベルだけを変更する。
    """
    numeric = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    root = logging.getLogger()
    if root.handlers:
        root.setLevel(numeric)
    else:
        logging.basicConfig(level=numeric, format=_LOG_FORMAT)


def build_pytest_args(
    paths: list[str],
    defines: list[str],
    settings: Optional[Path] = None,
    alluredir: Optional[Path] = None,
    markers: Optional[str] = None,
    keyword: Optional[str] = None,
    log_level: str = "INFO",
) -> list[str]:
    """pytest.main に渡す引数リストを組み立てる。"""
    args = list(paths) or ["suites"]
    for define in defines:
        args += ["-D", define]
    if settings is not None:
        args += ["--qat-settings", str(settings)]
    if alluredir is not None:
        args += ["--alluredir", str(alluredir)]
    if markers:
        args += ["-m", markers]
    if keyword:
        args += ["-k", keyword]
    args += ["-o", "log_cli=true", f"--log-cli-level={log_level.upper()}"]
    return args


# ---------------------------------------------------------------------------
# run コマンド
# ---------------------------------------------------------------------------

@app.command()
def run(
    paths: Optional[list[str]] = typer.Argument(None, help="実行するテストのパス（デフォルト: suites）"),
    define: Optional[list[str]] = typer.Option(
        None, "--define", "-D", help="設定のオーバーライド（key=value、複数指定可）"
    ),
    platform: Optional[str] = typer.Option(None, "--platform", help="モバイルのプラットフォーム（android / ios）"),
    browser: Optional[str] = typer.Option(None, "--browser", help="Web のブラウザ（chrome / firefox / edge）"),
    headless: Optional[bool] = typer.Option(None, "--headless/--headed", help="ブラウザ表示モード"),
    settings: Optional[Path] = typer.Option(None, "--settings", help="設定ファイルのパス"),
    alluredir: Optional[Path] = typer.Option(None, "--alluredir", help="Allure 結果の出力先"),
    markers: Optional[str] = typer.Option(None, "-m", help="実行するマーカー式（例: 'mobile and not db'）"),
    keyword: Optional[str] = typer.Option(None, "-k", help="テスト名のキーワード式"),
    log_level: Optional[str] = typer.Option(
        None, "--log-level", help="ログレベル（省略時は設定キー log.level）"
    ),
) -> None:
    """スイートを pytest で実行する。終了コードは pytest のものを返す。"""
    defines = list(define or [])
    if platform:
        defines.append(f"platformName={platform}")
    if browser:
        defines.append(f"browser={browser}")
    if headless is not None:
        defines.append(f"headless={'true' if headless else 'false'}")

    try:
        overrides = parse_overrides(defines)
    except ValueError as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=2)

    try:
        resolved = Config(settings_path=settings, overrides=overrides)
    except ConfigError as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)
    if alluredir is None:
        alluredir = Path(resolved.get("report.resultsDir", "target/allure-results"))
    level = log_level or resolved.get("log.level") or "INFO"
    setup_logging(level)

    args = build_pytest_args(
        paths or [], defines, settings, alluredir, markers, keyword, level,
    )
    logger.debug("pytest %s", " ".join(args))
    code = pytest.main(args)
    raise typer.Exit(code=int(code))


# ---------------------------------------------------------------------------
# config コマンド
# ---------------------------------------------------------------------------

@app.command("config")
def show_config(
    define: Optional[list[str]] = typer.Option(
        None, "--define", "-D", help="設定のオーバーライド（key=value、複数指定可）"
    ),
    settings: Optional[Path] = typer.Option(None, "--settings", help="設定ファイルのパス"),
    show_secrets: bool = typer.Option(False, "--show-secrets", help="パスワード等を伏せずに表示"),
) -> None:
    """解決済みの設定値を YAML で表示する。QAT_ 環境変数だけで与えたキーも含む。"""
    try:
        config = Config(settings_path=settings, overrides=parse_overrides(define))
    except (ValueError, ConfigError) as exc:
        typer.echo(f"エラー: {exc}", err=True)
        raise typer.Exit(code=1)

    values = config.as_dict()
    if not show_secrets:
        for key in _SECRET_KEYS:
            if values.get(key):
                values[key] = "***"

    typer.echo(f"# {config.settings_path}")
    yaml = YAML()
    yaml.default_flow_style = False
    yaml.dump(values, sys.stdout)


# ---------------------------------------------------------------------------
# catalog コマンド
# ---------------------------------------------------------------------------

@app.command()
def catalog() -> None:
    """デモアプリの商品テーブルを表示する。"""
    for product in PRODUCTS:
        typer.echo(f"{product.index}. {product.name:<32} {product.display_price:>8}")


def main() -> None:
    setup_logging()
    app()
