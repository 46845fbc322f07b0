# ページオブジェクト
# mobile: デモ EC アプリの各画面、web: 検索エンジンのトップページ

from .base import BasePage

__all__ = ["BasePage"]
