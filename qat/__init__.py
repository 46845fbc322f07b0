# qat: Selenium / Appium ページオブジェクト型テスト自動化ハーネス
# Web・モバイル UI、REST API、SQL データベースのテストを共通の基盤で実行する

__version__ = "0.1.0"
