# テストデータ定数
# スイート間で共有する URL・認証情報・検索語・待機秒数・メッセージ

# Web
GOOGLE_URL = "https://www.google.com"
SEARCH_TERM_SELENIUM = "Selenium WebDriver"
SEARCH_TERM_APPIUM = "Appium Mobile Testing"

# Web 用認証情報
VALID_USERNAME = "standard_user"
VALID_PASSWORD = "secret_sauce"
INVALID_USERNAME = "Ahmed"
INVALID_PASSWORD = "Mahmoud"

# モバイルアプリ用認証情報
MOBILE_USERNAME = "bob@example.com"
MOBILE_PASSWORD = "10203040"
LOCKED_OUT_USERNAME = "alice@example.com"

# チェックアウト用テストデータ
CHECKOUT_FULL_NAME = "Test User"
CHECKOUT_ADDRESS_1 = "123 Test Street"
CHECKOUT_ADDRESS_2 = "Suite 4"
CHECKOUT_CITY = "Test City"
CHECKOUT_STATE = "Test State"
CHECKOUT_ZIP = "12345"
CHECKOUT_COUNTRY = "Test Country"
CARD_HOLDER = "Test User"
CARD_NUMBER = "4111111111111111"
CARD_EXPIRATION = "12/25"
CARD_SECURITY_CODE = "123"

# 待機秒数
TIMEOUT_DEFAULT = 10
TIMEOUT_SHORT = 5
TIMEOUT_LONG = 30
TIMEOUT_PAGE_LOAD = 60

# 検証メッセージ
MSG_SEARCH_BOX_VISIBLE = "Search box should be visible"
MSG_LOGIN_BUTTON_VISIBLE = "Login button should be visible after failed login"
MSG_LOGIN_BUTTON_NOT_VISIBLE = "Login button should not be visible after successful login"

# API
JSON_PLACEHOLDER_URL = "https://jsonplaceholder.typicode.com"
ONBOARDING_API_URL = "https://api.nprd.ccbcc.com/ccponboarding-qa"
PROSPECT_ID = 971124
EXPECTED_PROSPECT_NAME = "3 STAR BEER & WINE"
EXPECTED_PROSPECT_CITY = "North Chicago "
EXPECTED_PROSPECT_STATE = "IL"

# データベース
PLAN_QUERY = "SELECT TOP 10 * FROM [MobileData].[t_Plan] WHERE CreatedBy = ?"
PLAN_CREATED_BY = "neaq5h"
