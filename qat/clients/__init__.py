# クライアントモジュール
# REST API クライアント（requests）と SQL データベースクライアント（SQLAlchemy）を提供

from .api import ApiClient, extract_json_value
from .database import DatabaseClient, DatabaseError

__all__ = [
    "ApiClient",
    "DatabaseClient",
    "DatabaseError",
    "extract_json_value",
]
