"""課金APIの例外定義

各例外はHTTPステータスとクライアント向けメッセージを持ち、
main.py の例外ハンドラで {"success": false, "message": ...} に変換される。
"""
from typing import Any, Optional


class BillingApiError(Exception):
    """課金API例外の基底クラス"""

    status_code: int = 500

    def __init__(self, message: str, status_code: Optional[int] = None, data: Any = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.data = data
        super().__init__(message)

    def to_dict(self) -> dict:
        body = {"success": False, "message": self.message}
        if self.data is not None:
            body["data"] = self.data
        return body


class RequestValidationFailed(BillingApiError):
    """入力値不正 (400)"""

    status_code = 400


class NotFoundError(BillingApiError):
    """対象レコードなし (404)"""

    status_code = 404


class ConflictError(BillingApiError):
    """保留中リクエストの種別不一致 (400)"""

    status_code = 400


class ProviderApiError(BillingApiError):
    """PayPal API呼び出し失敗 (500)"""

    status_code = 500


class PersistenceError(BillingApiError):
    """DB更新失敗 (500)"""

    status_code = 500


class PlanCatalogError(BillingApiError):
    """プランカタログ未設定 (500)"""

    status_code = 500
