"""PayPal REST API操作サービス"""
from typing import Any, Optional, Protocol

import requests
import redis

from billing_api.core.config import PayPalConfig
from billing_api.core.errors import ProviderApiError
from billing_api.core.logging import get_logger

logger = get_logger(__name__)

TOKEN_CACHE_PREFIX = "paypal:access_token:"
# 期限切れ直前のトークンを使わないよう余裕を持たせる (秒)
TOKEN_EXPIRY_MARGIN = 60


class TokenSupplier(Protocol):
    def get_token(self) -> str:
        ...


def _describe_error_response(response: requests.Response) -> str:
    """PayPalのエラーレスポンスから人が読めるメッセージを組み立てる"""
    detail = ""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        # OAuthエンドポイントは error / error_description 形式
        detail = body.get("message") or body.get("error_description") or ""
        name = body.get("name") or body.get("error")
        if name:
            detail = f"{name}: {detail}" if detail else name
    if not detail:
        detail = (response.text or "").strip()[:500]
    return f"Request failed with status code {response.status_code}" + (f" ({detail})" if detail else "")


class PayPalTokenSupplier:
    """OAuth2 client credentials でアクセストークンを取得

    Redisクライアントが渡された場合は expires_in に合わせてキャッシュする。
    """

    def __init__(
        self,
        config: PayPalConfig,
        redis_client: Optional[redis.Redis] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.redis = redis_client
        self.session = session or requests.Session()

    @property
    def cache_key(self) -> str:
        return f"{TOKEN_CACHE_PREFIX}{self.config.client_id}"

    def get_token(self) -> str:
        if not self.config.client_id or not self.config.client_secret:
            raise ProviderApiError("PayPal credentials are not configured")

        cached = self._get_cached()
        if cached:
            return cached

        token, expires_in = self._fetch_token()
        self._store(token, expires_in)
        return token

    def _get_cached(self) -> Optional[str]:
        if self.redis is None:
            return None
        try:
            return self.redis.get(self.cache_key)
        except redis.RedisError as e:
            logger.warning(f"PayPalトークンキャッシュ取得失敗: {e}")
            return None

    def _store(self, token: str, expires_in: int):
        if self.redis is None:
            return
        ttl = expires_in - TOKEN_EXPIRY_MARGIN
        if ttl <= 0:
            return
        try:
            self.redis.set(self.cache_key, token, ex=ttl)
        except redis.RedisError as e:
            logger.warning(f"PayPalトークンキャッシュ保存失敗: {e}")

    def _fetch_token(self) -> tuple[str, int]:
        url = f"{self.config.base_url}/v1/oauth2/token"
        try:
            response = self.session.post(
                url,
                auth=(self.config.client_id, self.config.client_secret),
                data={"grant_type": "client_credentials"},
                headers={"Accept": "application/json"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"PayPalトークン取得失敗: {e}")
            raise ProviderApiError(f"Error obtaining PayPal access token: {e}")

        if response.status_code >= 400:
            detail = _describe_error_response(response)
            logger.error(f"PayPalトークン取得失敗: {detail}")
            raise ProviderApiError(f"Error obtaining PayPal access token: {detail}")

        try:
            payload = response.json()
        except ValueError:
            raise ProviderApiError("Error obtaining PayPal access token: invalid response body")

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            raise ProviderApiError("Error obtaining PayPal access token: access_token missing")

        expires_in = int(payload.get("expires_in") or 0)
        logger.info(f"PayPalアクセストークン取得: expires_in={expires_in}")
        return token, expires_in


class PayPalClient:
    """PayPal Billing Subscriptions API クライアント"""

    def __init__(
        self,
        config: PayPalConfig,
        token_supplier: TokenSupplier,
        session: Optional[requests.Session] = None,
    ):
        self.config = config
        self.token_supplier = token_supplier
        self.session = session or requests.Session()

    def request(self, path: str, method: str = "post", body: Optional[dict] = None) -> dict[str, Any]:
        """認証付きでPayPal APIを呼び出し、レスポンスJSONを返す

        Raises:
            ProviderApiError: 通信エラー、またはPayPalがエラーステータスを返した場合
        """
        access_token = self.token_supplier.get_token()
        url = f"{self.config.base_url}{path}"
        method = method.upper()
        # GET以外は空でもJSONボディを送る
        payload = None if method == "GET" else (body or {})

        try:
            response = self.session.request(
                method=method,
                url=url,
                headers={
                    "Authorization": f"Bearer {access_token}",
                    "Content-Type": "application/json",
                },
                json=payload,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error with PayPal API: {method} {path} - {e}")
            raise ProviderApiError(f"Error with PayPal API: {e}")

        if response.status_code >= 400:
            detail = _describe_error_response(response)
            logger.error(f"Error with PayPal API: {method} {path} - {detail}")
            raise ProviderApiError(f"Error with PayPal API: {detail}")

        logger.info(f"PayPal API呼び出し成功: {method} {path} status={response.status_code}")

        # /activate などは 204 No Content を返す
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            raise ProviderApiError("Error with PayPal API: invalid JSON response")

    def get_subscription(self, subscription_id: str) -> dict[str, Any]:
        """購読詳細を取得"""
        return self.request(f"/v1/billing/subscriptions/{subscription_id}", "get")

    def revise_subscription(self, subscription_id: str, plan_id: str) -> dict[str, Any]:
        """購読のプランを変更"""
        return self.request(
            f"/v1/billing/subscriptions/{subscription_id}/revise",
            "post",
            {"plan_id": plan_id},
        )

    def activate_subscription(self, subscription_id: str, reason: str) -> dict[str, Any]:
        """一時停止中の購読を再開"""
        return self.request(
            f"/v1/billing/subscriptions/{subscription_id}/activate",
            "post",
            {"reason": reason},
        )
