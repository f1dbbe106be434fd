"""共通依存関数: PayPalクライアント"""
from typing import Generator

import requests

from billing_api.core.config import settings
from billing_api.core.redis import get_redis
from billing_api.services.paypal_service import PayPalClient, PayPalTokenSupplier


def get_paypal_client() -> Generator[PayPalClient, None, None]:
    """FastAPI依存関数: 設定からPayPalクライアントを構築

    トークン取得とAPI呼び出しで1つのHTTPセッションを共有し、リクエスト終了時に閉じる。
    """
    config = settings.paypal
    session = requests.Session()
    redis_client = get_redis() if settings.PAYPAL_TOKEN_CACHE_ENABLED else None
    token_supplier = PayPalTokenSupplier(config, redis_client=redis_client, session=session)
    try:
        yield PayPalClient(config, token_supplier, session=session)
    finally:
        session.close()
