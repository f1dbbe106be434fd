import redis as sync_redis
from billing_api.core.config import settings

# 同期Redis (PayPalトークンキャッシュ用)
redis_pool = sync_redis.ConnectionPool.from_url(
    settings.REDIS_URL,
    max_connections=10,
    decode_responses=True,
)


def get_redis() -> sync_redis.Redis:
    """Redisクライアント取得"""
    return sync_redis.Redis(connection_pool=redis_pool)


def check_redis_connection() -> bool:
    """Redis接続チェック"""
    try:
        get_redis().ping()
        return True
    except Exception:
        return False
