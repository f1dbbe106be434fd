from pydantic import BaseModel
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """アプリケーション設定"""

    # データベース
    DATABASE_URL: str = "mysql+pymysql://billing:billingpassword@db:3306/billing?charset=utf8mb4"

    # Redis (PayPalアクセストークンキャッシュ)
    REDIS_URL: str = "redis://redis:6379/0"

    # PayPal
    PAYPAL_API_BASE_URL: str = "https://api-m.sandbox.paypal.com"
    PAYPAL_CLIENT_ID: str = ""
    PAYPAL_CLIENT_SECRET: str = ""
    PAYPAL_TIMEOUT_SECONDS: float = 15.0
    PAYPAL_TOKEN_CACHE_ENABLED: bool = True

    # サービス設定
    SITE_NAME: str = "Billing API"
    ALLOWED_ORIGINS: str = "http://localhost:8000,http://localhost:3000"

    # 環境
    ENV: str = "development"
    DEBUG: bool = True

    @property
    def allowed_origins_list(self) -> list[str]:
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]

    @property
    def paypal(self) -> "PayPalConfig":
        return PayPalConfig(
            base_url=self.PAYPAL_API_BASE_URL.rstrip("/"),
            client_id=self.PAYPAL_CLIENT_ID,
            client_secret=self.PAYPAL_CLIENT_SECRET,
            timeout=self.PAYPAL_TIMEOUT_SECONDS,
        )

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


class PayPalConfig(BaseModel):
    """PayPalクライアント設定 (構築時に明示的に渡す)"""

    base_url: str
    client_id: str = ""
    client_secret: str = ""
    timeout: float = 15.0

    model_config = {"frozen": True}


settings = Settings()
