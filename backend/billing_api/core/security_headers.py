"""セキュリティヘッダーミドルウェア (JSON API向け)"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """APIレスポンスにセキュリティ関連のHTTPヘッダーを付与する"""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )

        # HTMLを返さないためリソース読込は全面禁止
        response.headers["Content-Security-Policy"] = (
            "default-src 'none'; frame-ancestors 'none'"
        )
        response.headers["Referrer-Policy"] = "no-referrer"

        # 課金情報はキャッシュさせない
        if request.url.path.startswith("/api/subscriptions"):
            response.headers["Cache-Control"] = "no-store"

        return response
