from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from billing_api.core.config import settings
from billing_api.core.logging import setup_logging, get_logger
from billing_api.core.security_headers import SecurityHeadersMiddleware
from billing_api.core.rate_limit import limiter, rate_limit_exceeded_handler
from billing_api.routers import health, subscription_pause

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """アプリケーションライフサイクル管理"""
    setup_logging(debug=settings.DEBUG, service=settings.SITE_NAME, env=settings.ENV)
    logger.info("アプリケーション起動")
    yield
    logger.info("アプリケーション終了")


app = FastAPI(
    title=settings.SITE_NAME,
    lifespan=lifespan,
    docs_url="/api/docs" if settings.DEBUG else None,
    redoc_url="/api/redoc" if settings.DEBUG else None,
)

# レート制限設定
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

# --- バリデーションエラーをAPI共通形式に変換 ---
_FIELD_NAMES = {
    "subscription_id": "subscriptionId",
    "user_id": "userId",
    "is_remove_downgrade": "isRemoveDowngrade",
    "downgrade_duration": "downgradeDuration",
}


def _translate_error(err: dict) -> str:
    t = err.get("type", "")
    loc = err.get("loc", [])
    field = str(loc[-1]) if loc else ""
    name = _FIELD_NAMES.get(field, field)

    if t == "json_invalid":
        return "Request body must be valid JSON"
    if t == "missing":
        return f"{name} is required"
    if t in ("int_parsing", "int_type", "int_from_float"):
        return f"{name} must be an integer"
    if t == "string_type":
        return f"{name} must be a string"
    if t in ("bool_parsing", "bool_type"):
        return f"{name} must be a boolean"
    if t == "model_attributes_type":
        return "Request body must be a JSON object"
    return f"{name}: invalid value"


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    messages = [_translate_error(e) for e in exc.errors()]
    return JSONResponse(status_code=400, content={"success": False, "message": "; ".join(messages)})


# ミドルウェア (登録順序: 後に登録したものが先に実行される)
app.add_middleware(SecurityHeadersMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ルーター登録
app.include_router(health.router)
app.include_router(subscription_pause.router)
