"""購読変更リクエスト取消ルーター"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from billing_api.core.database import get_db
from billing_api.core.errors import BillingApiError
from billing_api.core.rate_limit import limiter, SUBSCRIPTION_CHANGE_RATE_LIMIT
from billing_api.schemas.subscription import ApiResponse, RemoveSubscriptionPauseRequest
from billing_api.services import subscription_pause_service
from billing_api.services.paypal_service import PayPalClient
from billing_api.routers.deps import get_paypal_client
from billing_api.core.logging import get_logger

router = APIRouter(prefix="/api/subscriptions", tags=["subscriptions"])
logger = get_logger(__name__)


@router.post("/remove-pause", response_model=ApiResponse)
@limiter.limit(SUBSCRIPTION_CHANGE_RATE_LIMIT)
def remove_subscription_pause(
    request: Request,
    req: RemoveSubscriptionPauseRequest,
    db: Session = Depends(get_db),
    client: PayPalClient = Depends(get_paypal_client),
):
    """保留中のダウングレード/一時停止/解約リクエストを取り消す"""
    try:
        return subscription_pause_service.remove_subscription_pause(db, client, req)
    except BillingApiError as e:
        logger.info(f"購読変更リクエスト取消失敗: status={e.status_code}, message={e.message}")
        return JSONResponse(status_code=e.status_code, content=e.to_dict())
    except Exception as e:
        logger.exception(f"購読変更リクエスト取消エラー: subscription_id={req.subscription_id}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": f"Error fetching subscription details: {e}"},
        )
