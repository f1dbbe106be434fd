"""購読の一時停止/ダウングレード/解約リクエスト取消ロジック"""
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from billing_api.core.errors import (
    ConflictError,
    NotFoundError,
    PersistenceError,
    PlanCatalogError,
    ProviderApiError,
    RequestValidationFailed,
)
from billing_api.core.logging import get_logger
from billing_api.models.payment_plan import PaymentPlan
from billing_api.models.update_subscription_queue import UpdateSubscriptionQueue, PAUSE_REQUEST_TYPES
from billing_api.models.user_payment_log import UserPaymentLog
from billing_api.schemas.subscription import RemoveSubscriptionPauseRequest, ResolverResult
from billing_api.services.paypal_service import PayPalClient

logger = get_logger(__name__)

VALID_DOWNGRADE_DURATIONS = (1, 6, 12)
REACTIVATE_REASON = "Reactivating subscription for user"


# =========================================================
# プランカタログ
# =========================================================

def duration_to_index(duration_months: int) -> int:
    """契約期間(月) → プランカタログのインデックス

    1 → 0, 6 → 1, それ以外は 2 (12ヶ月)。値の妥当性は呼び出し前に検証済みであること。
    """
    if duration_months == 1:
        return 0
    if duration_months == 6:
        return 1
    return 2


def get_plan_catalog(db: Session) -> PaymentPlan:
    plans = db.query(PaymentPlan).order_by(PaymentPlan.id).first()
    if not plans or not plans.essential_product_ids or not plans.pro_product_ids:
        raise PlanCatalogError("Plans not found")
    return plans


def save_plan_catalog(db: Session, pro_ids: list[str], essential_ids: list[str]) -> PaymentPlan:
    """プランカタログを登録/更新 (既存行があれば上書き)"""
    tiers = len(VALID_DOWNGRADE_DURATIONS)
    if len(pro_ids) != tiers or len(essential_ids) != tiers:
        raise RequestValidationFailed(f"Plan catalog requires {tiers} plan ids per tier (1, 6, 12 months)")

    plans = db.query(PaymentPlan).order_by(PaymentPlan.id).first()
    if plans is None:
        plans = PaymentPlan()
        db.add(plans)
    plans.pro_product_ids = list(pro_ids)
    plans.essential_product_ids = list(essential_ids)
    db.commit()
    db.refresh(plans)
    logger.info(f"プランカタログ更新: pro={pro_ids}, essential={essential_ids}")
    return plans


def remove_downgrade(
    db: Session,
    client: PayPalClient,
    subscription_id: str,
    duration_months: int,
) -> ResolverResult:
    """ダウングレード予約を取り消し、PayPal側のプランを上位/下位プランへ戻す

    現在のプランは PayPal の購読詳細から取得する (支払履歴のプランIDは契約時の値のため使わない)。
    失敗時は例外を投げず success=False を返す。
    """
    try:
        plans = get_plan_catalog(db)

        current_plan_id = client.get_subscription(subscription_id).get("plan_id")
        if not current_plan_id:
            raise ProviderApiError("Error with PayPal API: subscription has no plan_id")

        is_pro = current_plan_id in plans.pro_product_ids
        is_essential = current_plan_id in plans.essential_product_ids

        if is_pro:
            logger.info(f"最上位プランのため変更なし: subscription_id={subscription_id}")
            return ResolverResult(success=True, message="Already on topped plan, no update can be done")

        idx = duration_to_index(duration_months)
        new_plan_id = plans.pro_product_ids[idx] if is_essential else plans.essential_product_ids[idx]

        revised = client.revise_subscription(subscription_id, new_plan_id)
        logger.info(
            f"PayPalプラン変更: subscription_id={subscription_id}, "
            f"{current_plan_id} -> {new_plan_id} ({duration_months}ヶ月)"
        )
        return ResolverResult(
            success=True,
            data=revised,
            message="Plan downgraded successfully on PayPal",
        )
    except Exception as e:
        logger.error(f"ダウングレード取消失敗: subscription_id={subscription_id}, error={e}")
        return ResolverResult(success=False, message=str(e))


def reactivate_subscription(client: PayPalClient, subscription_id: str) -> ResolverResult:
    """一時停止/解約予約中の購読をPayPal上で再開"""
    try:
        result = client.activate_subscription(subscription_id, REACTIVATE_REASON)
        logger.info(f"PayPal購読再開: subscription_id={subscription_id}")
        return ResolverResult(success=True, data=result)
    except Exception as e:
        logger.error(f"PayPal購読再開失敗: subscription_id={subscription_id}, error={e}")
        return ResolverResult(success=False, message=f"Error reactivating subscription: {e}")


# =========================================================
# リクエスト取消
# =========================================================

def validate_remove_request(req: RemoveSubscriptionPauseRequest):
    """入力検証 (DB・PayPalにアクセスする前に行う)"""
    if (
        not req.subscription_id
        or not req.user_id
        or not req.message
        or (req.is_remove_downgrade and not req.downgrade_duration)
    ):
        raise RequestValidationFailed(
            "Please provide subscriptionId, userId, message, and if isRemoveDowngrade is true, downgradeDuration"
        )

    if req.message not in PAUSE_REQUEST_TYPES:
        raise RequestValidationFailed("Invalid message type. Use downgrade, suspend, or cancel")

    if req.is_remove_downgrade and req.downgrade_duration not in VALID_DOWNGRADE_DURATIONS:
        raise RequestValidationFailed("Invalid downgrade duration. Use 1, 6, or 12")


def get_latest_request(db: Session, subscription_id: str, user_id: str) -> Optional[UpdateSubscriptionQueue]:
    return db.query(UpdateSubscriptionQueue).filter(
        UpdateSubscriptionQueue.subscription_id == subscription_id,
        UpdateSubscriptionQueue.user_id == user_id,
    ).order_by(
        UpdateSubscriptionQueue.created_at.desc(),
        UpdateSubscriptionQueue.id.desc(),
    ).first()


def get_latest_payment_log(db: Session, subscription_id: str, user_id: str) -> Optional[UserPaymentLog]:
    return db.query(UserPaymentLog).filter(
        UserPaymentLog.subscription_id == subscription_id,
        UserPaymentLog.user_id == user_id,
    ).order_by(
        UserPaymentLog.created_at.desc(),
        UserPaymentLog.id.desc(),
    ).first()


def _remove_request_and_log(
    db: Session,
    pending: UpdateSubscriptionQueue,
    latest_log: UserPaymentLog,
    message: str,
) -> UserPaymentLog:
    """保留リクエスト削除と履歴追加を1トランザクションで行う"""
    # commit/rollback 後はORMオブジェクトが失効するため先に値を取り出す
    pending_id, subscription_id, user_id, original_type = (
        pending.id, pending.subscription_id, pending.user_id, pending.type,
    )
    try:
        deleted = db.query(UpdateSubscriptionQueue).filter(
            UpdateSubscriptionQueue.id == pending_id,
        ).delete(synchronize_session=False)

        new_log = UserPaymentLog(
            subscription_id=subscription_id,
            user_id=user_id,
            status=f"Request {message} Removed: {original_type}",
            is_coupon_applied=latest_log.is_coupon_applied,
            coupon_code=latest_log.coupon_code,
            base_billing_plan_id=latest_log.base_billing_plan_id,
            plan_name=latest_log.plan_name,
        )
        db.add(new_log)
        db.flush()

        if not deleted or new_log.id is None:
            db.rollback()
            logger.error(
                f"リクエスト削除/履歴追加失敗: subscription_id={subscription_id}, "
                f"deleted={deleted}, request_id={pending_id}"
            )
            raise PersistenceError("Error removing request or creating new log")

        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"リクエスト削除/履歴追加失敗: subscription_id={subscription_id}, error={e}")
        raise PersistenceError("Error removing request or creating new log")

    return new_log


def remove_subscription_pause(
    db: Session,
    client: PayPalClient,
    req: RemoveSubscriptionPauseRequest,
) -> dict:
    """保留中の購読変更リクエストを取り消す

    検証 → 参照 → PayPal操作 → DB更新 の順に進み、途中で失敗したら以降は実行しない。

    Raises:
        BillingApiError: 各段階の失敗 (ステータスコードは例外クラスに従う)
    """
    validate_remove_request(req)

    pending = get_latest_request(db, req.subscription_id, req.user_id)
    latest_log = get_latest_payment_log(db, req.subscription_id, req.user_id)

    if not pending:
        raise NotFoundError("No request found for this subscription")

    if pending.type != req.message:
        raise ConflictError("Request type mismatch")

    if not latest_log:
        raise NotFoundError("No payment logs found; transaction never made")

    if req.is_remove_downgrade:
        result = remove_downgrade(db, client, req.subscription_id, req.downgrade_duration)
    else:
        result = reactivate_subscription(client, req.subscription_id)

    if not result.success:
        raise ProviderApiError(result.message, data=result.data)

    new_log = _remove_request_and_log(db, pending, latest_log, req.message)
    logger.info(
        "購読変更リクエスト取消",
        extra={"extra_data": {
            "subscription_id": req.subscription_id,
            "user_id": req.user_id,
            "type": req.message,
            "remove_downgrade": bool(req.is_remove_downgrade),
            "payment_log_id": new_log.id,
        }},
    )
    return {"success": True, "message": "Request removed successfully"}
