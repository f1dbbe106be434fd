# 全モデルをインポート (Alembic autogenerate用)
from billing_api.models.payment_plan import PaymentPlan
from billing_api.models.update_subscription_queue import UpdateSubscriptionQueue
from billing_api.models.user_payment_log import UserPaymentLog

__all__ = [
    "PaymentPlan",
    "UpdateSubscriptionQueue",
    "UserPaymentLog",
]
