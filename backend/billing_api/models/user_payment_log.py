from sqlalchemy import Column, Integer, String, Boolean, DateTime, Index, func
from billing_api.core.database import Base


class UserPaymentLog(Base):
    """決済イベント履歴 (追記のみ)"""

    __tablename__ = "user_payment_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subscription_id = Column(String(255), nullable=False, comment="PayPal Subscription ID")
    user_id = Column(String(64), nullable=False)
    status = Column(String(255), nullable=False, comment="イベント内容 (自由記述)")
    is_coupon_applied = Column(Boolean, nullable=False, default=False)
    coupon_code = Column(String(100), nullable=True)
    base_billing_plan_id = Column(String(255), nullable=True, comment="契約時のPayPal Plan ID")
    plan_name = Column(String(255), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)

    __table_args__ = (
        Index("ix_user_payment_logs_subscription_user", "subscription_id", "user_id"),
    )
