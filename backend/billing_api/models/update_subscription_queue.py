from sqlalchemy import Column, Integer, String, DateTime, Enum as SAEnum, Index, func
from billing_api.core.database import Base

PAUSE_REQUEST_TYPES = ("downgrade", "suspend", "cancel")


class UpdateSubscriptionQueue(Base):
    """保留中の購読変更リクエスト (一時停止/ダウングレード/解約)"""

    __tablename__ = "update_subscription_queue"

    id = Column(Integer, primary_key=True, autoincrement=True)
    subscription_id = Column(String(255), nullable=False, comment="PayPal Subscription ID")
    user_id = Column(String(64), nullable=False)
    type = Column(
        SAEnum(*PAUSE_REQUEST_TYPES, name="update_subscription_type"),
        nullable=False,
        comment="downgrade / suspend / cancel",
    )
    created_at = Column(DateTime, nullable=False, server_default=func.now(), index=True)

    __table_args__ = (
        Index("ix_update_subscription_queue_subscription_user", "subscription_id", "user_id"),
    )
