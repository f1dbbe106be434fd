from sqlalchemy import Column, Integer, DateTime, JSON, func
from billing_api.core.database import Base


class PaymentPlan(Base):
    """PayPalプランカタログ (1行のみ)

    各リストは契約期間 1ヶ月 / 6ヶ月 / 12ヶ月 の順に PayPal Plan ID を保持する。
    """

    __tablename__ = "payment_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pro_product_ids = Column(JSON, nullable=True, comment="Proプラン Plan ID [1ヶ月, 6ヶ月, 12ヶ月]")
    essential_product_ids = Column(JSON, nullable=True, comment="Essentialプラン Plan ID [1ヶ月, 6ヶ月, 12ヶ月]")
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
