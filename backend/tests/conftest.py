"""
Shared fixtures: in-memory SQLite database, fake PayPal client, TestClient.
"""
import os

# billing_api.core.database はインポート時にエンジンを作るため先に差し替える
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("PAYPAL_API_BASE_URL", "https://api-m.sandbox.paypal.com")

from datetime import datetime
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from billing_api.core.database import Base, get_db
from billing_api.core.rate_limit import limiter
from billing_api.main import app
from billing_api.models import PaymentPlan, UpdateSubscriptionQueue, UserPaymentLog
from billing_api.routers.deps import get_paypal_client
from billing_api.services.paypal_service import PayPalClient

PRO_PLAN_IDS = ["P-PRO-1M", "P-PRO-6M", "P-PRO-12M"]
ESSENTIAL_PLAN_IDS = ["P-ESS-1M", "P-ESS-6M", "P-ESS-12M"]

SUBSCRIPTION_ID = "I-BW452GLLEP1G"
USER_ID = "64f1c2a9e4b0a1b2c3d4e5f6"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def paypal_client():
    """PayPalClient の代替 (HTTP通信なし)"""
    client = MagicMock(spec=PayPalClient)
    client.get_subscription.return_value = {"id": SUBSCRIPTION_ID, "plan_id": ESSENTIAL_PLAN_IDS[0]}
    client.revise_subscription.return_value = {"plan_id": PRO_PLAN_IDS[0], "links": []}
    client.activate_subscription.return_value = {}
    return client


@pytest.fixture
def plan_catalog(db):
    plans = PaymentPlan(pro_product_ids=PRO_PLAN_IDS, essential_product_ids=ESSENTIAL_PLAN_IDS)
    db.add(plans)
    db.commit()
    return plans


@pytest.fixture
def add_pending_request(db):
    def _add(type_="suspend", subscription_id=SUBSCRIPTION_ID, user_id=USER_ID, created_at=None):
        row = UpdateSubscriptionQueue(
            subscription_id=subscription_id,
            user_id=user_id,
            type=type_,
            created_at=created_at or datetime(2026, 10, 1, 12, 0, 0),
        )
        db.add(row)
        db.commit()
        return row

    return _add


@pytest.fixture
def add_payment_log(db):
    def _add(
        status="Payment completed",
        subscription_id=SUBSCRIPTION_ID,
        user_id=USER_ID,
        base_billing_plan_id=ESSENTIAL_PLAN_IDS[0],
        plan_name="Essential Monthly",
        is_coupon_applied=False,
        coupon_code=None,
        created_at=None,
    ):
        row = UserPaymentLog(
            subscription_id=subscription_id,
            user_id=user_id,
            status=status,
            is_coupon_applied=is_coupon_applied,
            coupon_code=coupon_code,
            base_billing_plan_id=base_billing_plan_id,
            plan_name=plan_name,
            created_at=created_at or datetime(2026, 9, 1, 12, 0, 0),
        )
        db.add(row)
        db.commit()
        return row

    return _add


@pytest.fixture
def api_client(session_factory, paypal_client):
    """DBとPayPalクライアントを差し替えた TestClient"""

    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_paypal_client] = lambda: paypal_client
    limiter.reset()
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()
    limiter.reset()
