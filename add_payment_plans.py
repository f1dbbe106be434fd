#!/usr/bin/env python3
"""PayPalプランカタログ (Pro / Essential × 1・6・12ヶ月) を登録するスクリプト

使用例:
    python add_payment_plans.py \
        --pro P-PRO1M P-PRO6M P-PRO12M \
        --essential P-ESS1M P-ESS6M P-ESS12M
"""
import argparse

from billing_api.core.database import SessionLocal
from billing_api.core.errors import BillingApiError
from billing_api.services.subscription_pause_service import save_plan_catalog


def main():
    parser = argparse.ArgumentParser(description="PayPalプランカタログ登録")
    parser.add_argument("--pro", nargs=3, required=True, metavar="PLAN_ID", help="Pro Plan ID (1/6/12ヶ月)")
    parser.add_argument("--essential", nargs=3, required=True, metavar="PLAN_ID", help="Essential Plan ID (1/6/12ヶ月)")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        plans = save_plan_catalog(db, args.pro, args.essential)
        print(f"✅ プランカタログ登録完了: id={plans.id}")
    except BillingApiError as e:
        db.rollback()
        print(f"❌ エラー: {e.message}")
        raise SystemExit(1)
    finally:
        db.close()


if __name__ == "__main__":
    main()
