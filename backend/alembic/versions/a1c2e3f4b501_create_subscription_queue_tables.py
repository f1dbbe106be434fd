"""create payment plan catalog, subscription queue and payment log tables

Revision ID: a1c2e3f4b501
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c2e3f4b501'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # payment_plans テーブル (PayPalプランカタログ、1行のみ)
    op.create_table(
        'payment_plans',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('pro_product_ids', sa.JSON(), nullable=True, comment='Proプラン Plan ID [1ヶ月, 6ヶ月, 12ヶ月]'),
        sa.Column('essential_product_ids', sa.JSON(), nullable=True, comment='Essentialプラン Plan ID [1ヶ月, 6ヶ月, 12ヶ月]'),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )

    # update_subscription_queue テーブル (保留中の購読変更リクエスト)
    op.create_table(
        'update_subscription_queue',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('subscription_id', sa.String(255), nullable=False, comment='PayPal Subscription ID'),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column(
            'type',
            sa.Enum('downgrade', 'suspend', 'cancel', name='update_subscription_type'),
            nullable=False,
            comment='downgrade / suspend / cancel',
        ),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_update_subscription_queue_subscription_user',
        'update_subscription_queue', ['subscription_id', 'user_id'],
    )
    op.create_index('ix_update_subscription_queue_created_at', 'update_subscription_queue', ['created_at'])

    # user_payment_logs テーブル (決済イベント履歴)
    op.create_table(
        'user_payment_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('subscription_id', sa.String(255), nullable=False, comment='PayPal Subscription ID'),
        sa.Column('user_id', sa.String(64), nullable=False),
        sa.Column('status', sa.String(255), nullable=False, comment='イベント内容 (自由記述)'),
        sa.Column('is_coupon_applied', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('coupon_code', sa.String(100), nullable=True),
        sa.Column('base_billing_plan_id', sa.String(255), nullable=True, comment='契約時のPayPal Plan ID'),
        sa.Column('plan_name', sa.String(255), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_user_payment_logs_subscription_user',
        'user_payment_logs', ['subscription_id', 'user_id'],
    )
    op.create_index('ix_user_payment_logs_created_at', 'user_payment_logs', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_user_payment_logs_created_at', 'user_payment_logs')
    op.drop_index('ix_user_payment_logs_subscription_user', 'user_payment_logs')
    op.drop_table('user_payment_logs')
    op.drop_index('ix_update_subscription_queue_created_at', 'update_subscription_queue')
    op.drop_index('ix_update_subscription_queue_subscription_user', 'update_subscription_queue')
    op.drop_table('update_subscription_queue')
    op.drop_table('payment_plans')
    sa.Enum(name='update_subscription_type').drop(op.get_bind(), checkfirst=True)
