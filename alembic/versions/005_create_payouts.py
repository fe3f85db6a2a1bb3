"""005: create payouts table

Revision ID: 005
Revises: 004
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE payouts (
            id                  VARCHAR(64)     PRIMARY KEY,
            creator_id          VARCHAR(64)     NOT NULL REFERENCES coin_balances (user_id),
            coins               BIGINT          NOT NULL,
            gross_cents         BIGINT          NOT NULL,
            platform_fee_cents  BIGINT          NOT NULL,
            net_payout_cents    BIGINT          NOT NULL,
            status              VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            requested_at        TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            processed_at        TIMESTAMPTZ,
            notes               VARCHAR(500),
            CONSTRAINT ck_payouts_coins_gt_0 CHECK (coins > 0),
            CONSTRAINT ck_payouts_status CHECK (status IN ('PENDING', 'PAID', 'CANCELLED')),
            CONSTRAINT ck_payouts_processed_at CHECK (
                (status = 'PENDING') = (processed_at IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_payouts_creator_time ON payouts (creator_id, requested_at DESC);")
    op.execute("""
        CREATE INDEX idx_payouts_creator_reserved
        ON payouts (creator_id)
        WHERE status <> 'CANCELLED';
    """)
    op.execute("COMMENT ON TABLE payouts IS 'Creator payout requests — terminal rows are an immutable audit trail';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS payouts CASCADE;")
