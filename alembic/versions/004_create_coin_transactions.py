"""004: create coin_transactions table

Revision ID: 004
Revises: 003
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE coin_transactions (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             VARCHAR(64)     NOT NULL,
            transaction_type    VARCHAR(20)     NOT NULL,
            amount              BIGINT          NOT NULL,
            balance_after       BIGINT          NOT NULL,
            related_user_id     VARCHAR(64),
            related_post_id     VARCHAR(64),
            package_id          INTEGER,
            price_cents         BIGINT,
            payment_reference   VARCHAR(64),
            description         VARCHAR(500),
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_coin_tx_type CHECK (
                transaction_type IN ('PURCHASE', 'GIFT_SENT', 'GIFT_RECEIVED', 'SIGNUP_BONUS')
            ),
            CONSTRAINT ck_coin_tx_balance_gte_0 CHECK (balance_after >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_coin_tx_user_id ON coin_transactions (user_id, id DESC);")
    op.execute("COMMENT ON TABLE coin_transactions IS 'Coin movements — append-only, never updated or deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS coin_transactions CASCADE;")
