"""003: create coin_balances table

Revision ID: 003
Revises: 002
Create Date: 2026-10-01
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE coin_balances (
            user_id         VARCHAR(64)     PRIMARY KEY,
            available       BIGINT          NOT NULL DEFAULT 0,
            total_earned    BIGINT          NOT NULL DEFAULT 0,
            version         BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_coin_balances_available_gte_0    CHECK (available >= 0),
            CONSTRAINT ck_coin_balances_total_earned_gte_0 CHECK (total_earned >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_coin_balances_updated_at
            BEFORE UPDATE ON coin_balances
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute(
        "COMMENT ON TABLE coin_balances IS "
        "'One row per user. Units: coins. Row lock serialises payout requests per creator';"
    )


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS coin_balances CASCADE;")
