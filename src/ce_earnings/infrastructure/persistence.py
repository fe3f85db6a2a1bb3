"""PayoutRepository — concrete implementation of PayoutRepositoryProtocol.

Per-creator serialisation: ``lock_creator_balance`` takes a row lock on the
creator's coin_balances row (SELECT ... FOR UPDATE). Every payout request
acquires it before summing reservations, so a second concurrent request for
the same creator waits until the first commits and then sees its PENDING row.

Transaction ownership: the CALLER commits or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_coins.domain.models import CoinBalance
from src.ce_common.enums import PayoutStatus
from src.ce_common.errors import InternalError
from src.ce_earnings.domain.models import Payout

_BALANCE_COLUMNS = "user_id, available, total_earned, version, created_at, updated_at"

# Scalar subquery: earned and reserved coins come from one statement snapshot
_GET_EARNINGS_SQL = text(f"""
    SELECT {_BALANCE_COLUMNS},
           (SELECT COALESCE(SUM(p.coins), 0)
            FROM payouts p
            WHERE p.creator_id = b.user_id AND p.status <> 'CANCELLED') AS reserved
    FROM coin_balances b
    WHERE b.user_id = :user_id
""")

_LOCK_BALANCE_SQL = text(f"""
    SELECT {_BALANCE_COLUMNS}
    FROM coin_balances
    WHERE user_id = :user_id
    FOR UPDATE
""")

_SUM_RESERVED_SQL = text("""
    SELECT COALESCE(SUM(coins), 0)
    FROM payouts
    WHERE creator_id = :creator_id AND status <> 'CANCELLED'
""")

_PAYOUT_COLUMNS = (
    "id, creator_id, coins, gross_cents, platform_fee_cents, net_payout_cents, "
    "status, requested_at, processed_at, notes"
)

_INSERT_PAYOUT_SQL = text(f"""
    INSERT INTO payouts
        (id, creator_id, coins, gross_cents, platform_fee_cents, net_payout_cents,
         status, requested_at, notes)
    VALUES
        (:id, :creator_id, :coins, :gross_cents, :platform_fee_cents, :net_payout_cents,
         :status, :requested_at, :notes)
    RETURNING {_PAYOUT_COLUMNS}
""")

_GET_PAYOUT_FOR_UPDATE_SQL = text(f"""
    SELECT {_PAYOUT_COLUMNS}
    FROM payouts
    WHERE id = :id
    FOR UPDATE
""")

# Guarded on the old status: a terminal row can never be rewritten
_SAVE_TRANSITION_SQL = text(f"""
    UPDATE payouts
    SET status = :status,
        processed_at = :processed_at,
        notes = :notes
    WHERE id = :id AND status = 'PENDING'
    RETURNING {_PAYOUT_COLUMNS}
""")

_LIST_PAYOUTS_SQL = text(f"""
    SELECT {_PAYOUT_COLUMNS}
    FROM payouts
    WHERE creator_id = :creator_id
    ORDER BY requested_at DESC, id DESC
    LIMIT :limit OFFSET :offset
""")

_COUNT_PAYOUTS_SQL = text("""
    SELECT COUNT(*) FROM payouts WHERE creator_id = :creator_id
""")


def _row_to_balance(row: object) -> CoinBalance:
    return CoinBalance(
        user_id=row.user_id,  # type: ignore[attr-defined]
        available=row.available,  # type: ignore[attr-defined]
        total_earned=row.total_earned,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_payout(row: object) -> Payout:
    return Payout(
        id=row.id,  # type: ignore[attr-defined]
        creator_id=row.creator_id,  # type: ignore[attr-defined]
        coins=row.coins,  # type: ignore[attr-defined]
        gross_cents=row.gross_cents,  # type: ignore[attr-defined]
        platform_fee_cents=row.platform_fee_cents,  # type: ignore[attr-defined]
        net_payout_cents=row.net_payout_cents,  # type: ignore[attr-defined]
        status=PayoutStatus(row.status),  # type: ignore[attr-defined]
        requested_at=row.requested_at,  # type: ignore[attr-defined]
        processed_at=row.processed_at,  # type: ignore[attr-defined]
        notes=row.notes,  # type: ignore[attr-defined]
    )


class PayoutRepository:
    async def get_creator_earnings(
        self, db: AsyncSession, creator_id: str
    ) -> tuple[CoinBalance, int] | None:
        result = await db.execute(_GET_EARNINGS_SQL, {"user_id": creator_id})
        row = result.fetchone()
        if row is None:
            return None
        return _row_to_balance(row), int(row.reserved)

    async def lock_creator_balance(
        self, db: AsyncSession, creator_id: str
    ) -> CoinBalance | None:
        result = await db.execute(_LOCK_BALANCE_SQL, {"user_id": creator_id})
        row = result.fetchone()
        return _row_to_balance(row) if row else None

    async def sum_reserved_coins(self, db: AsyncSession, creator_id: str) -> int:
        result = await db.execute(_SUM_RESERVED_SQL, {"creator_id": creator_id})
        return int(result.scalar_one())

    async def insert_payout(self, db: AsyncSession, payout: Payout) -> Payout:
        result = await db.execute(
            _INSERT_PAYOUT_SQL,
            {
                "id": payout.id,
                "creator_id": payout.creator_id,
                "coins": payout.coins,
                "gross_cents": payout.gross_cents,
                "platform_fee_cents": payout.platform_fee_cents,
                "net_payout_cents": payout.net_payout_cents,
                "status": payout.status.value,
                "requested_at": payout.requested_at,
                "notes": payout.notes,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Payout insert returned no rows")
        return _row_to_payout(row)

    async def get_payout_for_update(
        self, db: AsyncSession, payout_id: str
    ) -> Payout | None:
        result = await db.execute(_GET_PAYOUT_FOR_UPDATE_SQL, {"id": payout_id})
        row = result.fetchone()
        return _row_to_payout(row) if row else None

    async def save_transition(self, db: AsyncSession, payout: Payout) -> Payout:
        result = await db.execute(
            _SAVE_TRANSITION_SQL,
            {
                "id": payout.id,
                "status": payout.status.value,
                "processed_at": payout.processed_at,
                "notes": payout.notes,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError(f"Payout {payout.id} was no longer PENDING on save")
        return _row_to_payout(row)

    async def list_payouts(
        self, db: AsyncSession, creator_id: str, offset: int, limit: int
    ) -> list[Payout]:
        result = await db.execute(
            _LIST_PAYOUTS_SQL,
            {"creator_id": creator_id, "offset": offset, "limit": limit},
        )
        return [_row_to_payout(row) for row in result.fetchall()]

    async def count_payouts(self, db: AsyncSession, creator_id: str) -> int:
        result = await db.execute(_COUNT_PAYOUTS_SQL, {"creator_id": creator_id})
        return int(result.scalar_one())
