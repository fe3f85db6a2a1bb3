"""CoinRepository — concrete implementation of CoinRepositoryProtocol.

Balance mutations are single atomic UPDATE ... RETURNING statements.
A result of 0 rows means the row is missing or a constraint (enough coins)
was violated.

Transaction ownership: the CALLER (application service or router) commits
or rolls back.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_coins.domain.models import CoinBalance, CoinTransaction
from src.ce_coins.domain.packages import CoinPackage
from src.ce_common.enums import TransactionType
from src.ce_common.errors import (
    CoinBalanceNotFoundError,
    InsufficientCoinsError,
    InternalError,
    RecipientNotFoundError,
)

_BALANCE_COLUMNS = "user_id, available, total_earned, version, created_at, updated_at"

_GET_BALANCE_SQL = text(f"""
    SELECT {_BALANCE_COLUMNS}
    FROM coin_balances
    WHERE user_id = :user_id
""")

_OPEN_BALANCE_SQL = text(f"""
    INSERT INTO coin_balances (user_id, available, total_earned, version)
    VALUES (:user_id, :available, 0, 0)
    RETURNING {_BALANCE_COLUMNS}
""")

_CREDIT_PURCHASE_SQL = text(f"""
    UPDATE coin_balances
    SET available = available + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING {_BALANCE_COLUMNS}
""")

_DEBIT_SQL = text(f"""
    UPDATE coin_balances
    SET available = available - :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id AND available >= :amount
    RETURNING {_BALANCE_COLUMNS}
""")

# Gift receipts are the only thing that ever raises total_earned
_CREDIT_GIFT_SQL = text(f"""
    UPDATE coin_balances
    SET available    = available + :amount,
        total_earned = total_earned + :amount,
        version = version + 1,
        updated_at = NOW()
    WHERE user_id = :user_id
    RETURNING {_BALANCE_COLUMNS}
""")

_TX_COLUMNS = (
    "id, user_id, transaction_type, amount, balance_after, related_user_id, "
    "related_post_id, package_id, price_cents, payment_reference, description, created_at"
)

_INSERT_TX_SQL = text(f"""
    INSERT INTO coin_transactions
        (user_id, transaction_type, amount, balance_after, related_user_id,
         related_post_id, package_id, price_cents, payment_reference, description)
    VALUES
        (:user_id, :transaction_type, :amount, :balance_after, :related_user_id,
         :related_post_id, :package_id, :price_cents, :payment_reference, :description)
    RETURNING {_TX_COLUMNS}
""")

_LIST_TX_SQL = text(f"""
    SELECT {_TX_COLUMNS}
    FROM coin_transactions
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < :cursor_id)
      AND (CAST(:transaction_type AS VARCHAR) IS NULL OR transaction_type = :transaction_type)
    ORDER BY id DESC
    LIMIT :limit
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


def _row_to_transaction(row: object) -> CoinTransaction:
    return CoinTransaction(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        transaction_type=row.transaction_type,  # type: ignore[attr-defined]
        amount=row.amount,  # type: ignore[attr-defined]
        balance_after=row.balance_after,  # type: ignore[attr-defined]
        related_user_id=row.related_user_id,  # type: ignore[attr-defined]
        related_post_id=row.related_post_id,  # type: ignore[attr-defined]
        package_id=row.package_id,  # type: ignore[attr-defined]
        price_cents=row.price_cents,  # type: ignore[attr-defined]
        payment_reference=row.payment_reference,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class CoinRepository:
    """Concrete repository — all operations atomic at the SQL level."""

    async def get_balance(
        self, db: AsyncSession, user_id: str
    ) -> CoinBalance | None:
        result = await db.execute(_GET_BALANCE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_balance(row) if row else None

    async def open_balance(
        self, db: AsyncSession, user_id: str, signup_bonus: int
    ) -> CoinBalance:
        result = await db.execute(
            _OPEN_BALANCE_SQL, {"user_id": user_id, "available": signup_bonus}
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Balance insert returned no rows")
        balance = _row_to_balance(row)
        if signup_bonus > 0:
            await self._insert_transaction(
                db,
                user_id=user_id,
                transaction_type=TransactionType.SIGNUP_BONUS,
                amount=signup_bonus,
                balance_after=balance.available,
                description="Signup bonus",
            )
        return balance

    async def credit_purchase(
        self,
        db: AsyncSession,
        user_id: str,
        package: CoinPackage,
        payment_reference: str,
    ) -> tuple[CoinBalance, CoinTransaction]:
        result = await db.execute(
            _CREDIT_PURCHASE_SQL, {"user_id": user_id, "amount": package.total_coins}
        )
        row = result.fetchone()
        if row is None:
            raise CoinBalanceNotFoundError(user_id)
        balance = _row_to_balance(row)
        tx = await self._insert_transaction(
            db,
            user_id=user_id,
            transaction_type=TransactionType.PURCHASE,
            amount=package.total_coins,
            balance_after=balance.available,
            package_id=package.id,
            price_cents=package.price_cents,
            payment_reference=payment_reference,
            description=f"Purchased {package.coins} coins (+{package.bonus} bonus)",
        )
        return balance, tx

    async def transfer_gift(
        self,
        db: AsyncSession,
        sender_id: str,
        recipient_id: str,
        amount: int,
        message: str | None,
        post_id: str | None,
    ) -> tuple[CoinBalance, CoinTransaction]:
        # Touch both rows in user_id order so opposite-direction gifts
        # between the same pair cannot deadlock.
        if sender_id < recipient_id:
            sender = await self._debit(db, sender_id, amount)
            recipient = await self._credit_gift(db, recipient_id, amount)
        else:
            recipient = await self._credit_gift(db, recipient_id, amount)
            sender = await self._debit(db, sender_id, amount)

        sent = await self._insert_transaction(
            db,
            user_id=sender_id,
            transaction_type=TransactionType.GIFT_SENT,
            amount=-amount,
            balance_after=sender.available,
            related_user_id=recipient_id,
            related_post_id=post_id,
            description=message or "Gift sent",
        )
        await self._insert_transaction(
            db,
            user_id=recipient_id,
            transaction_type=TransactionType.GIFT_RECEIVED,
            amount=amount,
            balance_after=recipient.available,
            related_user_id=sender_id,
            related_post_id=post_id,
            description=message or "Gift received",
        )
        return sender, sent

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        transaction_type: str | None,
    ) -> list[CoinTransaction]:
        result = await db.execute(
            _LIST_TX_SQL,
            {
                "user_id": user_id,
                "cursor_id": cursor_id,
                "transaction_type": transaction_type,
                "limit": limit,
            },
        )
        return [_row_to_transaction(row) for row in result.fetchall()]

    async def _debit(self, db: AsyncSession, user_id: str, amount: int) -> CoinBalance:
        result = await db.execute(_DEBIT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            current = await self.get_balance(db, user_id)
            if current is None:
                raise CoinBalanceNotFoundError(user_id)
            raise InsufficientCoinsError(amount, current.available)
        return _row_to_balance(row)

    async def _credit_gift(self, db: AsyncSession, user_id: str, amount: int) -> CoinBalance:
        result = await db.execute(_CREDIT_GIFT_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        if row is None:
            raise RecipientNotFoundError(user_id)
        return _row_to_balance(row)

    async def _insert_transaction(
        self,
        db: AsyncSession,
        *,
        user_id: str,
        transaction_type: TransactionType,
        amount: int,
        balance_after: int,
        related_user_id: str | None = None,
        related_post_id: str | None = None,
        package_id: int | None = None,
        price_cents: int | None = None,
        payment_reference: str | None = None,
        description: str | None = None,
    ) -> CoinTransaction:
        result = await db.execute(
            _INSERT_TX_SQL,
            {
                "user_id": user_id,
                "transaction_type": transaction_type.value,
                "amount": amount,
                "balance_after": balance_after,
                "related_user_id": related_user_id,
                "related_post_id": related_post_id,
                "package_id": package_id,
                "price_cents": price_cents,
                "payment_reference": payment_reference,
                "description": description,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows")
        return _row_to_transaction(row)
