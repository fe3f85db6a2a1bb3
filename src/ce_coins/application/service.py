"""CoinApplicationService — balance, store, gifting and transaction history.

Mutating operations commit on success and roll back on any error, so a gift
that fails half-way (e.g. unknown recipient after the sender was debited)
leaves no trace.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_coins.application.schemas import (
    CoinBalanceResponse,
    CoinPackageItem,
    CoinTransactionItem,
    GiftResponse,
    PurchaseResponse,
    TransactionListResponse,
    cursor_decode,
    cursor_encode,
)
from src.ce_coins.domain.packages import COIN_PACKAGES, CoinPackage, get_package
from src.ce_coins.domain.repository import CoinRepositoryProtocol
from src.ce_coins.infrastructure.idempotency import (
    IdempotencyStoreProtocol,
    RedisIdempotencyStore,
)
from src.ce_coins.infrastructure.payments import (
    PaymentGatewayProtocol,
    SimulatedPaymentGateway,
)
from src.ce_coins.infrastructure.persistence import CoinRepository
from src.ce_common.economy import EconomyConfig, get_economy
from src.ce_common.errors import CoinBalanceNotFoundError, InvalidAmountError, SelfGiftError
from src.ce_common.money import cents_to_display, coins_to_cents, require_non_negative_int

logger = logging.getLogger(__name__)


class CoinApplicationService:
    def __init__(
        self,
        repo: CoinRepositoryProtocol | None = None,
        payments: PaymentGatewayProtocol | None = None,
        economy: EconomyConfig | None = None,
        idempotency: IdempotencyStoreProtocol | None = None,
    ) -> None:
        self._repo: CoinRepositoryProtocol = repo or CoinRepository()
        self._payments: PaymentGatewayProtocol = payments or SimulatedPaymentGateway()
        self._economy = economy or get_economy()
        self._idempotency: IdempotencyStoreProtocol = idempotency or RedisIdempotencyStore()

    def list_packages(self) -> list[CoinPackageItem]:
        return [CoinPackageItem.from_package(p) for p in COIN_PACKAGES]

    async def get_balance(self, db: AsyncSession, user_id: str) -> CoinBalanceResponse:
        balance = await self._repo.get_balance(db, user_id)
        if balance is None:
            raise CoinBalanceNotFoundError(user_id)
        value = coins_to_cents(balance.available, self._economy)
        return CoinBalanceResponse(
            user_id=user_id,
            available_coins=balance.available,
            total_earned_coins=balance.total_earned,
            available_value_cents=value,
            available_value_display=cents_to_display(value),
        )

    async def purchase(
        self,
        db: AsyncSession,
        user_id: str,
        package_id: int,
        payment_method_id: str,
        idempotency_key: str | None = None,
    ) -> PurchaseResponse:
        """Charge for a package and credit its coins.

        With ``idempotency_key`` a retried request returns the first response
        and is never charged twice.
        """
        package = get_package(package_id)
        if idempotency_key is None:
            return await self._charge_and_credit(db, user_id, package, payment_method_id)

        replay = await self._idempotency.begin(user_id, idempotency_key)
        if replay is not None:
            return PurchaseResponse.model_validate_json(replay)
        try:
            response = await self._charge_and_credit(db, user_id, package, payment_method_id)
        except Exception:
            await self._idempotency.release(user_id, idempotency_key)
            raise
        await self._idempotency.complete(user_id, idempotency_key, response.model_dump_json())
        return response

    async def _charge_and_credit(
        self,
        db: AsyncSession,
        user_id: str,
        package: CoinPackage,
        payment_method_id: str,
    ) -> PurchaseResponse:
        # Never charge a card for a user whose coins could not be credited
        if await self._repo.get_balance(db, user_id) is None:
            raise CoinBalanceNotFoundError(user_id)
        reference = await self._payments.charge(user_id, package.price_cents, payment_method_id)
        try:
            balance, tx = await self._repo.credit_purchase(db, user_id, package, reference)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "User %s purchased package %d (+%d coins, ref %s)",
            user_id, package.id, package.total_coins, reference,
        )
        return PurchaseResponse(
            package_id=package.id,
            coins_credited=package.total_coins,
            price_cents=package.price_cents,
            price_display=cents_to_display(package.price_cents),
            payment_reference=reference,
            available_coins=balance.available,
            transaction_id=tx.id,
        )

    async def gift(
        self,
        db: AsyncSession,
        sender_id: str,
        recipient_id: str,
        amount: int,
        message: str | None = None,
        post_id: str | None = None,
    ) -> GiftResponse:
        if require_non_negative_int(amount, "gift amount") == 0:
            raise InvalidAmountError("gift amount must be at least 1 coin")
        if sender_id == recipient_id:
            raise SelfGiftError()
        try:
            balance, tx = await self._repo.transfer_gift(
                db, sender_id, recipient_id, amount, message, post_id
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("User %s gifted %d coins to %s", sender_id, amount, recipient_id)
        return GiftResponse(
            recipient_id=recipient_id,
            amount=amount,
            available_coins=balance.available,
            transaction_id=tx.id,
        )

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
        transaction_type: str | None,
    ) -> TransactionListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        rows = await self._repo.list_transactions(
            db, user_id, cursor_id, limit + 1, transaction_type
        )
        has_more = len(rows) > limit
        page = rows[:limit]
        items = [
            CoinTransactionItem.from_transaction(
                tx, coins_to_cents(abs(tx.amount), self._economy)
            )
            for tx in page
        ]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return TransactionListResponse(items=items, next_cursor=next_cursor, has_more=has_more)
