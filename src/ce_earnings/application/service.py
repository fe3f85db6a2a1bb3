"""EarningsApplicationService — creator earnings, payout requests and settlement.

Transactions: every mutating operation runs its reads and writes in one
transaction, commits on success and rolls back on any error. Validation
errors therefore never leave a partially written payout behind.
"""

import logging
import math
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_coins.domain.models import CoinBalance
from src.ce_common.datetime_utils import utc_now
from src.ce_common.economy import EconomyConfig, get_economy
from src.ce_common.enums import PayoutStatus
from src.ce_common.errors import AppError, CoinBalanceNotFoundError, PayoutNotFoundError
from src.ce_common.id_generator import generate_id
from src.ce_common.money import cents_to_display
from src.ce_earnings.application.schemas import (
    EarningsDashboardResponse,
    Pagination,
    PayoutHistoryResponse,
    PayoutItem,
    PayoutQuoteResponse,
    SplitItem,
)
from src.ce_earnings.domain.eligibility import (
    compute_available_for_payout,
    validate_payout_request,
)
from src.ce_earnings.domain.models import Payout
from src.ce_earnings.domain.repository import PayoutRepositoryProtocol
from src.ce_earnings.domain.revenue_split import split_coins
from src.ce_earnings.infrastructure.persistence import PayoutRepository

logger = logging.getLogger(__name__)

_RECENT_PAYOUTS = 5


class EarningsApplicationService:
    def __init__(
        self,
        repo: PayoutRepositoryProtocol | None = None,
        economy: EconomyConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo: PayoutRepositoryProtocol = repo or PayoutRepository()
        self._economy = economy or get_economy()
        self._clock = clock

    async def get_available_for_payout(self, db: AsyncSession, creator_id: str) -> int:
        balance, reserved = await self._load_earnings(db, creator_id)
        return self._available(creator_id, balance.total_earned, reserved)

    async def get_dashboard(
        self, db: AsyncSession, creator_id: str
    ) -> EarningsDashboardResponse:
        balance, reserved = await self._load_earnings(db, creator_id)
        headroom = max(self._available(creator_id, balance.total_earned, reserved), 0)

        earned = split_coins(balance.total_earned, self._economy)
        estimate = split_coins(headroom, self._economy)
        recent = await self._repo.list_payouts(db, creator_id, 0, _RECENT_PAYOUTS)
        minimum = self._economy.minimum_payout_cents

        return EarningsDashboardResponse(
            total_earned_coins=balance.total_earned,
            total_earned_gross_cents=earned.gross_cents,
            total_earned_gross_display=cents_to_display(earned.gross_cents),
            total_earned_creator_cents=earned.net_payout_cents,
            total_earned_creator_display=cents_to_display(earned.net_payout_cents),
            reserved_coins=reserved,
            available_for_payout=SplitItem.from_breakdown(estimate),
            minimum_payout_cents=minimum,
            minimum_payout_display=cents_to_display(minimum),
            eligible_for_payout=headroom > 0 and estimate.net_payout_cents >= minimum,
            recent_payouts=[PayoutItem.from_payout(p) for p in recent],
        )

    async def quote(
        self, db: AsyncSession, creator_id: str, coins: int
    ) -> PayoutQuoteResponse:
        """What a payout of ``coins`` would record, without reserving anything."""
        breakdown = split_coins(coins, self._economy)
        available = max(await self.get_available_for_payout(db, creator_id), 0)
        meets_minimum = breakdown.net_payout_cents >= self._economy.minimum_payout_cents
        within_available = 0 < coins <= available
        return PayoutQuoteResponse(
            split=SplitItem.from_breakdown(breakdown),
            available_for_payout_coins=available,
            minimum_payout_cents=self._economy.minimum_payout_cents,
            meets_minimum=meets_minimum,
            within_available=within_available,
            eligible=meets_minimum and within_available,
        )

    async def request_payout(
        self, db: AsyncSession, creator_id: str, coins: int | None = None
    ) -> PayoutItem:
        try:
            # Row lock on the creator's balance: concurrent requests for the
            # same creator queue here until this transaction ends.
            balance = await self._repo.lock_creator_balance(db, creator_id)
            if balance is None:
                raise CoinBalanceNotFoundError(creator_id)
            reserved = await self._repo.sum_reserved_coins(db, creator_id)
            available = self._available(creator_id, balance.total_earned, reserved)

            try:
                breakdown = validate_payout_request(coins, available, self._economy)
            except AppError as exc:
                logger.info("Payout request rejected for %s: %s", creator_id, exc.message)
                raise

            payout = Payout(
                id=generate_id("po"),
                creator_id=creator_id,
                coins=breakdown.coins,
                gross_cents=breakdown.gross_cents,
                platform_fee_cents=breakdown.platform_fee_cents,
                net_payout_cents=breakdown.net_payout_cents,
                status=PayoutStatus.PENDING,
                requested_at=self._clock(),
            )
            saved = await self._repo.insert_payout(db, payout)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payout %s requested by %s: %d coins, net %s",
            saved.id, creator_id, saved.coins, cents_to_display(saved.net_payout_cents),
        )
        return PayoutItem.from_payout(saved)

    async def cancel_payout(
        self, db: AsyncSession, creator_id: str, payout_id: str
    ) -> PayoutItem:
        """Creator withdraws a PENDING request; its coins become available again."""
        try:
            payout = await self._repo.get_payout_for_update(db, payout_id)
            # Another creator's payout is reported as missing, not forbidden
            if payout is None or payout.creator_id != creator_id:
                raise PayoutNotFoundError(payout_id)
            payout.cancel(self._clock())
            saved = await self._repo.save_transition(db, payout)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payout %s cancelled by %s (%d coins released)",
            payout_id, creator_id, saved.coins,
        )
        return PayoutItem.from_payout(saved)

    async def mark_paid(
        self, db: AsyncSession, payout_id: str, notes: str | None = None
    ) -> PayoutItem:
        """Settlement callback from the payout processor once money has moved."""
        try:
            payout = await self._repo.get_payout_for_update(db, payout_id)
            if payout is None:
                raise PayoutNotFoundError(payout_id)
            payout.mark_paid(self._clock())
            if notes is not None:
                payout.notes = notes
            saved = await self._repo.save_transition(db, payout)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Payout %s marked paid: %s to %s",
            payout_id, cents_to_display(saved.net_payout_cents), saved.creator_id,
        )
        return PayoutItem.from_payout(saved)

    async def list_payouts(
        self, db: AsyncSession, creator_id: str, page: int, limit: int
    ) -> PayoutHistoryResponse:
        total = await self._repo.count_payouts(db, creator_id)
        rows = await self._repo.list_payouts(db, creator_id, (page - 1) * limit, limit)
        return PayoutHistoryResponse(
            items=[PayoutItem.from_payout(p) for p in rows],
            pagination=Pagination(
                page=page,
                limit=limit,
                total=total,
                pages=math.ceil(total / limit) if total else 0,
            ),
        )

    async def _load_earnings(
        self, db: AsyncSession, creator_id: str
    ) -> tuple[CoinBalance, int]:
        earnings = await self._repo.get_creator_earnings(db, creator_id)
        if earnings is None:
            raise CoinBalanceNotFoundError(creator_id)
        return earnings

    def _available(self, creator_id: str, total_earned: int, reserved: int) -> int:
        available = compute_available_for_payout(total_earned, reserved)
        if available < 0:
            logger.error(
                "Negative available-for-payout for %s: earned=%d reserved=%d",
                creator_id, total_earned, reserved,
            )
        return available
