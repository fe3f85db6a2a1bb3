"""Repository Protocol for payouts — lets unit tests inject fakes."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_coins.domain.models import CoinBalance
from src.ce_earnings.domain.models import Payout


class PayoutRepositoryProtocol(Protocol):
    async def get_creator_earnings(
        self, db: AsyncSession, creator_id: str
    ) -> tuple[CoinBalance, int] | None:
        """The balance row and its reserved payout coins, read in one statement
        so both come from the same snapshot."""
        ...

    async def lock_creator_balance(
        self, db: AsyncSession, creator_id: str
    ) -> CoinBalance | None:
        """Reads the balance row and holds the creator's row lock until
        the transaction ends. Serialises payout requests per creator."""
        ...

    async def sum_reserved_coins(self, db: AsyncSession, creator_id: str) -> int: ...

    async def insert_payout(self, db: AsyncSession, payout: Payout) -> Payout: ...

    async def get_payout_for_update(
        self, db: AsyncSession, payout_id: str
    ) -> Payout | None: ...

    async def save_transition(self, db: AsyncSession, payout: Payout) -> Payout: ...

    async def list_payouts(
        self, db: AsyncSession, creator_id: str, offset: int, limit: int
    ) -> list[Payout]: ...

    async def count_payouts(self, db: AsyncSession, creator_id: str) -> int: ...
