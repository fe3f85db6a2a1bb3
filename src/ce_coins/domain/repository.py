"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_coins.domain.models import CoinBalance, CoinTransaction
from src.ce_coins.domain.packages import CoinPackage


class CoinRepositoryProtocol(Protocol):
    async def get_balance(
        self, db: AsyncSession, user_id: str
    ) -> CoinBalance | None: ...

    async def open_balance(
        self, db: AsyncSession, user_id: str, signup_bonus: int
    ) -> CoinBalance: ...

    async def credit_purchase(
        self,
        db: AsyncSession,
        user_id: str,
        package: CoinPackage,
        payment_reference: str,
    ) -> tuple[CoinBalance, CoinTransaction]: ...

    async def transfer_gift(
        self,
        db: AsyncSession,
        sender_id: str,
        recipient_id: str,
        amount: int,
        message: str | None,
        post_id: str | None,
    ) -> tuple[CoinBalance, CoinTransaction]: ...

    async def list_transactions(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
        transaction_type: str | None,
    ) -> list[CoinTransaction]: ...
