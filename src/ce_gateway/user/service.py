"""User domain service: register, login, refresh.

Registration writes the user row and opens its coin balance in the same
transaction; the router wraps the call in ``async with db.begin()``.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ce_coins.domain.models import CoinBalance
from src.ce_coins.domain.repository import CoinRepositoryProtocol
from src.ce_coins.infrastructure.persistence import CoinRepository
from src.ce_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    UsernameExistsError,
)
from src.ce_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.ce_gateway.auth.password import hash_password, verify_password
from src.ce_gateway.user.db_models import UserModel

logger = logging.getLogger(__name__)


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    def __init__(
        self,
        coin_repo: CoinRepositoryProtocol | None = None,
        signup_bonus: int | None = None,
    ) -> None:
        self._coin_repo: CoinRepositoryProtocol = coin_repo or CoinRepository()
        self._signup_bonus = (
            settings.SIGNUP_BONUS_COINS if signup_bonus is None else signup_bonus
        )

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, CoinBalance]:
        """Create the user and its coin balance (available = signup bonus)."""
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        if result.scalar_one_or_none() is not None:
            raise UsernameExistsError()

        result = await db.execute(
            select(UserModel).where(UserModel.email == email)
        )
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            username=username,
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(user)
        await db.flush()  # assigns user.id

        balance = await self._coin_repo.open_balance(db, str(user.id), self._signup_bonus)
        logger.info("Registered user %s (signup bonus %d coins)", user.id, self._signup_bonus)
        return user, balance

    async def login(
        self,
        username: str,
        password: str,
        db: AsyncSession,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown username and wrong password raise the same error so usernames
        cannot be enumerated.
        """
        result = await db.execute(
            select(UserModel).where(UserModel.username == username)
        )
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        return (
            user,
            create_access_token(str(user.id)),
            create_refresh_token(str(user.id)),
        )

    async def refresh(self, refresh_token: str) -> str:
        """Validate a refresh token and issue a new access token."""
        payload = decode_token(refresh_token, expected_type="refresh")
        return create_access_token(str(payload["sub"]))
