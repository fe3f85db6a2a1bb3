"""Unit tests for user service (mocked DB)."""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from src.ce_coins.domain.models import CoinBalance
from src.ce_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
    UsernameExistsError,
)
from src.ce_gateway.auth.jwt_handler import create_access_token, create_refresh_token
from src.ce_gateway.user.db_models import UserModel
from src.ce_gateway.user.service import UserService


def _make_user(is_active: bool = True) -> UserModel:
    user = UserModel()
    user.id = uuid.uuid4()
    user.username = "alice"
    user.email = "alice@example.com"
    user.password_hash = "$2b$12$fakehash"
    user.is_active = is_active
    return user


def _result(value: object) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


@pytest.fixture
def mock_db() -> MagicMock:
    db = MagicMock()
    db.execute = AsyncMock()
    db.flush = AsyncMock()
    return db


@pytest.fixture
def coin_repo() -> AsyncMock:
    repo = AsyncMock()
    repo.open_balance.return_value = CoinBalance(user_id="u", available=100, total_earned=0)
    return repo


@pytest.fixture
def service(coin_repo: AsyncMock) -> UserService:
    return UserService(coin_repo=coin_repo, signup_bonus=100)


class TestRegister:
    async def test_duplicate_username(self, service: UserService, mock_db: MagicMock) -> None:
        mock_db.execute.return_value = _result(_make_user())
        with pytest.raises(UsernameExistsError):
            await service.register("alice", "new@example.com", "Pass1word", mock_db)

    async def test_duplicate_email(self, service: UserService, mock_db: MagicMock) -> None:
        mock_db.execute.side_effect = [_result(None), _result(_make_user())]
        with pytest.raises(EmailExistsError):
            await service.register("bob", "alice@example.com", "Pass1word", mock_db)

    async def test_opens_coin_balance_with_bonus(
        self, service: UserService, mock_db: MagicMock, coin_repo: AsyncMock
    ) -> None:
        mock_db.execute.side_effect = [_result(None), _result(None)]

        user, balance = await service.register("bob", "bob@example.com", "Pass1word", mock_db)

        mock_db.add.assert_called_once_with(user)
        mock_db.flush.assert_awaited_once()
        coin_repo.open_balance.assert_awaited_once()
        assert coin_repo.open_balance.await_args.args[2] == 100
        assert balance.available == 100
        assert user.password_hash != "Pass1word"


class TestLogin:
    async def test_unknown_user(self, service: UserService, mock_db: MagicMock) -> None:
        mock_db.execute.return_value = _result(None)
        with pytest.raises(InvalidCredentialsError):
            await service.login("nobody", "Pass1word", mock_db)

    async def test_wrong_password(self, service: UserService, mock_db: MagicMock) -> None:
        mock_db.execute.return_value = _result(_make_user())
        with (
            patch("src.ce_gateway.user.service.verify_password", return_value=False),
            pytest.raises(InvalidCredentialsError),
        ):
            await service.login("alice", "WrongPass1", mock_db)

    async def test_disabled_account(self, service: UserService, mock_db: MagicMock) -> None:
        mock_db.execute.return_value = _result(_make_user(is_active=False))
        with (
            patch("src.ce_gateway.user.service.verify_password", return_value=True),
            pytest.raises(AccountDisabledError),
        ):
            await service.login("alice", "Pass1word", mock_db)

    async def test_success_returns_token_pair(
        self, service: UserService, mock_db: MagicMock
    ) -> None:
        mock_db.execute.return_value = _result(_make_user())
        with patch("src.ce_gateway.user.service.verify_password", return_value=True):
            user, access, refresh = await service.login("alice", "Pass1word", mock_db)

        assert user.username == "alice"
        assert access != refresh


class TestRefresh:
    async def test_invalid_token(self, service: UserService) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh("not.a.real.token")

    async def test_access_token_rejected(self, service: UserService) -> None:
        with pytest.raises(InvalidRefreshTokenError):
            await service.refresh(create_access_token("user-123"))

    async def test_issues_access_token(self, service: UserService) -> None:
        access = await service.refresh(create_refresh_token("user-123"))
        assert access
