"""Pydantic schemas and cursor utilities for the ce_coins API."""

import base64
import binascii
import json

from pydantic import BaseModel, Field

from src.ce_coins.domain.models import CoinTransaction
from src.ce_coins.domain.packages import CoinPackage
from src.ce_common.datetime_utils import to_iso
from src.ce_common.enums import TransactionType
from src.ce_common.money import cents_to_display

# ---------------------------------------------------------------------------
# Cursor-based pagination utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.urlsafe_b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor back to the last seen id. Returns None when unreadable."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.urlsafe_b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except (binascii.Error, UnicodeDecodeError, ValueError, KeyError, TypeError):
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PurchaseRequest(BaseModel):
    package_id: int = Field(..., gt=0)
    payment_method_id: str = Field(..., min_length=1, max_length=128)


class GiftRequest(BaseModel):
    recipient_id: str = Field(..., min_length=1, max_length=64)
    amount: int = Field(..., ge=1, description="Coins to gift")
    message: str | None = Field(None, max_length=500)
    post_id: str | None = Field(None, max_length=64)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CoinPackageItem(BaseModel):
    id: int
    coins: int
    bonus: int
    total_coins: int
    price_cents: int
    price_display: str
    popular: bool

    @classmethod
    def from_package(cls, package: CoinPackage) -> "CoinPackageItem":
        return cls(
            id=package.id,
            coins=package.coins,
            bonus=package.bonus,
            total_coins=package.total_coins,
            price_cents=package.price_cents,
            price_display=cents_to_display(package.price_cents),
            popular=package.popular,
        )


class CoinBalanceResponse(BaseModel):
    user_id: str
    available_coins: int
    total_earned_coins: int
    available_value_cents: int
    available_value_display: str


class PurchaseResponse(BaseModel):
    package_id: int
    coins_credited: int
    price_cents: int
    price_display: str
    payment_reference: str
    available_coins: int
    transaction_id: int


class GiftResponse(BaseModel):
    recipient_id: str
    amount: int
    available_coins: int
    transaction_id: int


class CoinTransactionItem(BaseModel):
    id: int
    transaction_type: TransactionType
    amount: int
    balance_after: int
    value_cents: int
    related_user_id: str | None
    related_post_id: str | None
    package_id: int | None
    price_cents: int | None
    payment_reference: str | None
    description: str | None
    created_at: str | None

    @classmethod
    def from_transaction(cls, tx: CoinTransaction, value_cents: int) -> "CoinTransactionItem":
        return cls(
            id=tx.id,
            transaction_type=TransactionType(tx.transaction_type),
            amount=tx.amount,
            balance_after=tx.balance_after,
            value_cents=value_cents,
            related_user_id=tx.related_user_id,
            related_post_id=tx.related_post_id,
            package_id=tx.package_id,
            price_cents=tx.price_cents,
            payment_reference=tx.payment_reference,
            description=tx.description,
            created_at=to_iso(tx.created_at),
        )


class TransactionListResponse(BaseModel):
    items: list[CoinTransactionItem]
    next_cursor: str | None
    has_more: bool
