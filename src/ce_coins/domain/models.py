"""Domain models for ce_coins — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class CoinBalance:
    user_id: str
    available: int        # coins, spendable now
    total_earned: int     # coins, lifetime gift receipts; never decremented
    version: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class CoinTransaction:
    id: int                          # BIGSERIAL
    user_id: str
    transaction_type: str            # TransactionType value
    amount: int                      # coins, positive=credit negative=debit
    balance_after: int               # coins, available snapshot after op
    related_user_id: str | None = None
    related_post_id: str | None = None
    package_id: int | None = None
    price_cents: int | None = None
    payment_reference: str | None = None
    description: str | None = None
    created_at: datetime | None = None
