"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class PayoutStatus(str, Enum):
    """PENDING is the only non-terminal state."""
    PENDING = "PENDING"
    PAID = "PAID"
    CANCELLED = "CANCELLED"


class TransactionType(str, Enum):
    PURCHASE = "PURCHASE"
    GIFT_SENT = "GIFT_SENT"
    GIFT_RECEIVED = "GIFT_RECEIVED"
    SIGNUP_BONUS = "SIGNUP_BONUS"
