"""Payout eligibility rules.

available_for_payout = total_earned - Σ coins of non-cancelled payouts

Pending payouts count as reserved, not only paid ones, so two requests can
never both be validated against the same earned coins. The caller must run
the sum and the insert under a per-creator lock (see PayoutRepository).
"""

from collections.abc import Iterable

from src.ce_common.economy import EconomyConfig
from src.ce_common.errors import (
    BelowMinimumPayoutError,
    InsufficientBalanceError,
    InvalidAmountError,
)
from src.ce_earnings.domain.models import Payout
from src.ce_earnings.domain.revenue_split import SplitBreakdown, split_coins


def reserved_coins(payouts: Iterable[Payout]) -> int:
    return sum(p.coins for p in payouts if p.reserves_coins)


def compute_available_for_payout(total_earned: int, reserved: int) -> int:
    """May come out negative only if the ledger is already inconsistent;
    callers treat that as zero headroom, never as credit."""
    return total_earned - reserved


def validate_payout_request(
    requested_coins: int | None,
    available_coins: int,
    economy: EconomyConfig,
) -> SplitBreakdown:
    """Check a payout request and return the amounts to record.

    Omitted ``requested_coins`` means "everything available".

    Raises, in this order:
        InsufficientBalanceError: nothing available and no amount given.
        InvalidAmountError: amount is not a positive integer.
        BelowMinimumPayoutError: creator share under the minimum payout.
        InsufficientBalanceError: amount exceeds available-for-payout.
    """
    if requested_coins is None:
        if available_coins <= 0:
            raise InsufficientBalanceError(0, max(available_coins, 0))
        requested_coins = available_coins

    if isinstance(requested_coins, bool) or not isinstance(requested_coins, int):
        raise InvalidAmountError(f"coins must be an integer, got {requested_coins!r}")
    if requested_coins <= 0:
        raise InvalidAmountError(f"coins must be > 0, got {requested_coins}")

    breakdown = split_coins(requested_coins, economy)
    if breakdown.net_payout_cents < economy.minimum_payout_cents:
        raise BelowMinimumPayoutError(
            breakdown.net_payout_cents, economy.minimum_payout_cents
        )

    if requested_coins > available_coins:
        raise InsufficientBalanceError(requested_coins, max(available_coins, 0))

    return breakdown
