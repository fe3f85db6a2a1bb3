"""Platform/creator revenue split of a coin amount.

Each share is computed independently from the coin integer:

    share_cents = round_half_up(coins * percent / coins_per_unit)

which is the gross currency value times percent/100, rounded once. Neither
share is derived as the complement of the other, so
``platform_fee_cents + net_payout_cents`` may differ from ``gross_cents`` by
one cent. That gap is expected and must not be "corrected".
"""

from dataclasses import dataclass

from src.ce_common.economy import DEFAULT_ECONOMY, EconomyConfig
from src.ce_common.money import coins_to_cents, require_non_negative_int, round_half_up_div


@dataclass(frozen=True)
class SplitBreakdown:
    coins: int
    gross_cents: int
    platform_fee_cents: int
    net_payout_cents: int

    @property
    def reconciliation_gap_cents(self) -> int:
        """(fee + net) - gross; always in {-1, 0, 1}."""
        return self.platform_fee_cents + self.net_payout_cents - self.gross_cents


def _share_cents(coins: int, percent: int, economy: EconomyConfig) -> int:
    coins = require_non_negative_int(coins, "coins")
    return round_half_up_div(coins * percent, economy.coins_per_unit)


def platform_share_cents(coins: int, economy: EconomyConfig = DEFAULT_ECONOMY) -> int:
    """780 coins -> 600 cents at 78 coins/unit and a 60% platform cut."""
    return _share_cents(coins, economy.platform_percent, economy)


def creator_share_cents(coins: int, economy: EconomyConfig = DEFAULT_ECONOMY) -> int:
    """780 coins -> 400 cents at 78 coins/unit and a 40% creator share."""
    return _share_cents(coins, economy.creator_percent, economy)


def split_coins(coins: int, economy: EconomyConfig = DEFAULT_ECONOMY) -> SplitBreakdown:
    """All three amounts for ``coins``.

    The earnings dashboard estimate and the amounts recorded on a payout both
    come from here, so what a creator is shown is what gets recorded.
    """
    return SplitBreakdown(
        coins=coins,
        gross_cents=coins_to_cents(coins, economy),
        platform_fee_cents=platform_share_cents(coins, economy),
        net_payout_cents=creator_share_cents(coins, economy),
    )
