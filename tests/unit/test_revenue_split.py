"""Tests for the platform/creator revenue split."""

import pytest

from src.ce_common.economy import EconomyConfig
from src.ce_common.errors import InvalidAmountError
from src.ce_common.money import coins_to_cents
from src.ce_earnings.domain.revenue_split import (
    creator_share_cents,
    platform_share_cents,
    split_coins,
)


class TestShares:
    def test_780_coins(self) -> None:
        assert platform_share_cents(780) == 600
        assert creator_share_cents(780) == 400

    def test_4000_coins_creator_share(self) -> None:
        # 4000 / 78 * 0.4 = 20.5128 -> $20.51
        assert creator_share_cents(4000) == 2051

    def test_10000_coins(self) -> None:
        assert platform_share_cents(10000) == 7692
        assert creator_share_cents(10000) == 5128

    def test_zero(self) -> None:
        assert platform_share_cents(0) == 0
        assert creator_share_cents(0) == 0

    def test_negative_raises(self) -> None:
        with pytest.raises(InvalidAmountError):
            creator_share_cents(-78)
        with pytest.raises(InvalidAmountError):
            platform_share_cents(-78)

    def test_non_integer_raises(self) -> None:
        with pytest.raises(InvalidAmountError):
            creator_share_cents(78.0)  # type: ignore[arg-type]

    def test_uses_injected_split(self) -> None:
        economy = EconomyConfig(platform_percent=30, creator_percent=70)
        assert platform_share_cents(780, economy) == 300
        assert creator_share_cents(780, economy) == 700


class TestSplitCoins:
    def test_scenario_breakdown(self) -> None:
        b = split_coins(10000)
        assert b.coins == 10000
        assert b.gross_cents == 12821
        assert b.platform_fee_cents == 7692
        assert b.net_payout_cents == 5128

    def test_net_is_not_gross_minus_fee(self) -> None:
        # Shares are rounded independently; here they undershoot gross by a cent
        b = split_coins(10000)
        assert b.gross_cents - b.platform_fee_cents == 5129
        assert b.net_payout_cents == 5128
        assert b.reconciliation_gap_cents == -1

    def test_gross_matches_conversion_unit(self) -> None:
        for coins in (1, 77, 78, 390, 12345):
            assert split_coins(coins).gross_cents == coins_to_cents(coins)

    def test_reconciliation_gap_at_most_one_cent(self) -> None:
        for coins in range(0, 30000, 11):
            assert abs(split_coins(coins).reconciliation_gap_cents) <= 1

    def test_reconciliation_gap_with_odd_rate(self) -> None:
        economy = EconomyConfig(coins_per_unit=7, platform_percent=33, creator_percent=67)
        for coins in range(0, 3000):
            assert abs(split_coins(coins, economy).reconciliation_gap_cents) <= 1
