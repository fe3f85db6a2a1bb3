"""Tests for the immutable EconomyConfig."""

import dataclasses
import os
import subprocess
import sys
from pathlib import Path

import pytest

from src.ce_common.economy import DEFAULT_ECONOMY, EconomyConfig, get_economy

_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class TestEconomyConfig:
    def test_defaults(self) -> None:
        assert DEFAULT_ECONOMY.coins_per_unit == 78
        assert DEFAULT_ECONOMY.platform_percent == 60
        assert DEFAULT_ECONOMY.creator_percent == 40
        assert DEFAULT_ECONOMY.minimum_payout_cents == 5000

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            DEFAULT_ECONOMY.coins_per_unit = 100  # type: ignore[misc]

    def test_split_must_sum_to_100(self) -> None:
        with pytest.raises(ValueError, match="100"):
            EconomyConfig(platform_percent=60, creator_percent=50)

    def test_rate_must_be_positive(self) -> None:
        with pytest.raises(ValueError, match="coins_per_unit"):
            EconomyConfig(coins_per_unit=0)

    def test_percent_range(self) -> None:
        with pytest.raises(ValueError, match="platform_percent"):
            EconomyConfig(platform_percent=-10, creator_percent=110)

    def test_negative_minimum_rejected(self) -> None:
        with pytest.raises(ValueError, match="minimum_payout_cents"):
            EconomyConfig(minimum_payout_cents=-1)


class TestGetEconomy:
    def test_built_from_settings_and_cached(self) -> None:
        first = get_economy()
        assert first is get_economy()
        assert first == DEFAULT_ECONOMY


class TestImportIsolation:
    def test_conversion_imports_without_app_secrets(self) -> None:
        """money/revenue_split load with no JWT_SECRET or PAYOUT_PROCESSOR_KEY set."""
        env = {
            k: v
            for k, v in os.environ.items()
            if k not in ("JWT_SECRET", "PAYOUT_PROCESSOR_KEY")
        }
        code = (
            "from src.ce_common.money import coins_to_cents\n"
            "from src.ce_earnings.domain.revenue_split import split_coins\n"
            "print(coins_to_cents(780), split_coins(10000).net_payout_cents)\n"
        )
        result = subprocess.run(
            [sys.executable, "-c", code],
            cwd=_PROJECT_ROOT,
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
        assert result.returncode == 0, result.stderr
        assert result.stdout.split() == ["1000", "5128"]
