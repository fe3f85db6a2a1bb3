"""Coin economy constants — one immutable object injected everywhere.

Exchange rate, revenue split and payout threshold are read from settings
once and passed to every conversion explicitly.
"""

from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class EconomyConfig:
    coins_per_unit: int = 78           # 78 coins == 1 currency unit
    platform_percent: int = 60
    creator_percent: int = 40
    minimum_payout_cents: int = 5000   # $50.00 creator share

    def __post_init__(self) -> None:
        if self.coins_per_unit <= 0:
            raise ValueError(f"coins_per_unit must be positive, got {self.coins_per_unit}")
        for name in ("platform_percent", "creator_percent"):
            value = getattr(self, name)
            if not (0 <= value <= 100):
                raise ValueError(f"{name} must be between 0 and 100, got {value}")
        if self.platform_percent + self.creator_percent != 100:
            raise ValueError(
                "platform_percent + creator_percent must equal 100, got "
                f"{self.platform_percent} + {self.creator_percent}"
            )
        if self.minimum_payout_cents < 0:
            raise ValueError(
                f"minimum_payout_cents must be >= 0, got {self.minimum_payout_cents}"
            )


DEFAULT_ECONOMY = EconomyConfig()


@lru_cache(maxsize=1)
def get_economy() -> EconomyConfig:
    """Build the process-wide EconomyConfig from settings (cached)."""
    # Lazy: money and revenue_split import this module without loading Settings
    from config.settings import settings

    return EconomyConfig(
        coins_per_unit=settings.COINS_PER_UNIT,
        platform_percent=settings.PLATFORM_PERCENT,
        creator_percent=settings.CREATOR_PERCENT,
        minimum_payout_cents=settings.MINIMUM_PAYOUT_CENTS,
    )
