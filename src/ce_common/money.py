"""Integer conversion between coins and currency minor units (cents).

All coin counts and currency amounts are int. No float, no Decimal.
A currency amount is always derived from a coin integer in one step and
rounded once; derived amounts are never fed back into further arithmetic.

Rounding policy: round-half-up. Inputs are validated non-negative, so this
is the same as round-half-away-from-zero.
"""

from src.ce_common.economy import DEFAULT_ECONOMY, EconomyConfig
from src.ce_common.errors import InvalidAmountError


def require_non_negative_int(value: object, label: str = "amount") -> int:
    """Reject bools, non-integers and negatives with InvalidAmountError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidAmountError(f"{label} must be an integer, got {value!r}")
    if value < 0:
        raise InvalidAmountError(f"{label} must be >= 0, got {value}")
    return value


def round_half_up_div(numerator: int, denominator: int) -> int:
    """Integer division rounded half-up, for numerator >= 0 and denominator > 0.

    round(n / d) = floor((2n + d) / 2d)
    """
    return (2 * numerator + denominator) // (2 * denominator)


def coins_to_cents(coins: int, economy: EconomyConfig = DEFAULT_ECONOMY) -> int:
    """Currency value of a coin amount: 780 coins -> 1000 cents ($10.00)."""
    coins = require_non_negative_int(coins, "coins")
    return round_half_up_div(coins * 100, economy.coins_per_unit)


def cents_to_coins(cents: int, economy: EconomyConfig = DEFAULT_ECONOMY) -> int:
    """Coin amount worth a currency value: 1000 cents -> 780 coins.

    cents_to_coins(coins_to_cents(c)) may differ from c by at most one coin.
    """
    cents = require_non_negative_int(cents, "cents")
    return round_half_up_div(cents * economy.coins_per_unit, 100)


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"
