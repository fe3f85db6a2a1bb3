"""Coin package catalog shown on the store page.

Prices are cents. A package credits ``coins + bonus`` on purchase.
"""

from dataclasses import dataclass

from src.ce_common.errors import CoinPackageNotFoundError


@dataclass(frozen=True)
class CoinPackage:
    id: int
    coins: int
    bonus: int
    price_cents: int
    popular: bool = False

    @property
    def total_coins(self) -> int:
        return self.coins + self.bonus


COIN_PACKAGES: tuple[CoinPackage, ...] = (
    CoinPackage(id=1, coins=100, bonus=0, price_cents=499),
    CoinPackage(id=2, coins=250, bonus=25, price_cents=999),
    CoinPackage(id=3, coins=500, bonus=75, price_cents=1999, popular=True),
    CoinPackage(id=4, coins=1000, bonus=200, price_cents=3499),
    CoinPackage(id=5, coins=2500, bonus=600, price_cents=7999),
    CoinPackage(id=6, coins=5000, bonus=1500, price_cents=14999),
)

_BY_ID = {p.id: p for p in COIN_PACKAGES}


def get_package(package_id: int) -> CoinPackage:
    package = _BY_ID.get(package_id)
    if package is None:
        raise CoinPackageNotFoundError(package_id)
    return package
