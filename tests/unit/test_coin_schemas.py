"""Tests for ce_coins schemas and cursor helpers."""

import pytest
from pydantic import ValidationError

from src.ce_coins.application.schemas import (
    CoinPackageItem,
    GiftRequest,
    PurchaseRequest,
    cursor_decode,
    cursor_encode,
)
from src.ce_coins.domain.packages import COIN_PACKAGES


class TestCursor:
    def test_encode_decode(self) -> None:
        assert cursor_decode(cursor_encode(12345)) == 12345

    def test_none(self) -> None:
        assert cursor_decode(None) is None

    @pytest.mark.parametrize("bad", ["not-base64!!", "e30=", "bm90IGpzb24="])
    def test_garbage_returns_none(self, bad: str) -> None:
        assert cursor_decode(bad) is None


class TestRequests:
    def test_gift_amount_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            GiftRequest(recipient_id="creator-1", amount=0)

    def test_gift_message_length(self) -> None:
        with pytest.raises(ValidationError):
            GiftRequest(recipient_id="creator-1", amount=1, message="x" * 501)

    def test_purchase_requires_payment_method(self) -> None:
        with pytest.raises(ValidationError):
            PurchaseRequest(package_id=1, payment_method_id="")


class TestCoinPackageItem:
    def test_from_package(self) -> None:
        item = CoinPackageItem.from_package(COIN_PACKAGES[-1])
        assert item.total_coins == 6500
        assert item.price_cents == 14999
        assert item.price_display == "$149.99"
        assert item.popular is False
