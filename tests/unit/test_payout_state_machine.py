"""Tests for the Payout lifecycle: PENDING -> PAID | CANCELLED."""

from datetime import UTC, datetime, timedelta

import pytest

from src.ce_common.enums import PayoutStatus
from src.ce_common.errors import InvalidStateTransitionError
from src.ce_earnings.domain.models import Payout

_REQUESTED = datetime(2026, 10, 1, 12, 0, tzinfo=UTC)
_LATER = _REQUESTED + timedelta(days=3)


def _make_payout(status: PayoutStatus = PayoutStatus.PENDING) -> Payout:
    return Payout(
        id="po_1",
        creator_id="creator-1",
        coins=10000,
        gross_cents=12821,
        platform_fee_cents=7692,
        net_payout_cents=5128,
        status=status,
        requested_at=_REQUESTED,
    )


class TestTransitions:
    def test_new_payout_is_pending_and_unprocessed(self) -> None:
        p = _make_payout()
        assert p.status == PayoutStatus.PENDING
        assert p.processed_at is None
        assert p.is_terminal is False

    def test_mark_paid(self) -> None:
        p = _make_payout()
        p.mark_paid(_LATER)
        assert p.status == PayoutStatus.PAID
        assert p.processed_at == _LATER
        assert p.is_terminal is True

    def test_cancel(self) -> None:
        p = _make_payout()
        p.cancel(_LATER)
        assert p.status == PayoutStatus.CANCELLED
        assert p.processed_at == _LATER
        assert p.is_terminal is True

    @pytest.mark.parametrize("terminal", [PayoutStatus.PAID, PayoutStatus.CANCELLED])
    def test_terminal_payout_rejects_cancel(self, terminal: PayoutStatus) -> None:
        p = _make_payout(terminal)
        p.processed_at = _REQUESTED
        with pytest.raises(InvalidStateTransitionError):
            p.cancel(_LATER)
        assert p.status == terminal
        assert p.processed_at == _REQUESTED

    @pytest.mark.parametrize("terminal", [PayoutStatus.PAID, PayoutStatus.CANCELLED])
    def test_terminal_payout_rejects_mark_paid(self, terminal: PayoutStatus) -> None:
        p = _make_payout(terminal)
        p.processed_at = _REQUESTED
        with pytest.raises(InvalidStateTransitionError):
            p.mark_paid(_LATER)
        assert p.status == terminal
        assert p.processed_at == _REQUESTED

    def test_error_names_both_states(self) -> None:
        p = _make_payout(PayoutStatus.PAID)
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            p.cancel(_LATER)
        assert "PAID" in exc_info.value.message
        assert "CANCELLED" in exc_info.value.message
        assert exc_info.value.http_status == 409


class TestReservation:
    def test_pending_and_paid_reserve_coins(self) -> None:
        assert _make_payout(PayoutStatus.PENDING).reserves_coins is True
        assert _make_payout(PayoutStatus.PAID).reserves_coins is True

    def test_cancelled_releases_coins(self) -> None:
        assert _make_payout(PayoutStatus.CANCELLED).reserves_coins is False
