"""Domain models for ce_earnings — pure dataclasses, no SQLAlchemy dependency.

Payout lifecycle:

    PENDING ──mark_paid──▶ PAID
       │
       └────cancel──────▶ CANCELLED

PAID and CANCELLED are terminal. A rejected transition raises
InvalidStateTransitionError and leaves the payout untouched.
"""

from dataclasses import dataclass
from datetime import datetime

from src.ce_common.enums import PayoutStatus
from src.ce_common.errors import InvalidStateTransitionError

_ALLOWED_TRANSITIONS: dict[PayoutStatus, frozenset[PayoutStatus]] = {
    PayoutStatus.PENDING: frozenset({PayoutStatus.PAID, PayoutStatus.CANCELLED}),
    PayoutStatus.PAID: frozenset(),
    PayoutStatus.CANCELLED: frozenset(),
}


@dataclass
class Payout:
    id: str
    creator_id: str
    coins: int
    gross_cents: int
    platform_fee_cents: int
    net_payout_cents: int
    status: PayoutStatus
    requested_at: datetime
    processed_at: datetime | None = None
    notes: str | None = None

    @property
    def is_terminal(self) -> bool:
        return not _ALLOWED_TRANSITIONS[self.status]

    @property
    def reserves_coins(self) -> bool:
        """Pending and paid payouts both count against available-for-payout."""
        return self.status != PayoutStatus.CANCELLED

    def cancel(self, at: datetime) -> None:
        self._transition(PayoutStatus.CANCELLED, at)

    def mark_paid(self, at: datetime) -> None:
        self._transition(PayoutStatus.PAID, at)

    def _transition(self, target: PayoutStatus, at: datetime) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateTransitionError(self.id, self.status.value, target.value)
        self.status = target
        self.processed_at = at
