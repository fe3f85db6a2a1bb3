"""Pydantic schemas for the ce_earnings API.

Every currency amount is sent twice: ``*_cents`` (int, authoritative) and
``*_display`` ("$51.28").
"""

from pydantic import BaseModel, Field

from src.ce_common.datetime_utils import to_iso
from src.ce_common.enums import PayoutStatus
from src.ce_common.money import cents_to_display
from src.ce_earnings.domain.models import Payout
from src.ce_earnings.domain.revenue_split import SplitBreakdown

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class PayoutRequest(BaseModel):
    # Range checks happen in the domain so they surface as InvalidAmountError
    coins: int | None = Field(
        None, description="Coins to cash out; omit to request everything available"
    )


class MarkPaidRequest(BaseModel):
    notes: str | None = Field(None, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class SplitItem(BaseModel):
    coins: int
    gross_cents: int
    gross_display: str
    platform_fee_cents: int
    platform_fee_display: str
    net_payout_cents: int
    net_payout_display: str

    @classmethod
    def from_breakdown(cls, b: SplitBreakdown) -> "SplitItem":
        return cls(
            coins=b.coins,
            gross_cents=b.gross_cents,
            gross_display=cents_to_display(b.gross_cents),
            platform_fee_cents=b.platform_fee_cents,
            platform_fee_display=cents_to_display(b.platform_fee_cents),
            net_payout_cents=b.net_payout_cents,
            net_payout_display=cents_to_display(b.net_payout_cents),
        )


class PayoutItem(BaseModel):
    id: str
    creator_id: str
    coins: int
    gross_cents: int
    platform_fee_cents: int
    net_payout_cents: int
    net_payout_display: str
    status: PayoutStatus
    requested_at: str | None
    processed_at: str | None
    notes: str | None

    @classmethod
    def from_payout(cls, p: Payout) -> "PayoutItem":
        return cls(
            id=p.id,
            creator_id=p.creator_id,
            coins=p.coins,
            gross_cents=p.gross_cents,
            platform_fee_cents=p.platform_fee_cents,
            net_payout_cents=p.net_payout_cents,
            net_payout_display=cents_to_display(p.net_payout_cents),
            status=p.status,
            requested_at=to_iso(p.requested_at),
            processed_at=to_iso(p.processed_at),
            notes=p.notes,
        )


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class PayoutHistoryResponse(BaseModel):
    items: list[PayoutItem]
    pagination: Pagination


class PayoutQuoteResponse(BaseModel):
    split: SplitItem
    available_for_payout_coins: int
    minimum_payout_cents: int
    meets_minimum: bool
    within_available: bool
    eligible: bool


class EarningsDashboardResponse(BaseModel):
    total_earned_coins: int
    total_earned_gross_cents: int
    total_earned_gross_display: str
    total_earned_creator_cents: int
    total_earned_creator_display: str
    reserved_coins: int
    available_for_payout: SplitItem
    minimum_payout_cents: int
    minimum_payout_display: str
    eligible_for_payout: bool
    recent_payouts: list[PayoutItem]
