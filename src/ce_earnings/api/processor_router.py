"""Settlement callback for the external payout processor.

Not a creator endpoint: authenticated with ``X-Processor-Key`` instead of a JWT.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_common.database import get_db_session
from src.ce_common.response import ApiResponse, success_response
from src.ce_earnings.application.schemas import MarkPaidRequest
from src.ce_earnings.application.service import EarningsApplicationService
from src.ce_gateway.auth.dependencies import require_payout_processor

router = APIRouter(
    prefix="/processor",
    tags=["processor"],
    dependencies=[Depends(require_payout_processor)],
)

_service = EarningsApplicationService()


@router.post("/payouts/{payout_id}/mark-paid")
async def mark_paid(
    payout_id: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    body: MarkPaidRequest | None = None,
) -> ApiResponse:
    notes = body.notes if body is not None else None
    data = await _service.mark_paid(db, payout_id, notes)
    resp = success_response(data.model_dump(mode="json"), request)
    resp.message = "Payout marked paid"
    return resp
