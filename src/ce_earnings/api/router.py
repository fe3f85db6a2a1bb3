"""ce_earnings REST API — creator dashboard, quotes, payout requests and history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_common.database import get_db_session
from src.ce_common.response import ApiResponse, success_response
from src.ce_earnings.application.schemas import PayoutRequest
from src.ce_earnings.application.service import EarningsApplicationService
from src.ce_gateway.auth.dependencies import get_current_user
from src.ce_gateway.user.db_models import UserModel

router = APIRouter(prefix="/earnings", tags=["earnings"])

_service = EarningsApplicationService()


@router.get("")
async def get_earnings(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_dashboard(db, str(current_user.id))
    return success_response(data.model_dump(mode="json"), request)


@router.get("/quote")
async def quote_payout(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    coins: int = Query(..., description="Coins to price"),
) -> ApiResponse:
    data = await _service.quote(db, str(current_user.id), coins)
    return success_response(data.model_dump(), request)


@router.post("/payout")
async def request_payout(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    body: PayoutRequest | None = None,
) -> ApiResponse:
    coins = body.coins if body is not None else None
    data = await _service.request_payout(db, str(current_user.id), coins)
    resp = success_response(data.model_dump(mode="json"), request)
    resp.message = "Payout requested"
    return resp


@router.get("/payouts")
async def list_payouts(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
) -> ApiResponse:
    data = await _service.list_payouts(db, str(current_user.id), page, limit)
    return success_response(data.model_dump(mode="json"), request)


@router.post("/payouts/{payout_id}/cancel")
async def cancel_payout(
    payout_id: str,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.cancel_payout(db, str(current_user.id), payout_id)
    resp = success_response(data.model_dump(mode="json"), request)
    resp.message = "Payout cancelled"
    return resp
