"""ce_coins REST API — store, balance, gifting, transaction history."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.ce_coins.application.schemas import GiftRequest, PurchaseRequest
from src.ce_coins.application.service import CoinApplicationService
from src.ce_common.database import get_db_session
from src.ce_common.enums import TransactionType
from src.ce_common.response import ApiResponse, success_response
from src.ce_gateway.auth.dependencies import get_current_user
from src.ce_gateway.user.db_models import UserModel

router = APIRouter(prefix="/coins", tags=["coins"])

_service = CoinApplicationService()


@router.get("/packages")
async def list_packages(request: Request) -> ApiResponse:
    items = [p.model_dump() for p in _service.list_packages()]
    return success_response(items, request)


@router.get("/balance")
async def get_balance(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, str(current_user.id))
    return success_response(data.model_dump(), request)


@router.post("/purchase")
async def purchase(
    body: PurchaseRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    idempotency_key: Annotated[str | None, Header(max_length=128)] = None,
) -> ApiResponse:
    data = await _service.purchase(
        db,
        str(current_user.id),
        body.package_id,
        body.payment_method_id,
        idempotency_key,
    )
    return success_response(data.model_dump(), request)


@router.post("/gift")
async def gift(
    body: GiftRequest,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.gift(
        db,
        str(current_user.id),
        body.recipient_id,
        body.amount,
        body.message,
        body.post_id,
    )
    return success_response(data.model_dump(), request)


@router.get("/transactions")
async def list_transactions(
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    transaction_type: TransactionType | None = Query(None, description="Filter by type"),
) -> ApiResponse:
    data = await _service.list_transactions(
        db,
        str(current_user.id),
        cursor,
        limit,
        transaction_type.value if transaction_type else None,
    )
    return success_response(data.model_dump(mode="json"), request)
