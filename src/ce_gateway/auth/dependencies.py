"""FastAPI auth dependencies.

``get_current_user`` guards creator/user endpoints (JWT Bearer).
``require_payout_processor`` guards the settlement callback used by the
external payout processor (shared key in ``X-Processor-Key``).
"""

import hmac

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.ce_common.database import get_db_session
from src.ce_common.errors import AccountDisabledError, InvalidCredentialsError, ProcessorAuthError
from src.ce_gateway.auth.jwt_handler import decode_token
from src.ce_gateway.user.db_models import UserModel

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Validate the Bearer token and load the user.

    Raises HTTP 401 for a missing/invalid/expired token or unknown user,
    and AccountDisabledError (403) for a disabled account.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id: str | None = payload.get("sub")
    if not user_id:
        raise _CREDENTIALS_EXCEPTION

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user


async def require_payout_processor(
    x_processor_key: str | None = Header(None),
) -> None:
    """Reject callers that do not present the payout processor key."""
    if x_processor_key is None or not hmac.compare_digest(
        x_processor_key.encode(), settings.PAYOUT_PROCESSOR_KEY.encode()
    ):
        raise ProcessorAuthError()
