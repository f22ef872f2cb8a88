"""Quote calculation and customer quote endpoints"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Header, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from truckquote.core.auth_utils import check_not_found
from truckquote.core.rate_limit import check_rate_limit
from truckquote.core.response_builders import (
    build_quote_detail_response,
    build_quote_response,
    build_quote_response_list,
)
from truckquote.core.security import get_current_user, get_optional_user
from truckquote.db.session import get_db
from truckquote.models.user import User
from truckquote.schemas.quote import ClientDetailsUpdate, QuoteDetailOut, QuoteOut, QuoteRequest
from truckquote.services.distance import DistanceProvider, get_distance_provider
from truckquote.services.quote_service import QuoteService
from truckquote.services.quote_store import get_quote, list_quotes, save_quote
from truckquote.services.rate_config import get_rate_config
from truckquote.utils.idempotency import get_idempotent, set_idempotent

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/quotes", tags=["quotes"])


def _client_key(request: Request, user: Optional[User]) -> str:
    if user is not None:
        return f"user:{user.id}"
    host = request.client.host if request.client else "unknown"
    return f"ip:{host}"


@router.post("/calculate", response_model=QuoteDetailOut)
async def calculate_quote(
    payload: QuoteRequest,
    request: Request,
    idempotency_key: Optional[str] = Header(None),
    db: AsyncSession = Depends(get_db),
    provider: DistanceProvider = Depends(get_distance_provider),
    current_user: Optional[User] = Depends(get_optional_user),
):
    await check_rate_limit(_client_key(request, current_user))

    if idempotency_key:
        prev = await get_idempotent(idempotency_key)
        if prev:
            return prev

    service = QuoteService(provider, lambda: get_rate_config(db))
    result = await service.calculate(payload)

    quote = await save_quote(
        db,
        payload,
        result,
        user_id=int(current_user.id) if current_user else None,
    )

    out = build_quote_detail_response(quote)
    if idempotency_key:
        await set_idempotent(idempotency_key, out.model_dump(mode="json"))
    return out


@router.get("/my-quotes", response_model=List[QuoteOut])
async def my_quotes(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    quotes = await list_quotes(db, limit=limit, offset=offset, user_id=int(current_user.id))
    return build_quote_response_list(quotes)


@router.put("/{quote_id}/client-details", response_model=QuoteOut)
async def update_client_details(
    quote_id: int,
    payload: ClientDetailsUpdate,
    db: AsyncSession = Depends(get_db),
):
    quote = await get_quote(db, quote_id)
    check_not_found(quote, "Quote", quote_id)

    for field, value in payload.model_dump(exclude_unset=True).items():
        setattr(quote, field, value or None)

    db.add(quote)
    await db.commit()
    await db.refresh(quote)

    return build_quote_response(quote)
