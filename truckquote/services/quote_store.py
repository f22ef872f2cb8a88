"""Persistence of computed quotes"""
from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from truckquote.core.enums import QuoteStatus
from truckquote.models.quote import Quote
from truckquote.schemas.quote import QuoteRequest, QuoteResult


async def save_quote(
    db: AsyncSession,
    request: QuoteRequest,
    result: QuoteResult,
    user_id: Optional[int] = None,
    source_quote_id: Optional[int] = None,
) -> Quote:
    """Store the request and its result verbatim and return the new row"""
    quote = Quote(
        user_id=user_id,
        source_quote_id=source_quote_id,
        **request.model_dump(),
        **result.model_dump(mode="json", exclude={"loading_hours", "offloading_hours", "truck_type"}),
        status=QuoteStatus.PENDING,
    )
    db.add(quote)
    await db.commit()
    return await get_quote(db, quote.id)


async def list_quotes(
    db: AsyncSession,
    limit: int = 20,
    offset: int = 0,
    user_id: Optional[int] = None,
    status: Optional[QuoteStatus] = None,
) -> List[Quote]:
    q = select(Quote)
    if user_id is not None:
        q = q.where(Quote.user_id == user_id)
    if status is not None:
        q = q.where(Quote.status == status)
    q = q.order_by(Quote.created_at.desc(), Quote.id.desc()).limit(limit).offset(offset)
    res = await db.execute(q)
    return list(res.scalars().all())


async def get_quote(db: AsyncSession, quote_id: int) -> Optional[Quote]:
    # populate_existing: rows already in the session also get their owner loaded
    q = select(Quote).where(Quote.id == quote_id).execution_options(populate_existing=True)
    res = await db.execute(q)
    return res.scalars().first()


def request_from_quote(quote: Quote) -> QuoteRequest:
    return QuoteRequest(
        pickup_address=quote.pickup_address,
        pickup_lat=quote.pickup_lat,
        pickup_lng=quote.pickup_lng,
        dropoff_address=quote.dropoff_address,
        dropoff_lat=quote.dropoff_lat,
        dropoff_lng=quote.dropoff_lng,
        weight_kg=quote.weight_kg,
        notes=quote.notes,
        loading_hours=quote.loading_hours,
        offloading_hours=quote.offloading_hours,
        truck_type=quote.truck_type,
    )
