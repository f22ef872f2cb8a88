import logging
from typing import Optional
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool
from truckquote.core.config import settings
from truckquote.services.distance import DistanceProvider, get_distance_provider
from truckquote.services.quote_service import QuoteService
from truckquote.services.quote_store import get_quote, request_from_quote, save_quote
from truckquote.services.rate_config import get_rate_config

logger = logging.getLogger(__name__)

# One asyncio.run loop per Celery task: no connection may be reused across tasks
engine_worker = create_async_engine(settings.DATABASE_URL, future=True, echo=False, poolclass=NullPool)
AsyncSessionWorker = sessionmaker(engine_worker, class_=AsyncSession, expire_on_commit=False)


async def requote_quote_async(
    quote_id: int,
    session_factory=AsyncSessionWorker,
    provider: Optional[DistanceProvider] = None,
) -> Optional[int]:
    """Price a stored quote again with the current rates; returns the new quote id"""
    async with session_factory() as db:
        original = await get_quote(db, quote_id)
        if not original:
            logger.warning(f"Requote skipped: quote {quote_id} not found")
            return None

        service = QuoteService(
            provider or get_distance_provider(),
            lambda: get_rate_config(db),
        )
        request = request_from_quote(original)
        result = await service.calculate(request)

        new_quote = await save_quote(
            db,
            request,
            result,
            user_id=original.user_id,
            source_quote_id=original.id,
        )
        for field in ("client_name", "company_name", "email", "phone"):
            setattr(new_quote, field, getattr(original, field))
        db.add(new_quote)
        await db.commit()

        logger.info(
            f"Requoted {quote_id} as {new_quote.id}: "
            f"{original.price_inc_vat:.2f} -> {new_quote.price_inc_vat:.2f} inc VAT"
        )
        return new_quote.id
