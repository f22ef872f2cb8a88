"""Staff endpoints: rate configuration and quote review"""
import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from truckquote.core.audit_log import log_audit
from truckquote.core.auth_utils import check_not_found
from truckquote.core.enums import AuditAction, QuoteStatus
from truckquote.core.errors import ConfigurationError
from truckquote.core.response_builders import (
    build_quote_detail_response,
    build_quote_detail_response_list,
    build_quote_response,
    build_settings_response,
)
from truckquote.core.security import require_admin
from truckquote.db.session import get_db
from truckquote.schemas.quote import QuoteDetailOut, QuoteStatusUpdate
from truckquote.schemas.settings import RateSettingsOut, RateSettingsUpdate
from truckquote.services.quote_store import get_quote, list_quotes
from truckquote.services.rate_config import get_rate_settings, update_rate_config
from truckquote.services.tasks import requote_quote
from truckquote.services.webhook import send_webhook

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/settings", response_model=RateSettingsOut)
async def get_settings(
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_admin)
):
    row = await get_rate_settings(db)
    if row is None:
        raise ConfigurationError("Settings not configured")
    return build_settings_response(row)


@router.put("/settings", response_model=RateSettingsOut)
async def put_settings(
    payload: RateSettingsUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_admin)
):
    row = await update_rate_config(db, payload)
    await log_audit(db, int(current_user.id), AuditAction.UPDATE_SETTINGS, payload)
    return build_settings_response(row)


@router.get("/quotes", response_model=List[QuoteDetailOut])
async def admin_list_quotes(
    status: Optional[QuoteStatus] = Query(None),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_admin)
):
    quotes = await list_quotes(db, limit=limit, offset=offset, status=status)
    return build_quote_detail_response_list(quotes)


@router.get("/quotes/{quote_id}", response_model=QuoteDetailOut)
async def admin_get_quote(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_admin)
):
    quote = await get_quote(db, quote_id)
    check_not_found(quote, "Quote", quote_id)
    return build_quote_detail_response(quote)


@router.put("/quotes/{quote_id}/status", response_model=QuoteDetailOut)
async def update_quote_status(
    quote_id: int,
    payload: QuoteStatusUpdate,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_admin)
):
    quote = await get_quote(db, quote_id)
    check_not_found(quote, "Quote", quote_id)

    old_status = quote.status
    quote.status = payload.status
    db.add(quote)
    await db.commit()
    quote = await get_quote(db, quote_id)

    await log_audit(
        db,
        int(current_user.id),
        AuditAction.UPDATE_QUOTE_STATUS,
        {"quote_id": quote_id, "status": str(payload.status)},
    )

    # Delivery service only ever sees the customer view
    if old_status != quote.status and quote.status == QuoteStatus.SENT:
        await send_webhook({
            "quote_id": quote.id,
            "quote": build_quote_response(quote).model_dump(mode="json"),
            "client_name": quote.client_name,
            "company_name": quote.company_name,
            "email": quote.email,
            "phone": quote.phone,
        })

    return build_quote_detail_response(quote)


@router.post("/quotes/{quote_id}/requote", status_code=202)
async def requote(
    quote_id: int,
    db: AsyncSession = Depends(get_db),
    current_user=Depends(require_admin)
):
    quote = await get_quote(db, quote_id)
    check_not_found(quote, "Quote", quote_id)

    requote_quote.delay(quote_id)
    await log_audit(db, int(current_user.id), AuditAction.REQUOTE, {"quote_id": quote_id})

    return {"status": "queued", "quote_id": quote_id}
