"""Audit trail for staff and account actions"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from truckquote.models.audit import Audit
from truckquote.core.enums import AuditAction
from truckquote.utils.hashing import payload_hash

logger = logging.getLogger(__name__)


async def log_audit(
    db: AsyncSession,
    user_id: int,
    action: AuditAction,
    payload: Optional[dict] = None
) -> None:

    try:
        if payload is None:
            payload = {}
        
        if hasattr(payload, "model_dump"):
            payload_dict = payload.model_dump(exclude_unset=True)
        elif isinstance(payload, dict):
            payload_dict = payload
        else:
            payload_dict = {}
        
        audit_record = Audit(
            user_id=int(user_id),
            endpoint=str(action),
            payload_hash=payload_hash(payload_dict),
        )
        
        db.add(audit_record)
        await db.commit()
        
    except Exception as e:
        await db.rollback()
        logger.error(f"Audit logging failed for action {action}: {e}", exc_info=True)
