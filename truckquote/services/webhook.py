import httpx
import asyncio
import logging
from truckquote.core.config import settings
from truckquote.core.metrics import webhook_deliveries

logger = logging.getLogger(__name__)


async def send_webhook(payload: dict, retries: int | None = None, backoff: float = 1.0) -> bool:
    """Hand a quote to the external delivery service (e-mail / WhatsApp)"""

    if not settings.WEBHOOK_URL:
        logger.info(f"WEBHOOK_URL not set; skipping delivery of quote {payload.get('quote_id')}")
        return False

    if retries is None:
        retries = settings.WEBHOOK_RETRIES
    
    for attempt in range(1, retries + 1):
        try:
            async with httpx.AsyncClient(timeout=settings.WEBHOOK_TIMEOUT) as client:
                response = await client.post(settings.WEBHOOK_URL, json=payload)
                
                if 200 <= response.status_code < 300:
                    webhook_deliveries.labels(status="success").inc()
                    logger.info(f"Webhook delivery succeeded for quote {payload.get('quote_id')}")
                    return True
                else:
                    webhook_deliveries.labels(status="failed").inc()
                    logger.warning(
                        f"Webhook delivery failed (attempt {attempt}/{retries}): "
                        f"Status {response.status_code} for quote {payload.get('quote_id')}"
                    )
        except httpx.TimeoutException:
            webhook_deliveries.labels(status="timeout").inc()
            logger.warning(
                f"Webhook timeout (attempt {attempt}/{retries}) for quote {payload.get('quote_id')}"
            )
        except httpx.HTTPError as e:
            webhook_deliveries.labels(status="error").inc()
            logger.warning(
                f"Webhook delivery error (attempt {attempt}/{retries}): {e} "
                f"for quote {payload.get('quote_id')}"
            )
        
        if attempt < retries:
            await asyncio.sleep(backoff)
            backoff *= 2.0
    
    logger.error(f"Webhook delivery failed after {retries} attempts for quote {payload.get('quote_id')}")
    return False
