from celery import Celery
from truckquote.core.config import settings

celery_app = Celery(
    "worker",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_BACKEND,
)
celery_app.conf.task_routes = {"truckquote.services.tasks.requote_quote": {"queue": "requote"}}

@celery_app.task(bind=True, max_retries=3)
def requote_quote(self, quote_id: int):
    import asyncio
    from truckquote.core.errors import TransientError
    from truckquote.services.tasks_internal import requote_quote_async
    
    try:
        return asyncio.run(requote_quote_async(quote_id))
    except TransientError as e:
        retry_kwargs = {"countdown": 2 ** self.request.retries}
        raise self.retry(exc=e, **retry_kwargs)
