"""Quote orchestration: validate, look up the three legs, price"""
import asyncio
import logging
from typing import Awaitable, Callable, Mapping, Optional, Union

from pydantic import ValidationError

from truckquote.core.config import settings
from truckquote.core.errors import QuoteError, QuoteValidationError, TransientError
from truckquote.core.metrics import quote_calculations
from truckquote.schemas.quote import LegSet, QuoteRequest, QuoteResult
from truckquote.schemas.settings import RateConfig
from truckquote.services.distance import DistanceProvider, Location
from truckquote.services.pricing import compute

logger = logging.getLogger(__name__)

RateConfigLoader = Callable[[], Awaitable[RateConfig]]


def validate_request(request: Union[QuoteRequest, Mapping]) -> QuoteRequest:
    if isinstance(request, QuoteRequest):
        return request
    try:
        return QuoteRequest.model_validate(request)
    except ValidationError as e:
        raise QuoteValidationError(
            [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
                for err in e.errors()
            ]
        ) from e


class QuoteService:
    def __init__(
        self,
        provider: DistanceProvider,
        load_rate_config: RateConfigLoader,
        leg_timeout: Optional[float] = None,
    ):
        self.provider = provider
        self.load_rate_config = load_rate_config
        self.leg_timeout = leg_timeout if leg_timeout is not None else settings.DISTANCE_LOOKUP_TIMEOUT

    async def calculate(self, request: Union[QuoteRequest, Mapping]) -> QuoteResult:
        try:
            req = validate_request(request)
            rate = await self.load_rate_config()
            legs = await self.fetch_legs(req, rate)
        except QuoteError as e:
            quote_calculations.labels(outcome=type(e).__name__).inc()
            raise

        result = compute(legs, req.shipment_params(), rate)
        quote_calculations.labels(outcome="ok").inc()
        logger.info(
            f"Quoted {req.pickup_address} -> {req.dropoff_address}: "
            f"{result.visible_km:.1f} km visible, {result.total_km:.1f} km total, "
            f"{result.price_inc_vat:.2f} inc VAT"
        )
        return result

    async def fetch_legs(self, req: QuoteRequest, rate: RateConfig) -> LegSet:
        """Depot->pickup, pickup->dropoff and dropoff->depot, all or nothing."""
        depot = rate.depot_location
        tasks = [
            asyncio.create_task(self._fetch_leg(depot, req.pickup)),
            asyncio.create_task(self._fetch_leg(req.pickup, req.dropoff)),
            asyncio.create_task(self._fetch_leg(req.dropoff, depot)),
        ]
        try:
            d1, d2, d3 = await asyncio.gather(*tasks)
        except Exception:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
        return LegSet(d1=d1, d2=d2, d3=d3)

    async def _fetch_leg(self, origin: Location, destination: Location):
        try:
            return await asyncio.wait_for(
                self.provider.get_leg(origin, destination),
                timeout=self.leg_timeout,
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Distance lookup {origin} -> {destination} exceeded {self.leg_timeout}s")
            raise TransientError(f"Distance lookup timed out after {self.leg_timeout}s") from e
