"""Driving distance/duration lookups"""
import logging
from typing import Optional, Union

import httpx

from truckquote.core.config import settings
from truckquote.core.errors import ConfigurationError, RouteLookupError, TransientError
from truckquote.core.metrics import track_distance_lookup
from truckquote.schemas.quote import Coordinate, Leg

logger = logging.getLogger(__name__)

Location = Union[Coordinate, str]

# Top-level Distance Matrix statuses
CREDENTIAL_STATUSES = {"REQUEST_DENIED", "OVER_DAILY_LIMIT"}
TRANSIENT_STATUSES = {"OVER_QUERY_LIMIT", "UNKNOWN_ERROR"}


class DistanceProvider:
    """Base class for driving distance providers"""

    async def get_leg(self, origin: Location, destination: Location) -> Leg:
        raise NotImplementedError


def format_location(location: Location) -> str:
    if isinstance(location, Coordinate):
        return f"{location.lat},{location.lng}"
    return location


class GoogleDistanceMatrixProvider(DistanceProvider):
    """Google Distance Matrix, driving mode, one origin and one destination per call."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_MAPS_API_KEY
        self.url = url or settings.DISTANCE_MATRIX_URL
        self.timeout = timeout or settings.DISTANCE_LOOKUP_TIMEOUT
        self.client = client

    async def get_leg(self, origin: Location, destination: Location) -> Leg:
        if not self.api_key:
            raise ConfigurationError("Google Maps API key not configured")

        params = {
            "origins": format_location(origin),
            "destinations": format_location(destination),
            "mode": "driving",
            "units": "metric",
            "key": self.api_key,
        }

        with track_distance_lookup():
            data = await self._fetch(params)
            return self._parse(data, params["origins"], params["destinations"])

    async def _fetch(self, params: dict) -> dict:
        try:
            if self.client is not None:
                response = await self.client.get(self.url, params=params, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(self.url, params=params)
        except httpx.TimeoutException as e:
            logger.warning(f"Distance lookup timed out: {e}")
            raise TransientError("Distance lookup timed out") from e
        except httpx.RequestError as e:
            logger.warning(f"Distance lookup request failed: {e}")
            raise TransientError(f"Distance lookup failed: {e}") from e

        if response.status_code >= 500:
            raise TransientError(
                f"Distance provider unavailable (HTTP {response.status_code})",
                status=str(response.status_code),
            )
        if response.status_code >= 400:
            raise ConfigurationError(f"Distance provider rejected the request (HTTP {response.status_code})")

        try:
            return response.json()
        except ValueError as e:
            raise TransientError("Distance provider returned an unreadable response") from e

    def _parse(self, data: dict, origin: str, destination: str) -> Leg:
        status = data.get("status")
        if status != "OK":
            message = data.get("error_message") or f"Google Maps API error: {status}"
            logger.warning(f"Distance lookup {origin} -> {destination} failed with {status}: {message}")
            if status in CREDENTIAL_STATUSES:
                raise ConfigurationError(message)
            if status in TRANSIENT_STATUSES:
                raise TransientError(message, status=status)
            raise RouteLookupError(message, status=status)

        rows = data.get("rows") or [{}]
        elements = rows[0].get("elements") or [{}]
        element = elements[0]
        element_status = element.get("status", "UNKNOWN")
        if element_status != "OK":
            logger.info(f"No route {origin} -> {destination}: {element_status}")
            raise RouteLookupError(f"No route found: {element_status}", status=element_status)

        return Leg(
            distance_m=element["distance"]["value"],
            duration_s=element["duration"]["value"],
        )


def get_distance_provider() -> DistanceProvider:
    return GoogleDistanceMatrixProvider()
