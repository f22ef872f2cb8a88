"""Access to the singleton rate configuration"""
import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from truckquote.core.config import settings
from truckquote.core.errors import ConfigurationError
from truckquote.models.rate_settings import RateSettings, SETTINGS_ROW_ID
from truckquote.schemas.quote import Coordinate
from truckquote.schemas.settings import RateConfig, RateSettingsUpdate

logger = logging.getLogger(__name__)


def default_rate_settings() -> RateSettingsUpdate:
    return RateSettingsUpdate(
        depot_address=settings.DEFAULT_DEPOT_ADDRESS,
        depot_lat=settings.DEFAULT_DEPOT_LAT,
        depot_lng=settings.DEFAULT_DEPOT_LNG,
        truck_rate_per_km=settings.DEFAULT_TRUCK_RATE_PER_KM,
        driver_rate_per_8h=settings.DEFAULT_DRIVER_RATE_PER_8H,
        extra_hour_rate=settings.DEFAULT_EXTRA_HOUR_RATE,
        vat_percent=settings.DEFAULT_VAT_PERCENT,
    )


def to_rate_config(row: RateSettings) -> RateConfig:
    return RateConfig(
        depot_address=row.depot_address,
        depot_location=Coordinate(lat=row.depot_lat, lng=row.depot_lng),
        truck_rate_per_km=row.truck_rate_per_km,
        driver_rate_per_8h=row.driver_rate_per_8h,
        extra_hour_rate=row.extra_hour_rate,
        vat_percent=row.vat_percent,
    )


async def get_rate_settings(db: AsyncSession) -> Optional[RateSettings]:
    res = await db.execute(select(RateSettings).where(RateSettings.id == SETTINGS_ROW_ID))
    return res.scalars().first()


async def get_rate_config(db: AsyncSession) -> RateConfig:
    row = await get_rate_settings(db)
    if row is None:
        raise ConfigurationError("Settings not configured")
    return to_rate_config(row)


async def update_rate_config(db: AsyncSession, payload: RateSettingsUpdate) -> RateSettings:
    """Replace the active configuration. Calculations already running keep the value they read."""
    row = await get_rate_settings(db)
    if row is None:
        row = RateSettings(id=SETTINGS_ROW_ID)

    for field, value in payload.model_dump().items():
        setattr(row, field, value)

    db.add(row)
    await db.commit()
    await db.refresh(row)
    logger.info(
        f"Rate configuration updated: {row.truck_rate_per_km}/km, "
        f"{row.driver_rate_per_8h}/8h, {row.extra_hour_rate}/extra h, VAT {row.vat_percent}%"
    )
    return row


async def ensure_rate_config(db: AsyncSession) -> RateSettings:
    row = await get_rate_settings(db)
    if row is not None:
        return row
    logger.info("Seeding default rate configuration")
    return await update_rate_config(db, default_rate_settings())
