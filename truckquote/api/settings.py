from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from truckquote.core.enums import TruckType
from truckquote.db.session import get_db
from truckquote.schemas.settings import PublicSettingsOut, TruckTypeOut
from truckquote.services.rate_config import get_rate_config

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=PublicSettingsOut)
async def public_settings(db: AsyncSession = Depends(get_db)):
    """VAT and truck rates shown on the quote form; depot details stay private"""
    rate = await get_rate_config(db)
    return PublicSettingsOut(
        vat_percent=rate.vat_percent,
        truck_types=[
            TruckTypeOut(id=truck, name=truck.label, rate_per_km=rate.truck_rate_per_km)
            for truck in TruckType
        ],
    )
