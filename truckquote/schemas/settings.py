from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from truckquote.core.enums import TruckType
from truckquote.schemas.quote import Coordinate


class RateConfig(BaseModel):
    """Pricing configuration as read at the start of one calculation."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    depot_address: str
    depot_location: Coordinate
    truck_rate_per_km: float = Field(ge=0)
    driver_rate_per_8h: float = Field(ge=0)
    extra_hour_rate: float = Field(ge=0)
    vat_percent: float = Field(ge=0, le=100)


class RateSettingsUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    depot_address: str = Field(min_length=1)
    depot_lat: float = Field(ge=-90, le=90)
    depot_lng: float = Field(ge=-180, le=180)
    truck_rate_per_km: float = Field(ge=0)
    driver_rate_per_8h: float = Field(ge=0)
    extra_hour_rate: float = Field(ge=0)
    vat_percent: float = Field(ge=0, le=100)


class RateSettingsOut(RateSettingsUpdate):
    updated_at: Optional[datetime] = None


class TruckTypeOut(BaseModel):
    id: TruckType
    name: str
    rate_per_km: float


class PublicSettingsOut(BaseModel):
    vat_percent: float
    truck_types: List[TruckTypeOut]
