from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from truckquote.core.enums import QuoteStatus, TruckType

INTERNAL = {"internal": True}


class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    lat: float = Field(ge=-90, le=90)
    lng: float = Field(ge=-180, le=180)

    def __str__(self):
        return f"{self.lat},{self.lng}"


class Leg(BaseModel):
    """One directed driving lookup, as reported by the distance provider."""
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    distance_m: float = Field(ge=0)
    duration_s: float = Field(ge=0)

    @property
    def km(self) -> float:
        return self.distance_m / 1000

    @property
    def hours(self) -> float:
        return self.duration_s / 3600


class LegSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    d1: Leg  # depot -> pickup
    d2: Leg  # pickup -> dropoff
    d3: Leg  # dropoff -> depot


class ShipmentParams(BaseModel):
    model_config = ConfigDict(frozen=True, allow_inf_nan=False)

    loading_hours: float = Field(default=1.0, ge=0)
    offloading_hours: float = Field(default=1.0, ge=0)
    truck_type: TruckType = TruckType.FOUR_TON


class QuoteRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False)

    pickup_address: str = Field(min_length=1)
    pickup_lat: float = Field(ge=-90, le=90)
    pickup_lng: float = Field(ge=-180, le=180)
    dropoff_address: str = Field(min_length=1)
    dropoff_lat: float = Field(ge=-90, le=90)
    dropoff_lng: float = Field(ge=-180, le=180)
    weight_kg: Optional[float] = Field(default=None, ge=0)
    notes: Optional[str] = None
    loading_hours: float = Field(default=1.0, ge=0)
    offloading_hours: float = Field(default=1.0, ge=0)
    truck_type: TruckType = TruckType.FOUR_TON

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v):
        return v or None

    @property
    def pickup(self) -> Coordinate:
        return Coordinate(lat=self.pickup_lat, lng=self.pickup_lng)

    @property
    def dropoff(self) -> Coordinate:
        return Coordinate(lat=self.dropoff_lat, lng=self.dropoff_lng)

    def shipment_params(self) -> ShipmentParams:
        return ShipmentParams(
            loading_hours=self.loading_hours,
            offloading_hours=self.offloading_hours,
            truck_type=self.truck_type,
        )


class LegDistances(BaseModel):
    model_config = ConfigDict(frozen=True)

    d1: float
    d2: float
    d3: float


class LegDurations(BaseModel):
    model_config = ConfigDict(frozen=True)

    d1: float
    d2: float
    d3: float
    total: float


class QuoteResult(BaseModel):
    """Itemised price for one request.

    Fields tagged ``internal`` describe the depot repositioning legs and must
    only be shown to staff. ``customer_view()`` strips them.
    """
    model_config = ConfigDict(frozen=True)

    legs_km: LegDistances = Field(json_schema_extra=INTERNAL)
    durations_hours: LegDurations = Field(json_schema_extra=INTERNAL)
    total_km: float = Field(json_schema_extra=INTERNAL)
    total_work_hours: float = Field(json_schema_extra=INTERNAL)
    driver_days: int = Field(json_schema_extra=INTERNAL)
    depot_address: str = Field(json_schema_extra=INTERNAL)

    visible_km: float
    base_km_cost: float
    driver_cost: float
    extra_time_cost: float
    price_ex_vat: float
    vat_percent: float
    vat_amount: float
    price_inc_vat: float

    loading_hours: float
    offloading_hours: float
    truck_type: TruckType

    @classmethod
    def internal_fields(cls) -> set:
        return {
            name for name, field in cls.model_fields.items()
            if isinstance(field.json_schema_extra, dict) and field.json_schema_extra.get("internal")
        }

    def customer_view(self) -> dict:
        return self.model_dump(mode="json", exclude=self.internal_fields())

    def internal_view(self) -> dict:
        return self.model_dump(mode="json", include=self.internal_fields())


class QuoteInternalsOut(BaseModel):
    total_km: float
    legs_km: LegDistances
    durations_hours: LegDurations
    total_work_hours: float
    driver_days: int
    depot_address: str


class QuoteOut(BaseModel):
    """Customer-facing quote: pickup->dropoff distance and prices only."""
    id: int
    status: QuoteStatus
    pickup_address: str
    dropoff_address: str
    truck_type: TruckType
    weight_kg: Optional[float] = None
    notes: Optional[str] = None
    loading_hours: float
    offloading_hours: float
    visible_km: float
    base_km_cost: float
    driver_cost: float
    extra_time_cost: float
    price_ex_vat: float
    vat_percent: float
    vat_amount: float
    price_inc_vat: float
    created_at: Optional[datetime] = None


class QuoteDetailOut(QuoteOut):
    pickup_lat: float
    pickup_lng: float
    dropoff_lat: float
    dropoff_lng: float
    user_id: Optional[int] = None
    user_first_name: Optional[str] = None
    user_last_name: Optional[str] = None
    user_email: Optional[str] = None
    source_quote_id: Optional[int] = None
    client_name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    internal: QuoteInternalsOut


class ClientDetailsUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    client_name: Optional[str] = None
    company_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus
