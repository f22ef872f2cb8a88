from sqlalchemy import Column, String, Float
from truckquote.models.base import BaseModel

SETTINGS_ROW_ID = 1


class RateSettings(BaseModel):
    """Singleton row (id=1) holding the active rate configuration."""
    __tablename__ = "settings"

    depot_address = Column(String(255), nullable=False)
    depot_lat = Column(Float, nullable=False)
    depot_lng = Column(Float, nullable=False)
    truck_rate_per_km = Column(Float, nullable=False)
    driver_rate_per_8h = Column(Float, nullable=False)
    extra_hour_rate = Column(Float, nullable=False)
    vat_percent = Column(Float, nullable=False)
