from sqlalchemy import Column, String, Float, Integer, Text, ForeignKey, Enum, JSON
from sqlalchemy.orm import relationship
from truckquote.models.base import BaseModel
from truckquote.core.enums import QuoteStatus, TruckType


class Quote(BaseModel):
    __tablename__ = "quotes"

    user_id = Column(ForeignKey("users.id"), nullable=True)
    user = relationship("User", backref="quotes", lazy="selectin")
    source_quote_id = Column(ForeignKey("quotes.id"), nullable=True)

    pickup_address = Column(String(500), nullable=False)
    pickup_lat = Column(Float, nullable=False)
    pickup_lng = Column(Float, nullable=False)
    dropoff_address = Column(String(500), nullable=False)
    dropoff_lat = Column(Float, nullable=False)
    dropoff_lng = Column(Float, nullable=False)
    weight_kg = Column(Float, nullable=True)
    notes = Column(Text, nullable=True)
    loading_hours = Column(Float, nullable=False, default=1.0)
    offloading_hours = Column(Float, nullable=False, default=1.0)
    truck_type = Column(Enum(TruckType, values_callable=lambda e: [m.value for m in e]), nullable=False, default=TruckType.FOUR_TON)

    visible_km = Column(Float, nullable=False)
    total_km = Column(Float, nullable=False)
    legs_km = Column(JSON, nullable=False)
    durations_hours = Column(JSON, nullable=False)
    total_work_hours = Column(Float, nullable=False)
    driver_days = Column(Integer, nullable=False)
    depot_address = Column(String(255), nullable=False)

    base_km_cost = Column(Float, nullable=False)
    driver_cost = Column(Float, nullable=False)
    extra_time_cost = Column(Float, nullable=False)
    price_ex_vat = Column(Float, nullable=False)
    vat_percent = Column(Float, nullable=False)
    vat_amount = Column(Float, nullable=False)
    price_inc_vat = Column(Float, nullable=False)

    status = Column(Enum(QuoteStatus), nullable=False, default=QuoteStatus.PENDING)
    client_name = Column(String(255), nullable=True)
    company_name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(40), nullable=True)
