import math

from truckquote.schemas.quote import LegDistances, LegDurations, LegSet, QuoteResult, ShipmentParams
from truckquote.schemas.settings import RateConfig

HOURS_PER_DRIVER_DAY = 8
MIN_DRIVER_DAYS = 1
FREE_LOADING_HOURS = 1.0
FREE_OFFLOADING_HOURS = 1.0


def compute(legs: LegSet, params: ShipmentParams, rate: RateConfig) -> QuoteResult:
    """Price the depot -> pickup -> dropoff -> depot triangle.

    Pure: no I/O and no rounding; currency formatting happens at display time.
    """
    km = LegDistances(d1=legs.d1.km, d2=legs.d2.km, d3=legs.d3.km)
    total_km = km.d1 + km.d2 + km.d3
    visible_km = km.d2

    total_duration_hours = legs.d1.hours + legs.d2.hours + legs.d3.hours
    hours = LegDurations(
        d1=legs.d1.hours,
        d2=legs.d2.hours,
        d3=legs.d3.hours,
        total=total_duration_hours,
    )

    total_work_hours = total_duration_hours + params.loading_hours + params.offloading_hours
    driver_days = max(MIN_DRIVER_DAYS, math.ceil(total_work_hours / HOURS_PER_DRIVER_DAY))
    driver_cost = driver_days * rate.driver_rate_per_8h

    extra_loading_hours = max(0.0, params.loading_hours - FREE_LOADING_HOURS)
    extra_offloading_hours = max(0.0, params.offloading_hours - FREE_OFFLOADING_HOURS)
    extra_time_cost = (extra_loading_hours + extra_offloading_hours) * rate.extra_hour_rate

    base_km_cost = total_km * rate.truck_rate_per_km

    price_ex_vat = base_km_cost + driver_cost + extra_time_cost
    vat_amount = price_ex_vat * (rate.vat_percent / 100)
    price_inc_vat = price_ex_vat + vat_amount

    return QuoteResult(
        legs_km=km,
        durations_hours=hours,
        total_km=total_km,
        total_work_hours=total_work_hours,
        driver_days=driver_days,
        depot_address=rate.depot_address,
        visible_km=visible_km,
        base_km_cost=base_km_cost,
        driver_cost=driver_cost,
        extra_time_cost=extra_time_cost,
        price_ex_vat=price_ex_vat,
        vat_percent=rate.vat_percent,
        vat_amount=vat_amount,
        price_inc_vat=price_inc_vat,
        loading_hours=params.loading_hours,
        offloading_hours=params.offloading_hours,
        truck_type=params.truck_type,
    )
