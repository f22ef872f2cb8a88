from truckquote.models.quote import Quote
from truckquote.models.rate_settings import RateSettings
from truckquote.schemas.quote import QuoteOut, QuoteDetailOut, QuoteInternalsOut
from truckquote.schemas.settings import RateSettingsOut


def build_quote_response(quote: Quote) -> QuoteOut:
    return QuoteOut(
        id=quote.id,
        status=quote.status,
        pickup_address=quote.pickup_address,
        dropoff_address=quote.dropoff_address,
        truck_type=quote.truck_type,
        weight_kg=quote.weight_kg,
        notes=quote.notes,
        loading_hours=quote.loading_hours,
        offloading_hours=quote.offloading_hours,
        visible_km=quote.visible_km,
        base_km_cost=quote.base_km_cost,
        driver_cost=quote.driver_cost,
        extra_time_cost=quote.extra_time_cost,
        price_ex_vat=quote.price_ex_vat,
        vat_percent=quote.vat_percent,
        vat_amount=quote.vat_amount,
        price_inc_vat=quote.price_inc_vat,
        created_at=quote.created_at,
    )


def build_quote_detail_response(quote: Quote) -> QuoteDetailOut:
    visible = build_quote_response(quote)
    owner = quote.user
    return QuoteDetailOut(
        **visible.model_dump(),
        pickup_lat=quote.pickup_lat,
        pickup_lng=quote.pickup_lng,
        dropoff_lat=quote.dropoff_lat,
        dropoff_lng=quote.dropoff_lng,
        user_id=quote.user_id,
        user_first_name=owner.first_name if owner else None,
        user_last_name=owner.last_name if owner else None,
        user_email=owner.email if owner else None,
        source_quote_id=quote.source_quote_id,
        client_name=quote.client_name,
        company_name=quote.company_name,
        email=quote.email,
        phone=quote.phone,
        internal=QuoteInternalsOut(
            total_km=quote.total_km,
            legs_km=quote.legs_km,
            durations_hours=quote.durations_hours,
            total_work_hours=quote.total_work_hours,
            driver_days=quote.driver_days,
            depot_address=quote.depot_address,
        ),
    )


def build_settings_response(row: RateSettings) -> RateSettingsOut:
    return RateSettingsOut(
        depot_address=row.depot_address,
        depot_lat=row.depot_lat,
        depot_lng=row.depot_lng,
        truck_rate_per_km=row.truck_rate_per_km,
        driver_rate_per_8h=row.driver_rate_per_8h,
        extra_hour_rate=row.extra_hour_rate,
        vat_percent=row.vat_percent,
        updated_at=row.updated_at,
    )


def build_quote_response_list(quotes: list) -> list:
    return [build_quote_response(quote) for quote in quotes]


def build_quote_detail_response_list(quotes: list) -> list:
    return [build_quote_detail_response(quote) for quote in quotes]
