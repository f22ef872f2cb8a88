import pytest
from sqlalchemy.future import select

from conftest import CAPE_TOWN, STELLENBOSCH, FakeDistanceProvider
from truckquote.core.errors import TransientError
from truckquote.models.quote import Quote
from truckquote.schemas.quote import QuoteRequest
from truckquote.services.pricing import compute
from truckquote.services.quote_service import QuoteService
from truckquote.services.quote_store import save_quote
from truckquote.services.rate_config import default_rate_settings, get_rate_config, update_rate_config
from truckquote.services.tasks_internal import requote_quote_async


async def stored_quote(factory, provider, data, **fields):
    async with factory() as session:
        request = QuoteRequest(**data)
        service = QuoteService(provider, lambda: get_rate_config(session))
        quote = await save_quote(session, request, await service.calculate(request))
        for name, value in fields.items():
            setattr(quote, name, value)
        await session.commit()
        return quote.id


class TestRequoteTask:

    @pytest.mark.asyncio
    async def test_requote_uses_current_rates(self, setup_db, scenario_provider, valid_quote_data):
        original_id = await stored_quote(
            setup_db, scenario_provider, valid_quote_data, client_name="Thandi Mokoena", email="thandi@example.com"
        )
        async with setup_db() as session:
            new_rates = default_rate_settings().model_copy(update={"truck_rate_per_km": 20})
            await update_rate_config(session, new_rates)

        new_id = await requote_quote_async(original_id, session_factory=setup_db, provider=scenario_provider)

        assert new_id is not None and new_id != original_id
        async with setup_db() as session:
            original = (await session.execute(select(Quote).where(Quote.id == original_id))).scalars().first()
            requoted = (await session.execute(select(Quote).where(Quote.id == new_id))).scalars().first()

        assert original.price_ex_vat == 1650.0
        assert requoted.base_km_cost == 1500.0
        assert requoted.price_ex_vat == 2400.0
        assert requoted.source_quote_id == original_id
        assert requoted.client_name == "Thandi Mokoena"
        assert requoted.email == "thandi@example.com"
        assert requoted.pickup_address == original.pickup_address
        assert requoted.offloading_hours == 2

    @pytest.mark.asyncio
    async def test_requote_missing_quote(self, setup_db, scenario_provider):
        assert await requote_quote_async(999, session_factory=setup_db, provider=scenario_provider) is None
        assert scenario_provider.calls == []

    @pytest.mark.asyncio
    async def test_requote_propagates_transient_errors(self, setup_db, scenario_provider, valid_quote_data):
        original_id = await stored_quote(setup_db, scenario_provider, valid_quote_data)

        failing = FakeDistanceProvider()
        failing.set_leg(CAPE_TOWN, STELLENBOSCH, TransientError("Distance provider unavailable (HTTP 503)"))

        with pytest.raises(TransientError):
            await requote_quote_async(original_id, session_factory=setup_db, provider=failing)

        async with setup_db() as session:
            res = await session.execute(select(Quote))
            assert len(res.scalars().all()) == 1


class TestStoredResultMatchesCompute:

    @pytest.mark.asyncio
    async def test_saved_row_matches_pure_result(self, setup_db, scenario_provider, klapmuts_rate, valid_quote_data):
        quote_id = await stored_quote(setup_db, scenario_provider, valid_quote_data)
        request = QuoteRequest(**valid_quote_data)
        legs = await QuoteService(scenario_provider, None).fetch_legs(request, klapmuts_rate)
        expected = compute(legs, request.shipment_params(), klapmuts_rate)

        async with setup_db() as session:
            quote = (await session.execute(select(Quote).where(Quote.id == quote_id))).scalars().first()

        assert quote.legs_km == expected.legs_km.model_dump()
        assert quote.durations_hours == expected.durations_hours.model_dump()
        assert quote.price_inc_vat == expected.price_inc_vat


def test_celery_task_runs_requote(monkeypatch):
    from truckquote.services import tasks, tasks_internal

    seen = []

    async def fake_requote(quote_id):
        seen.append(quote_id)
        return quote_id + 100

    monkeypatch.setattr(tasks_internal, "requote_quote_async", fake_requote)

    assert tasks.requote_quote(5) == 105
    assert seen == [5]


def test_worker_sessions_do_not_pool_connections():
    import inspect
    from sqlalchemy.pool import NullPool
    from truckquote.services import tasks_internal

    assert isinstance(tasks_internal.engine_worker.sync_engine.pool, NullPool)
    default = inspect.signature(requote_quote_async).parameters["session_factory"].default
    assert default is tasks_internal.AsyncSessionWorker
