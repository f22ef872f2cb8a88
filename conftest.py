import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from truckquote.main import app
from truckquote.db.session import get_db
from truckquote.models.base import Base
from truckquote.models.user import User
from truckquote.core.security import create_access_token, hash_password
from truckquote.core.enums import UserRole
from truckquote.schemas.quote import Coordinate, Leg
from truckquote.schemas.settings import RateConfig
from truckquote.services.distance import DistanceProvider, format_location, get_distance_provider
from truckquote.services.rate_config import ensure_rate_config


TEST_DATABASE_URL = "sqlite+aiosqlite://"

KLAPMUTS_DEPOT = Coordinate(lat=-33.8567, lng=18.8086)
CAPE_TOWN = Coordinate(lat=-33.9249, lng=18.4241)
STELLENBOSCH = Coordinate(lat=-33.9321, lng=18.8602)


class FakeDistanceProvider(DistanceProvider):
    """Answers from a table keyed by ("lat,lng", "lat,lng"); an exception value is raised"""

    def __init__(self, default: Leg | None = None):
        self.legs = {}
        self.default = default or Leg(distance_m=10000, duration_s=720)
        self.calls = []

    def set_leg(self, origin, destination, outcome):
        self.legs[(format_location(origin), format_location(destination))] = outcome

    async def get_leg(self, origin, destination):
        key = (format_location(origin), format_location(destination))
        self.calls.append(key)
        outcome = self.legs.get(key, self.default)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def klapmuts_rate():
    return RateConfig(
        depot_address="9 Main Road, Klapmuts, Cape Town, South Africa",
        depot_location=KLAPMUTS_DEPOT,
        truck_rate_per_km=10,
        driver_rate_per_8h=400,
        extra_hour_rate=500,
        vat_percent=15,
    )


@pytest.fixture
def scenario_provider():
    """Depot->Cape Town 10 km/0.2 h, Cape Town->Stellenbosch 50 km/0.6 h, back 15 km/0.3 h"""
    provider = FakeDistanceProvider()
    provider.set_leg(KLAPMUTS_DEPOT, CAPE_TOWN, Leg(distance_m=10000, duration_s=720))
    provider.set_leg(CAPE_TOWN, STELLENBOSCH, Leg(distance_m=50000, duration_s=2160))
    provider.set_leg(STELLENBOSCH, KLAPMUTS_DEPOT, Leg(distance_m=15000, duration_s=1080))
    return provider


@pytest.fixture
def valid_quote_data():
    return {
        "pickup_address": "Adderley Street, Cape Town",
        "pickup_lat": CAPE_TOWN.lat,
        "pickup_lng": CAPE_TOWN.lng,
        "dropoff_address": "Dorp Street, Stellenbosch",
        "dropoff_lat": STELLENBOSCH.lat,
        "dropoff_lng": STELLENBOSCH.lng,
        "weight_kg": 1200,
        "notes": "Two pallets",
        "loading_hours": 1,
        "offloading_hours": 2,
        "truck_type": "4-ton",
    }


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield factory

    await engine.dispose()


@pytest.fixture
async def setup_db(session_factory):
    async with session_factory() as session:
        await ensure_rate_config(session)

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield session_factory
    app.dependency_overrides.pop(get_db, None)


@pytest.fixture
def use_provider(scenario_provider):
    app.dependency_overrides[get_distance_provider] = lambda: scenario_provider
    yield scenario_provider
    app.dependency_overrides.pop(get_distance_provider, None)


@pytest.fixture
async def test_client():
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def _create_user(factory, email, role, **names):
    async with factory() as session:
        user = User(email=email, password_hash=hash_password("secret123"), role=role, **names)
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user


@pytest.fixture
async def admin_user(setup_db):
    return await _create_user(setup_db, "admin@example.com", UserRole.ADMIN)


@pytest.fixture
async def customer_user(setup_db):
    return await _create_user(
        setup_db, "customer@example.com", UserRole.CUSTOMER, first_name="Sipho", last_name="Ndlovu"
    )


@pytest.fixture
def admin_token(admin_user):
    return create_access_token(str(admin_user.id), UserRole.ADMIN)


@pytest.fixture
def customer_token(customer_user):
    return create_access_token(str(customer_user.id), UserRole.CUSTOMER)


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def customer_headers(customer_token):
    return {"Authorization": f"Bearer {customer_token}"}


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "pricing: marks tests related to pricing"
    )
    config.addinivalue_line(
        "markers", "admin: marks tests related to the admin endpoints"
    )
    config.addinivalue_line(
        "markers", "webhooks: marks tests related to webhooks"
    )
