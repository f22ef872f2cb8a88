"""Rate limiting and idempotent replay on /quotes/calculate"""
import pytest

from truckquote.core import rate_limit
from truckquote.core.config import settings
from truckquote.utils import idempotency


class FakeRedis:
    def __init__(self):
        self.store = {}
        self.expiry = {}

    async def incr(self, key):
        self.store[key] = int(self.store.get(key, 0)) + 1
        return self.store[key]

    async def expire(self, key, seconds):
        self.expiry[key] = seconds

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value.encode() if isinstance(value, str) else value
        self.expiry[key] = ex


@pytest.fixture
def fake_redis(monkeypatch):
    redis = FakeRedis()
    monkeypatch.setattr(rate_limit, "get_redis", lambda: redis)
    monkeypatch.setattr(idempotency, "get_redis", lambda: redis)
    return redis


class TestRateLimit:

    @pytest.mark.asyncio
    async def test_blocks_after_limit(self, test_client, setup_db, use_provider, valid_quote_data, fake_redis, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT", 2)

        statuses = [
            (await test_client.post("/quotes/calculate", json=valid_quote_data)).status_code
            for _ in range(3)
        ]

        assert statuses == [200, 200, 429]
        assert fake_redis.expiry["rl:ip:127.0.0.1"] == settings.RATE_LIMIT_WINDOW

    @pytest.mark.asyncio
    async def test_limits_are_per_client(
        self, test_client, use_provider, customer_headers, valid_quote_data, fake_redis, monkeypatch
    ):
        monkeypatch.setattr(settings, "RATE_LIMIT", 1)

        anonymous = await test_client.post("/quotes/calculate", json=valid_quote_data)
        signed_in = await test_client.post("/quotes/calculate", json=valid_quote_data, headers=customer_headers)

        assert anonymous.status_code == 200
        assert signed_in.status_code == 200

    @pytest.mark.asyncio
    async def test_disabled_without_redis(self, test_client, setup_db, use_provider, valid_quote_data, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT", 1)

        for _ in range(3):
            response = await test_client.post("/quotes/calculate", json=valid_quote_data)
            assert response.status_code == 200


class TestIdempotency:

    @pytest.mark.asyncio
    async def test_replays_stored_response(self, test_client, setup_db, use_provider, valid_quote_data, fake_redis):
        headers = {"Idempotency-Key": "quote-form-123"}

        first = await test_client.post("/quotes/calculate", json=valid_quote_data, headers=headers)
        second = await test_client.post("/quotes/calculate", json=valid_quote_data, headers=headers)

        assert first.status_code == 200
        assert second.status_code == 200
        assert second.json()["id"] == first.json()["id"]
        assert len(use_provider.calls) == 3
        assert fake_redis.expiry["idemp:quote-form-123"] == settings.IDEMPOTENCY_TTL

    @pytest.mark.asyncio
    async def test_different_keys_calculate_again(self, test_client, setup_db, use_provider, valid_quote_data, fake_redis):
        first = await test_client.post("/quotes/calculate", json=valid_quote_data, headers={"Idempotency-Key": "a"})
        second = await test_client.post("/quotes/calculate", json=valid_quote_data, headers={"Idempotency-Key": "b"})

        assert second.json()["id"] != first.json()["id"]
        assert len(use_provider.calls) == 6
