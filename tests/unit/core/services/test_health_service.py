import pytest

from labnote.core.services.health_service import HealthService


class FakeScalarResult:
    def __init__(self, scalar_value):
        self._scalar_value = scalar_value

    def scalar(self):
        return self._scalar_value


class FakeSession:
    def __init__(self, ok=True):
        self.ok = ok
        self.executed = []

    async def execute(self, stmt):
        self.executed.append(stmt)
        if self.ok:
            return FakeScalarResult(1)
        raise RuntimeError("db down")


class DummyRedisClient:
    def __init__(self, ok=True):
        self.ok = ok
        self.pings = 0

    async def ping(self):
        self.pings += 1
        return self.ok


@pytest.mark.asyncio
async def test_all_ok():
    svc = HealthService(FakeSession(ok=True), DummyRedisClient(ok=True))

    resp = await svc.get_health_status()

    assert resp.status == "healthy"
    assert resp.checks["database"]["connected"] is True
    assert resp.checks["redis"]["connected"] is True


@pytest.mark.asyncio
async def test_redis_down_is_degraded():
    resp = await HealthService(FakeSession(ok=True), DummyRedisClient(ok=False)).get_health_status()

    assert resp.status == "degraded"
    assert resp.checks["redis"]["response_time_ms"] is None


@pytest.mark.asyncio
async def test_db_down_is_unhealthy():
    resp = await HealthService(FakeSession(ok=False), DummyRedisClient(ok=True)).get_health_status()

    assert resp.status == "unhealthy"
    assert resp.checks["database"]["error"] == "db down"


@pytest.mark.asyncio
async def test_version_is_package_version():
    from labnote import __version__

    resp = await HealthService(FakeSession(), DummyRedisClient()).get_health_status()
    assert resp.version == __version__
