"""Health service implementation."""

import time
from datetime import datetime, timezone
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from ... import __version__
from ..redis_client import RedisClient, get_redis_client
from ..schemas.common import HealthCheckResponse
from .interfaces import IHealthService


class HealthService(IHealthService):
    """Health check service implementation."""

    def __init__(self, session: AsyncSession, redis_client: RedisClient = None):
        self.session = session
        self.redis_client = redis_client or get_redis_client()

    async def get_health_status(self) -> HealthCheckResponse:
        """Get app health status."""
        db_health = await self.check_database_health()
        redis_health = await self.check_redis_health()

        overall_status = "healthy"
        if not db_health["connected"]:
            overall_status = "unhealthy"
        elif not redis_health["connected"]:
            # only federated login needs redis
            overall_status = "degraded"

        return HealthCheckResponse(
            status=overall_status,
            timestamp=datetime.now(timezone.utc),
            version=__version__,
            checks={"database": db_health, "redis": redis_health},
        )

    async def check_database_health(self) -> Dict[str, Any]:
        """Check DB connection."""
        start = time.perf_counter()
        try:
            result = await self.session.execute(text("SELECT 1"))
            result.scalar()
        except Exception as e:
            return {
                "connected": False,
                "status": "unhealthy",
                "error": str(e),
                "response_time_ms": None,
            }
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }

    async def check_redis_health(self) -> Dict[str, Any]:
        """Check Redis connection."""
        start = time.perf_counter()
        if not await self.redis_client.ping():
            return {"connected": False, "status": "unhealthy", "response_time_ms": None}
        return {
            "connected": True,
            "status": "healthy",
            "response_time_ms": round((time.perf_counter() - start) * 1000, 2),
        }
