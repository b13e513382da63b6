"""
Redis-backed cache of VIN analyses.

Key: upper-cased VIN. Value: VinAnalysis JSON. Every write sets the fixed
TTL and fully replaces the previous entry. The cache is optional: when no
Redis URL is configured build_cache() returns None and analyses run
uncached; when Redis is configured but unreachable, reads miss and writes
are dropped.
"""

import logging

import redis.asyncio as redis

from carintel.config import Settings
from carintel.schemas.analysis import VinAnalysis

logger = logging.getLogger(__name__)


class AnalysisCache:
    """VIN -> VinAnalysis store with a fixed expiry."""

    def __init__(self, client: redis.Redis, ttl_seconds: int = 604800):
        self.client = client
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def key(vin: str) -> str:
        return vin.upper().strip()

    async def get(self, vin: str) -> VinAnalysis | None:
        """Cached analysis for vin, or None on a miss or store error."""
        try:
            cached = await self.client.get(self.key(vin))
            if cached:
                logger.info(f"Cache hit for {self.key(vin)}")
                return VinAnalysis.model_validate_json(cached)
        except Exception as e:
            logger.warning(f"Redis cache read error: {e}")
        return None

    async def put(self, vin: str, analysis: VinAnalysis) -> None:
        """Store analysis under vin, replacing any previous entry."""
        try:
            await self.client.set(self.key(vin), analysis.model_dump_json(), ex=self.ttl_seconds)
        except Exception as e:
            logger.warning(f"Redis cache write error: {e}")

    async def get_many(self, vins: list[str]) -> list[VinAnalysis]:
        """Cached analyses for the VINs that have one, in request order."""
        if not vins:
            return []
        try:
            values = await self.client.mget([self.key(vin) for vin in vins])
        except Exception as e:
            logger.warning(f"Redis cache read error: {e}")
            return []

        reports = []
        for value in values:
            if not value:
                continue
            try:
                reports.append(VinAnalysis.model_validate_json(value))
            except ValueError as e:
                logger.warning(f"Skipping unreadable cached analysis: {e}")
        return reports

    async def close(self) -> None:
        await self.client.aclose()


def build_cache(settings: Settings) -> AnalysisCache | None:
    """Return a cache for the configured Redis URL, or None when unset or malformed."""
    if not settings.redis_url:
        logger.warning("REDIS_URL not configured, VIN analysis caching disabled")
        return None
    try:
        client = redis.Redis.from_url(settings.redis_url, decode_responses=True)
    except ValueError as e:
        logger.warning(f"Invalid REDIS_URL, VIN analysis caching disabled: {e}")
        return None
    return AnalysisCache(client, ttl_seconds=settings.vin_cache_ttl_seconds)
