"""Tests for the Redis-backed VIN analysis cache."""

import pytest

from carintel.config import Settings
from carintel.schemas.analysis import (
    AnalysisMeta,
    HistorySection,
    MaintenanceEvent,
    Recall,
    SafetySection,
    VehicleSpecs,
    Verdict,
    VinAnalysis,
)
from carintel.services.cache import AnalysisCache, build_cache

VIN = "1HGCM82633A004352"


def _analysis(vin=VIN):
    return VinAnalysis(
        meta=AnalysisMeta(vin=vin, timestamp=1718000000000),
        specs=VehicleSpecs(year="2003", make="Honda", model="Accord", trim="EX-V6"),
        safety=SafetySection(
            recalls=[
                Recall(
                    recall_id="19V182000",
                    affected_component="SERVICE BRAKES",
                    description="Brakes may fail",
                    remedy_action="Replace",
                    is_critical=True,
                )
            ]
        ),
        history=HistorySection(maintenance=[MaintenanceEvent(date="03/14/2019", mileage=24310, description="Oil")]),
        verdict=Verdict(score=95, alerts=["1 Open Recalls"], recommendation="GREAT"),
    )


@pytest.mark.asyncio
async def test_round_trip(fake_redis):
    cache = AnalysisCache(fake_redis)
    analysis = _analysis()

    await cache.put(VIN, analysis)
    cached = await cache.get(VIN)

    assert cached == analysis
    assert cached.model_dump() == analysis.model_dump()


@pytest.mark.asyncio
async def test_miss_returns_none(fake_redis):
    assert await AnalysisCache(fake_redis).get(VIN) is None


@pytest.mark.asyncio
async def test_key_is_uppercased_vin_with_fixed_ttl(fake_redis):
    cache = AnalysisCache(fake_redis)

    await cache.put(VIN.lower(), _analysis())

    assert list(fake_redis.store) == [VIN]
    assert fake_redis.expiry[VIN] == 604800
    assert await cache.get(VIN.lower()) is not None


@pytest.mark.asyncio
async def test_put_replaces(fake_redis):
    cache = AnalysisCache(fake_redis)
    await cache.put(VIN, _analysis())

    replacement = _analysis().model_copy(update={"verdict": Verdict(score=40, recommendation="CAUTION")})
    await cache.put(VIN, replacement)

    assert (await cache.get(VIN)).verdict.score == 40


@pytest.mark.asyncio
async def test_unreachable_store_degrades(broken_redis):
    cache = AnalysisCache(broken_redis)

    await cache.put(VIN, _analysis())
    assert await cache.get(VIN) is None
    assert await cache.get_many([VIN]) == []


@pytest.mark.asyncio
async def test_corrupt_entry_is_a_miss(fake_redis):
    fake_redis.store[VIN] = "{not json"
    assert await AnalysisCache(fake_redis).get(VIN) is None


@pytest.mark.asyncio
async def test_get_many(fake_redis):
    other = "19XFB2F59CE123456"
    cache = AnalysisCache(fake_redis)
    await cache.put(VIN, _analysis())
    await cache.put(other, _analysis(other))

    reports = await cache.get_many([other, "4S4BSAFC5K3212345", VIN])

    assert [r.meta.vin for r in reports] == [other, VIN]


def test_build_cache_without_url():
    assert build_cache(Settings(redis_url=None)) is None
    assert build_cache(Settings(redis_url="")) is None


def test_build_cache_with_url():
    cache = build_cache(Settings(redis_url="redis://localhost:6379/0", vin_cache_ttl_seconds=60))
    assert isinstance(cache, AnalysisCache)
    assert cache.ttl_seconds == 60


@pytest.mark.parametrize("url", ["localhost:6379", "http://localhost:6379/0"])
def test_build_cache_with_malformed_url(url):
    assert build_cache(Settings(redis_url=url)) is None
