"""
Shared fixtures for CarIntel backend tests.
"""
import os
import sys

import pytest
import redis.exceptions

# Ensure the backend package is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Force env vars so Settings never picks up a real Redis or browser
os.environ["REDIS_URL"] = ""
os.environ.setdefault("BROWSER_PROFILE", "local")


@pytest.fixture
def vpic_payload():
    """Sample NHTSA vPIC DecodeVin payload (Variable/Value pairs)."""
    return {
        "Count": 10,
        "Message": "Results returned successfully",
        "Results": [
            {"Variable": "Model Year", "Value": "2003"},
            {"Variable": "Make", "Value": "HONDA"},
            {"Variable": "Manufacturer Name", "Value": "AMERICAN HONDA MOTOR CO., INC."},
            {"Variable": "Model", "Value": "Accord"},
            {"Variable": "Trim", "Value": "EX-V6"},
            {"Variable": "Engine Model", "Value": "J30A4"},
            {"Variable": "Displacement (L)", "Value": "3.0"},
            {"Variable": "Fuel Type - Primary", "Value": "Gasoline"},
            {"Variable": "Number of Seats", "Value": ""},
            {"Variable": "Body Class", "Value": "Coupe"},
            {"Variable": "Plant City", "Value": None},
        ],
    }


@pytest.fixture
def recalls_payload():
    """Sample NHTSA recallsByVehicle payload."""
    return {
        "Count": 3,
        "results": [
            {
                "NHTSACampaignNumber": "19V182000",
                "Component": "SERVICE BRAKES, HYDRAULIC",
                "Summary": "The rear BRAKES may lose pressure over time.",
                "Remedy": "Dealers will replace the master cylinder, free of charge.",
                "Notes": "",
            },
            {
                "NHTSACampaignNumber": "20V001000",
                "Component": "EXTERIOR LIGHTING",
                "Summary": "Paint peeling on the tail lamp housing.",
                "Remedy": "Dealers will replace the housing.",
                "Notes": "",
            },
            {
                "NHTSACampaignNumber": "21V999000",
                "Component": "UNKNOWN",
                "Summary": "Unresolved component.",
                "Remedy": "",
            },
        ],
    }


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis."""

    def __init__(self):
        self.store = {}
        self.expiry = {}

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        self.store[key] = value
        self.expiry[key] = ex

    async def mget(self, keys):
        return [self.store.get(k) for k in keys]

    async def aclose(self):
        pass


class BrokenRedis:
    """Redis client whose server is unreachable."""

    async def get(self, key):
        raise redis.exceptions.ConnectionError("Connection refused")

    async def set(self, key, value, ex=None):
        raise redis.exceptions.ConnectionError("Connection refused")

    async def mget(self, keys):
        raise redis.exceptions.ConnectionError("Connection refused")

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def broken_redis():
    return BrokenRedis()
