# tests/conftest.py
"""Shared fixtures: stub collaborators, sample leads and an in-memory database"""

import asyncio

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from leadlove import models  # noqa: F401
from leadlove.database import Base
from leadlove.schemas.enrichment import DomainCheckResult, DomainStatus, RawLead
from leadlove.services.enrichment_service import EnrichmentService
from leadlove.services.place_details import DirectoryLookup, PlaceDetailsFetcher

# Fixed "now" for freshness scoring (2023-11-14T22:13:20Z)
NOW = 1_700_000_000
DAY = 24 * 60 * 60


class StubDomainProbe:
    """Records calls; returns a fixed result or one keyed by website"""

    def __init__(self, result=None, by_website=None, delay=0.0, error=None):
        self.result = result or DomainCheckResult(found=True, status=DomainStatus.ACTIVE)
        self.by_website = by_website or {}
        self.delay = delay
        self.error = error
        self.calls = []
        self.events = []
        self.active = 0
        self.max_active = 0

    async def check_domain(self, website):
        self.calls.append(website)
        self.events.append(("start", website))
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            delay = self.delay(website) if callable(self.delay) else self.delay
            if delay:
                await asyncio.sleep(delay)
            if self.error and website in self.error:
                raise self.error[website]
            return self.by_website.get(website, self.result)
        finally:
            self.active -= 1
            self.events.append(("end", website))


class FakeDirectory(DirectoryLookup):
    """In-memory DirectoryLookup; values that are exceptions are raised"""

    def __init__(self, places=None):
        self.places = places or {}
        self.calls = []

    async def lookup(self, place_id):
        self.calls.append(place_id)
        place = self.places.get(place_id)
        if isinstance(place, Exception):
            raise place
        return place


def make_place(rating=4.5, total=40, overview="Family dental clinic", types=("dentist",), reviews=None):
    return {
        "rating": rating,
        "user_ratings_total": total,
        "editorial_summary": {"overview": overview} if overview is not None else None,
        "types": list(types),
        "reviews": reviews if reviews is not None else [{"time": NOW - 5 * DAY}],
    }


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def probe_factory():
    return StubDomainProbe


@pytest.fixture
def directory_factory():
    return FakeDirectory


@pytest.fixture
def place_factory():
    return make_place


@pytest.fixture
def stub_probe():
    return StubDomainProbe()


@pytest.fixture
def fake_directory():
    return FakeDirectory()


@pytest.fixture
def make_service(stub_probe, fake_directory):
    """Factory for an EnrichmentService wired to the stubs"""
    def _make(probe=None, directory=None, max_concurrent=5):
        return EnrichmentService(
            domain_probe=probe or stub_probe,
            place_fetcher=PlaceDetailsFetcher(directory or fake_directory, clock=lambda: NOW),
            max_concurrent=max_concurrent
        )
    return _make


@pytest.fixture
def sample_raw_lead():
    return RawLead(
        business_name="Downtown Dental Care",
        address="12 Main St, Springfield",
        phone="+1 555 0100",
        email="hello@downtowndental.example",
        website="https://downtowndental.example",
        place_id="place-1",
        latitude=39.78,
        longitude=-89.65
    )


@pytest_asyncio.fixture
async def db_session():
    """Async session on a fresh in-memory SQLite database"""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    Session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session

    await engine.dispose()


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: unit tests")
    config.addinivalue_line("markers", "integration: integration tests")
