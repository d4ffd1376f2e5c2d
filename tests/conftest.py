# tests/conftest.py
import os
from collections.abc import Generator
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

# Must be set before the app (and its rate limiter) is imported
os.environ.setdefault("RATE_LIMIT_REQUESTS", "10000")
os.environ.setdefault("AWS_REGION", "us-east-1")

import ec2offering.api.dependencies as _deps  # noqa: E402
from ec2offering.domain.models import FilterQuery, Offering  # noqa: E402
from ec2offering.domain.ports import (  # noqa: E402
    OnDemandOfferingsPort,
    ReservedOfferingsPage,
    ReservedOfferingsPort,
    UpstreamFetchError,
)
from ec2offering.main import app  # noqa: E402


class FakeOnDemandSource(OnDemandOfferingsPort):
    def __init__(self, offerings: list[Offering] | None = None, error: bool = False) -> None:
        self.offerings = offerings or []
        self.error = error
        self.calls = 0

    async def fetch_all(self) -> list[Offering]:
        self.calls += 1
        if self.error:
            raise UpstreamFetchError(self.source_name, "document unavailable")
        return list(self.offerings)


class FakeReservedSource(ReservedOfferingsPort):
    """Serves ``pages`` in order; each page is keyed by the token that requests it."""

    def __init__(
        self,
        offerings: list[Offering] | None = None,
        pages: dict[str | None, ReservedOfferingsPage] | None = None,
        fail_for: set[str] | None = None,
    ) -> None:
        self.offerings = offerings or []
        self.pages_by_token = pages
        self.fail_for = fail_for or set()
        self.queries: list[FilterQuery] = []
        self.tokens: list[str | None] = []

    async def fetch_page(
        self, query: FilterQuery, next_token: str | None = None
    ) -> ReservedOfferingsPage:
        self.queries.append(query)
        self.tokens.append(next_token)
        if query.instance_type in self.fail_for:
            raise UpstreamFetchError(self.source_name, "throttled")
        if self.pages_by_token is not None:
            return self.pages_by_token[next_token]
        matching = [o for o in self.offerings if o.instance_type == query.instance_type]
        return ReservedOfferingsPage(offerings=matching)


def make_offering(instance_type: str = "t1.micro", **overrides: object) -> Offering:
    values: dict[str, object] = {
        "availability_zone": "us-east-1a",
        "offering_type": "Heavy Utilization",
        "instance_type": instance_type,
        "product_description": "Linux/UNIX",
        "currency_code": "USD",
        "duration": 31536000,
        "fixed_price": Decimal("169.0"),
        "hourly_price": Decimal("0.014"),
    }
    values.update(overrides)
    return Offering(**values)


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    # Fresh cache singleton per test so results never bleed over
    _deps._offering_cache = None
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()
        _deps._offering_cache = None
        _deps.get_http_client.cache_clear()
