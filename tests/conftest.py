"""
Pytest configuration and fixtures for PrintShip tests.
"""
import asyncio
import os
from typing import Callable, List, Optional

import httpx
import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from printship.core.config import Settings  # noqa: E402
from printship.modules.shipping.carriers.base import (  # noqa: E402
    BaseCourier,
    CourierPayload,
    CourierQuote,
)
from printship.modules.shipping.catalog import CourierConfig, StoreConfig  # noqa: E402
from printship.modules.shipping.token_cache import TokenCache  # noqa: E402


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class StubCourier(BaseCourier):
    """
    Scriptable courier for aggregation tests.

    `quote_fn(payload)` returns a CourierQuote; it may raise or sleep.
    Every payload received is recorded in `calls`.
    """

    def __init__(
        self,
        courier_id: str,
        quote_fn: Optional[Callable[[CourierPayload], CourierQuote]] = None,
        price: int = 100,
        delivery_days: int = 3,
        delay: float = 0.0,
        enabled: bool = True,
    ):
        super().__init__(enabled_couriers=lambda: [CourierConfig(courier_id, courier_id, True)] if enabled else [])
        self.courier_id = courier_id
        self.courier_name = courier_id.title()
        self.quote_fn = quote_fn
        self.price = price
        self.delivery_days = delivery_days
        self.delay = delay
        self.calls: List[CourierPayload] = []

    async def get_quote(self, payload: CourierPayload) -> CourierQuote:
        self.calls.append(payload)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.quote_fn is not None:
            return self.quote_fn(payload)
        return CourierQuote(self.courier_id, self.courier_name, self.price, self.delivery_days)


@pytest.fixture
def courier_settings() -> Settings:
    """Settings with every live courier configured against fake hosts."""
    return Settings(
        SHIPYAARI_BASE_URL="https://shipyaari.test",
        SHIPYAARI_AUTH_TOKEN="yaari-token",
        SHIPWAY_BASE_URL="https://shipway.test",
        SHIPWAY_EMAIL="ops@printship.test",
        SHIPWAY_LICENSE_KEY="license",
        SHIFT_BASE_URL="https://shift.test",
        SHIFT_USERNAME="shift-user",
        SHIFT_PASSWORD="shift-pass",
        SHIPMOZO_BASE_URL="https://shipmozo.test/api/v1",
        SHIPMOZO_PUBLIC_KEY="public",
        SHIPMOZO_PRIVATE_KEY="private",
        EKART_BASE_URL="https://ekart.test",
        EKART_CLIENT_ID="client-1",
        EKART_USERNAME="ekart-user",
        EKART_PASSWORD="ekart-pass",
    )


@pytest.fixture
def empty_settings() -> Settings:
    """Settings with no courier credentials at all."""
    return Settings(
        SHIPYAARI_AUTH_TOKEN="",
        SHIPWAY_EMAIL="",
        SHIPWAY_LICENSE_KEY="",
        SHIFT_USERNAME="",
        SHIFT_PASSWORD="",
        SHIPMOZO_PUBLIC_KEY="",
        SHIPMOZO_PRIVATE_KEY="",
        EKART_CLIENT_ID="",
        EKART_USERNAME="",
        EKART_PASSWORD="",
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_cache(fake_clock) -> TokenCache:
    return TokenCache(safety_margin_seconds=3600, clock=fake_clock)


@pytest.fixture
def mock_http():
    """Factory: handler function -> httpx.AsyncClient over MockTransport."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


@pytest.fixture
def two_stores() -> List[StoreConfig]:
    return [
        StoreConfig(id="store-a", name="Store A", pincode="560001"),
        StoreConfig(id="store-b", name="Store B", pincode="110001"),
    ]


@pytest.fixture
def stub_courier():
    """The StubCourier class, for building scripted adapters."""
    return StubCourier
