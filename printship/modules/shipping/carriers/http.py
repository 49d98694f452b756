"""
Generic HTTP Courier

Shared plumbing for every live courier integration:
- one httpx.AsyncClient (injected, or created lazily)
- get_quote wraps the provider-specific _fetch_quote in the never-raise
  boundary, so subclasses can just raise on anything unexpected
- response classification: "not serviceable" statuses become an
  unavailable quote quietly, other non-2xx statuses are logged errors
- normalization of rate-card style responses that list several
  sub-carriers (cheapest positive price wins)
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Dict, Iterable, Optional, Tuple

import httpx

from printship.core.config import Settings, settings as default_settings
from printship.core.exceptions import CourierResponseError
from printship.modules.shipping.carriers.base import (
    BaseCourier,
    CourierPayload,
    CourierQuote,
    EnabledCouriersProvider,
)

logger = logging.getLogger(__name__)


class NotServiceable(Exception):
    """Provider answered cleanly that it does not cover the route."""


@dataclass(frozen=True)
class RateCandidate:
    """One sub-carrier entry from a rate card."""
    price: float
    days: int
    name: str


def parse_price(value: Any) -> Optional[float]:
    """Parse a provider price field; None for missing/unparseable."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(Decimal(str(value)))
    except (InvalidOperation, ValueError):
        return None


def round_price(value: float) -> int:
    """Round half up to whole rupees."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def first_present(entry: Dict[str, Any], *keys: str) -> Any:
    """First truthy value among keys, mirroring provider field fallbacks."""
    for key in keys:
        value = entry.get(key)
        if value:
            return value
    return None


def cheapest_candidate(candidates: Iterable[RateCandidate]) -> Optional[RateCandidate]:
    """
    Pick the cheapest candidate with a positive price.

    Non-positive and unparseable prices are filtered out before the minimum
    is taken. Ties keep the first entry in provider order.
    """
    best: Optional[RateCandidate] = None
    for candidate in candidates:
        if candidate.price is None or candidate.price <= 0:
            continue
        if best is None or candidate.price < best.price:
            best = candidate
    return best


class HTTPCourier(BaseCourier):
    """
    Base class for couriers backed by a live HTTP API.

    Subclasses implement _fetch_quote and may raise freely from it.
    """

    # Statuses that mean "route not covered" rather than "something broke"
    not_serviceable_statuses: Tuple[int, ...] = ()

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        enabled_couriers: Optional[EnabledCouriersProvider] = None,
    ):
        super().__init__(enabled_couriers)
        self.settings = settings or default_settings
        self._http_client = http_client
        self._owns_client = http_client is None

    def _get_http_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self.settings.HTTP_TIMEOUT_SECONDS)
        return self._http_client

    async def close(self):
        """Close the HTTP client if this adapter created it."""
        if self._http_client and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None

    async def get_quote(self, payload: CourierPayload) -> CourierQuote:
        try:
            return await self._fetch_quote(payload)
        except NotServiceable as e:
            logger.debug(
                f"[{self.courier_id.upper()}] Not serviceable "
                f"{payload.origin_pincode} -> {payload.destination_pincode}: {e}"
            )
        except Exception as e:
            logger.error(
                f"[{self.courier_id.upper()}] Quote failed "
                f"{payload.origin_pincode} -> {payload.destination_pincode}: "
                f"{type(e).__name__}: {e}"
            )
        return self.unavailable()

    async def _fetch_quote(self, payload: CourierPayload) -> CourierQuote:
        raise NotImplementedError

    def _check_response(self, response: httpx.Response) -> None:
        """Raise NotServiceable or CourierResponseError for non-2xx responses."""
        if response.is_success:
            return
        if response.status_code in self.not_serviceable_statuses:
            raise NotServiceable(f"HTTP {response.status_code}")
        raise CourierResponseError(
            f"{self.courier_name} API responded with status {response.status_code}",
            courier_id=self.courier_id,
            details={"status": response.status_code, "body": response.text[:500]},
        )

    def _json(self, response: httpx.Response) -> Dict[str, Any]:
        self._check_response(response)
        try:
            data = response.json()
        except ValueError:
            raise CourierResponseError(
                f"{self.courier_name} returned a non-JSON body",
                courier_id=self.courier_id,
                details={"body": response.text[:500]},
            )
        if not isinstance(data, dict):
            raise CourierResponseError(
                f"{self.courier_name} returned an unexpected body",
                courier_id=self.courier_id,
            )
        return data

    def _quote(self, price: float, days: int, sub_carrier: Optional[str] = None) -> CourierQuote:
        name = f"{self.courier_name} ({sub_carrier})" if sub_carrier else self.courier_name
        return CourierQuote(
            courier_id=self.courier_id,
            courier_name=name,
            price=round_price(price),
            delivery_days=days,
            available=True,
        )

    def _quote_from_candidates(self, candidates: Iterable[RateCandidate]) -> CourierQuote:
        best = cheapest_candidate(candidates)
        if best is None:
            return self.unavailable()
        return self._quote(best.price, best.days, best.name)
