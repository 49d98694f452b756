"""
Ekart Courier (Elite Ekart Logistics API)

One class, two registered service tiers (SURFACE, EXPRESS) with distinct
ids. Auth is a bearer token from a username/password login; tokens are
valid 24h and are kept in the shared TokenCache, so every Ekart instance
in the process reuses one token until it expires.

A 400/404 from the pricing endpoint means the route is not serviceable.
"""
import logging
from typing import List, Optional

import httpx

from printship.core.config import Settings
from printship.core.exceptions import CourierAuthError
from printship.modules.shipping.carriers.base import (
    CourierPayload,
    CourierQuote,
    EnabledCouriersProvider,
)
from printship.modules.shipping.carriers.http import HTTPCourier, parse_price
from printship.modules.shipping.token_cache import TokenCache, default_token_cache

logger = logging.getLogger(__name__)

TOKEN_PROVIDER = "ekart"
AUTH_PATH = "/integrations/v2/auth/token/{client_id}"
PRICING_PATH = "/data/pricing/estimate"

SURFACE = "SURFACE"
EXPRESS = "EXPRESS"
DELIVERY_DAYS = {SURFACE: 4, EXPRESS: 2}

DEFAULT_INVOICE_AMOUNT = 100
DEFAULT_DIMENSION_CM = 10


class EkartCourier(HTTPCourier):

    not_serviceable_statuses = (400, 404)

    def __init__(
        self,
        service_type: str = SURFACE,
        token_cache: Optional[TokenCache] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        settings: Optional[Settings] = None,
        enabled_couriers: Optional[EnabledCouriersProvider] = None,
    ):
        super().__init__(http_client=http_client, settings=settings, enabled_couriers=enabled_couriers)
        if service_type not in DELIVERY_DAYS:
            raise ValueError(f"Unknown Ekart service type: {service_type}")
        self.service_type = service_type
        self.courier_id = f"ekart_{service_type.lower()}"
        self.courier_name = f"Ekart {service_type.capitalize()}"
        self.token_cache = token_cache if token_cache is not None else default_token_cache

    def enabled_aliases(self) -> List[str]:
        # The umbrella "ekart" id switches on both tiers
        return [self.courier_id, TOKEN_PROVIDER]

    async def _get_token(self) -> str:
        """Return a cached token or log in for a new one."""
        token = self.token_cache.get(TOKEN_PROVIDER)
        if token:
            return token

        client_id = self.settings.EKART_CLIENT_ID
        username = self.settings.EKART_USERNAME
        password = self.settings.EKART_PASSWORD
        if not client_id or not username or not password:
            raise CourierAuthError("Missing Ekart credentials", courier_id=self.courier_id)

        client = self._get_http_client()
        response = await client.post(
            f"{self.settings.EKART_BASE_URL}{AUTH_PATH.format(client_id=client_id)}",
            json={"username": username, "password": password},
        )
        if not response.is_success:
            raise CourierAuthError(
                f"Ekart auth failed: {response.status_code}",
                courier_id=self.courier_id,
                details={"status": response.status_code},
            )

        data = response.json()
        token = data.get("access_token") if isinstance(data, dict) else None
        if not token:
            raise CourierAuthError("No access_token in Ekart auth response", courier_id=self.courier_id)

        self.token_cache.store(TOKEN_PROVIDER, token, ttl_seconds=self.settings.EKART_TOKEN_TTL_SECONDS)
        return token

    async def _fetch_quote(self, payload: CourierPayload) -> CourierQuote:
        token = await self._get_token()

        body = {
            "pickupPincode": int(payload.origin_pincode),
            "dropPincode": int(payload.destination_pincode),
            "invoiceAmount": DEFAULT_INVOICE_AMOUNT,
            "weight": payload.weight_grams,
            "length": DEFAULT_DIMENSION_CM,
            "height": DEFAULT_DIMENSION_CM,
            "width": DEFAULT_DIMENSION_CM,
            "serviceType": self.service_type,
            "shippingDirection": "FORWARD",
            "codAmount": 0,
            "packages": [
                {
                    "length": DEFAULT_DIMENSION_CM,
                    "width": DEFAULT_DIMENSION_CM,
                    "height": DEFAULT_DIMENSION_CM,
                    "weight": payload.weight_grams,
                }
            ],
        }

        client = self._get_http_client()
        response = await client.post(
            f"{self.settings.EKART_BASE_URL}{PRICING_PATH}",
            json=body,
            headers={"Authorization": f"Bearer {token}"},
        )
        data = self._json(response)

        total = parse_price(data.get("total"))
        if total is None or total <= 0:
            return self.unavailable()
        return self._quote(total, DELIVERY_DAYS[self.service_type])
