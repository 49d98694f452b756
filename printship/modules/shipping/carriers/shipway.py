"""
Shipway Courier

HTTP Basic auth (email:license key). The rate card lists partner couriers;
Shipway gives no transit estimate, so delivery days are fixed.
"""
import logging

import httpx

from printship.core.exceptions import CourierAuthError
from printship.modules.shipping.carriers.base import CourierPayload, CourierQuote
from printship.modules.shipping.carriers.http import HTTPCourier, RateCandidate, parse_price

logger = logging.getLogger(__name__)

RATES_PATH = "/api/getshipwaycarrierrates"
DEFAULT_DELIVERY_DAYS = 4
# Parcel dimensions in cm
DEFAULT_DIMENSION_CM = "10"


class ShipwayCourier(HTTPCourier):
    courier_id = "shipway"
    courier_name = "Shipway"

    def _auth(self) -> httpx.BasicAuth:
        email = self.settings.SHIPWAY_EMAIL
        license_key = self.settings.SHIPWAY_LICENSE_KEY
        if not email or not license_key:
            raise CourierAuthError(
                "Missing SHIPWAY_EMAIL or SHIPWAY_LICENSE_KEY",
                courier_id=self.courier_id,
            )
        return httpx.BasicAuth(email, license_key)

    async def _fetch_quote(self, payload: CourierPayload) -> CourierQuote:
        auth = self._auth()
        params = {
            "fromPincode": payload.origin_pincode,
            "toPincode": payload.destination_pincode,
            "paymentType": "prepaid",
            "weight": str(payload.weight_grams / 1000),
            "length": DEFAULT_DIMENSION_CM,
            "breadth": DEFAULT_DIMENSION_CM,
            "height": DEFAULT_DIMENSION_CM,
            "shipment type": "1",
        }

        client = self._get_http_client()
        response = await client.get(
            f"{self.settings.SHIPWAY_BASE_URL}{RATES_PATH}",
            params=params,
            auth=auth,
        )
        data = self._json(response)

        rate_card = data.get("rate_card")
        if data.get("success") != "success" or not isinstance(rate_card, list):
            return self.unavailable()

        return self._quote_from_candidates(
            RateCandidate(
                price=parse_price(entry.get("delivery_charge")),
                days=DEFAULT_DELIVERY_DAYS,
                name=entry.get("courier_name") or "Shipway Partner",
            )
            for entry in rate_card
            if isinstance(entry, dict)
        )
