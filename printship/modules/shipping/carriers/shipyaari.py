"""
Shipyaari Courier (Blaze V2 API)

Aggregator: the serviceability call returns a list of partner couriers.
We surface the cheapest partner with a positive price.
"""
import logging
import re
import secrets
from datetime import datetime, timedelta, timezone

from printship.core.exceptions import CourierAuthError
from printship.modules.shipping.carriers.base import (
    CourierPayload,
    CourierQuote,
    ShipmentPayload,
    ShipmentResponse,
)
from printship.modules.shipping.carriers.http import (
    HTTPCourier,
    RateCandidate,
    first_present,
    parse_price,
)

logger = logging.getLogger(__name__)

SERVICEABILITY_PATH = "/api/v1/order/checkServiceabilityV2"
DEFAULT_DELIVERY_DAYS = 4
DEFAULT_INVOICE_VALUE = 10
LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class ShipyaariCourier(HTTPCourier):
    courier_id = "shipyaari"
    courier_name = "Shipyaari"

    async def _fetch_quote(self, payload: CourierPayload) -> CourierQuote:
        token = self.settings.SHIPYAARI_AUTH_TOKEN
        if not token:
            raise CourierAuthError("SHIPYAARI_AUTH_TOKEN is not configured", courier_id=self.courier_id)

        body = {
            "pickupPincode": int(payload.origin_pincode),
            "deliveryPincode": int(payload.destination_pincode),
            "invoiceValue": DEFAULT_INVOICE_VALUE,
            "paymentMode": "PREPAID",
            "weight": payload.weight_grams / 1000,
            "orderType": "B2C",
            "dimension": {"length": 1, "width": 1, "height": 1},
        }

        client = self._get_http_client()
        response = await client.post(
            f"{self.settings.SHIPYAARI_BASE_URL}{SERVICEABILITY_PATH}",
            json=body,
            headers={"Authorization": token},
        )
        data = self._json(response)

        partners = data.get("data")
        if not data.get("success") or not isinstance(partners, list):
            return self.unavailable()

        return self._quote_from_candidates(
            RateCandidate(
                price=parse_price(first_present(entry, "total_amount", "expected_price")),
                days=_parse_days(first_present(entry, "estimated_delivery_days", "etd")),
                name=entry.get("courier_name") or "Shipyaari Partner",
            )
            for entry in partners
            if isinstance(entry, dict)
        )

    async def create_shipment(self, payload: ShipmentPayload) -> ShipmentResponse:
        # Booking is not wired to Shipyaari yet; issue a local reference
        tracking_id = f"SHIPYAARI{secrets.randbelow(900000) + 100000}"
        eta = datetime.now(timezone.utc) + timedelta(days=5)
        logger.info(f"[SHIPYAARI] Simulated shipment {tracking_id} for order {payload.order_id}")
        return ShipmentResponse(
            tracking_id=tracking_id,
            courier_name=self.courier_name,
            label_url=f"https://shipyaari.com/label/{tracking_id}.pdf",
            estimated_delivery=eta.isoformat(),
        )


def _parse_days(value) -> int:
    """Leading integer of the provider's ETA ("3-5", "3 days", "2.5" -> 3, 3, 2)."""
    if value is None:
        return DEFAULT_DELIVERY_DAYS
    match = LEADING_INT.match(str(value))
    return int(match.group(1)) if match else DEFAULT_DELIVERY_DAYS
