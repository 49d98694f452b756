"""
Shift Courier

HTTP Basic auth from SHIFT_USERNAME / SHIFT_PASSWORD.

Supports:
- Cost estimates (list of carriers, cheapest wins)
- Forward shipment booking
- Cancellation
- Tracking by order number

Labels come back in the booking response only; there is no separate label
endpoint, so get_label returns an empty URL.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from printship.core.exceptions import CourierAuthError, ShipmentError
from printship.modules.shipping.carriers.base import (
    CancelResult,
    CourierPayload,
    CourierQuote,
    ShipmentPayload,
    ShipmentResponse,
)
from printship.modules.shipping.carriers.http import (
    HTTPCourier,
    RateCandidate,
    parse_price,
)

logger = logging.getLogger(__name__)

COST_ESTIMATES_PATH = "/api/v1/open/cost-estimates"
FORWARD_PATH = "/api/v1/open/forward"
CANCEL_PATH = "/api/v1/open/forward/shipment/cancel"
TRACK_PATH = "/api/v1/open/track"

DEFAULT_DELIVERY_DAYS = 4
DEFAULT_DECLARED_VALUE = 100
DEFAULT_DIMENSION_CM = 10
SECONDS_PER_DAY = 24 * 60 * 60


def days_until(value: Any, now: Optional[datetime] = None) -> int:
    """
    Whole days (rounded up) until an ISO delivery date.

    Missing, unparseable or past dates fall back to the default estimate.
    """
    if not value:
        return DEFAULT_DELIVERY_DAYS
    try:
        eta = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return DEFAULT_DELIVERY_DAYS
    if eta.tzinfo is None:
        eta = eta.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    days = math.ceil((eta - now).total_seconds() / SECONDS_PER_DAY)
    return days if days > 0 else DEFAULT_DELIVERY_DAYS


class ShiftCourier(HTTPCourier):
    courier_id = "shift"
    courier_name = "Shift"

    def _auth(self) -> httpx.BasicAuth:
        username = self.settings.SHIFT_USERNAME
        password = self.settings.SHIFT_PASSWORD
        if not username or not password:
            raise CourierAuthError("Missing SHIFT_USERNAME or SHIFT_PASSWORD", courier_id=self.courier_id)
        return httpx.BasicAuth(username, password)

    def _url(self, path: str) -> str:
        return f"{self.settings.SHIFT_BASE_URL}{path}"

    async def _fetch_quote(self, payload: CourierPayload) -> CourierQuote:
        auth = self._auth()
        body = {
            "originPin": int(payload.origin_pincode),
            "destinationPin": int(payload.destination_pincode),
            "weightInGrams": payload.weight_grams,
            "declaredValue": DEFAULT_DECLARED_VALUE,
            "codOrder": False,
            "packageLength": DEFAULT_DIMENSION_CM,
            "packageBreadth": DEFAULT_DIMENSION_CM,
            "packageHeight": DEFAULT_DIMENSION_CM,
        }

        client = self._get_http_client()
        response = await client.post(self._url(COST_ESTIMATES_PATH), json=body, auth=auth)
        data = self._json(response)

        carriers = data.get("data")
        if not isinstance(carriers, list):
            return self.unavailable()

        now = datetime.now(timezone.utc)
        return self._quote_from_candidates(
            RateCandidate(
                price=parse_price(entry.get("totalCharges")),
                days=days_until(entry.get("estimatedDeliveryDate"), now),
                name=entry.get("carrierName") or "Shift Partner",
            )
            for entry in carriers
            if isinstance(entry, dict)
        )

    async def create_shipment(self, payload: ShipmentPayload) -> ShipmentResponse:
        body = {
            "pickup_location": _location(payload.pickup_address),
            "delivery_location": _location(payload.delivery_address),
            "shipment": {
                "payment_mode": "COD" if payload.payment_method == "cod" else "PPD",
                "total_weight": payload.weight_grams,
                "total_declared_value": payload.amount,
                "items": [
                    {"name": item.title, "quantity": item.quantity, "selling_price": item.price}
                    for item in payload.items
                ],
                "dimensions": {
                    "length": DEFAULT_DIMENSION_CM,
                    "breadth": DEFAULT_DIMENSION_CM,
                    "height": DEFAULT_DIMENSION_CM,
                },
            },
            "order_number": payload.order_id,
        }

        try:
            client = self._get_http_client()
            response = await client.post(self._url(FORWARD_PATH), json=body, auth=self._auth())
        except httpx.HTTPError as e:
            logger.error(f"[SHIFT] Shipment request failed: {e}")
            raise ShipmentError(f"Network error booking Shift shipment: {e}", details={"order_id": payload.order_id})

        if not response.is_success:
            logger.error(f"[SHIFT] Create shipment failed ({response.status_code}): {response.text[:500]}")
            raise ShipmentError(
                f"Shift API error: {response.status_code}",
                details={"order_id": payload.order_id, "status": response.status_code},
            )

        try:
            data = response.json()
        except ValueError:
            raise ShipmentError("Shift returned a non-JSON booking response")
        if not isinstance(data, dict) or not data.get("success") or not data.get("data"):
            message = data.get("responseMessage") if isinstance(data, dict) else None
            raise ShipmentError(f"Shift failed: {message or 'Unknown error'}")

        booking = data["data"]

        return ShipmentResponse(
            tracking_id=booking.get("trackingNumber"),
            courier_name=self.courier_name,
            label_url=booking.get("shippingLabelUrl"),
            estimated_delivery=booking.get("estimatedDeliveryDate"),
        )

    async def cancel_shipment(self, tracking_id: str, order_id: Optional[str] = None) -> CancelResult:
        body = {"tracking_number": tracking_id, "cancel_reason": "Order cancelled by user"}
        try:
            client = self._get_http_client()
            response = await client.post(self._url(CANCEL_PATH), json=body, auth=self._auth())
            data = response.json()
        except (httpx.HTTPError, CourierAuthError, ValueError) as e:
            logger.error(f"[SHIFT] Cancellation error: {e}")
            return CancelResult(success=False, message=str(e))

        if data.get("success"):
            return CancelResult(success=True)
        return CancelResult(success=False, message=data.get("responseMessage"))

    async def track_shipment(self, tracking_id: str) -> Optional[Dict[str, Any]]:
        try:
            client = self._get_http_client()
            response = await client.get(
                self._url(TRACK_PATH),
                params={"orderNumber": tracking_id},
                auth=self._auth(),
            )
            return self._json(response).get("data")
        except Exception as e:
            logger.error(f"[SHIFT] Tracking error: {e}")
            return None


def _location(address) -> Dict[str, Any]:
    return {
        "address": address.address,
        "pincode": address.pincode,
        "phone": address.phone,
        "name": address.name,
    }
