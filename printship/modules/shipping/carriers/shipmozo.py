"""
Shipmozo Courier

Static key pair in `public-key` / `private-key` headers. The rate calculator
returns a single rate (at `data.rate` or top-level `rate`); Shipmozo gives
no transit estimate so delivery days are fixed.
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Optional

from printship.core.exceptions import CourierAuthError, ShipmentError
from printship.modules.shipping.carriers.base import (
    CancelResult,
    CourierPayload,
    CourierQuote,
    LabelResult,
    ShipmentPayload,
    ShipmentResponse,
)
from printship.modules.shipping.carriers.http import HTTPCourier, parse_price

logger = logging.getLogger(__name__)

RATE_CALCULATOR_PATH = "/rate-calculator"
PUSH_ORDER_PATH = "/push-order"
CANCEL_ORDER_PATH = "/cancel-order"
LABEL_PATH = "/get-order-label/{awb}"
TRACK_PATH = "/track-order"

DEFAULT_DELIVERY_DAYS = 3
PLACEHOLDER_EMAIL = "customer@example.com"


class ShipmozoCourier(HTTPCourier):
    courier_id = "shipmozo"
    courier_name = "Shipmozo"

    def _headers(self) -> Dict[str, str]:
        public_key = self.settings.SHIPMOZO_PUBLIC_KEY
        private_key = self.settings.SHIPMOZO_PRIVATE_KEY
        if not public_key or not private_key:
            raise CourierAuthError(
                "Missing SHIPMOZO_PUBLIC_KEY or SHIPMOZO_PRIVATE_KEY",
                courier_id=self.courier_id,
            )
        return {"public-key": public_key, "private-key": private_key}

    def _url(self, path: str) -> str:
        return f"{self.settings.SHIPMOZO_BASE_URL}{path}"

    async def _fetch_quote(self, payload: CourierPayload) -> CourierQuote:
        body = {
            "pickup_pincode": payload.origin_pincode,
            "delivery_pincode": payload.destination_pincode,
            "weight": _format_weight(payload.weight_grams),
            "payment_type": "PREPAID",
            "shipment_type": "FORWARD",
        }

        client = self._get_http_client()
        response = await client.post(self._url(RATE_CALCULATOR_PATH), json=body, headers=self._headers())
        data = self._json(response)

        nested = data.get("data") if isinstance(data.get("data"), dict) else {}
        price = parse_price(nested.get("rate") or data.get("rate"))
        if price is None or price <= 0:
            return self.unavailable()
        return self._quote(price, DEFAULT_DELIVERY_DAYS)

    async def create_shipment(self, payload: ShipmentPayload) -> ShipmentResponse:
        body = {
            "order_id": payload.order_id,
            "order_date": date.today().isoformat(),
            "consignee_name": payload.delivery_address.name,
            "consignee_phone": payload.delivery_address.phone,
            "consignee_email": PLACEHOLDER_EMAIL,
            "consignee_address_line_one": payload.delivery_address.address,
            "consignee_pin_code": payload.delivery_address.pincode,
            "consignee_city": "Unknown",
            "consignee_state": "Unknown",
            "payment_type": payload.payment_method.upper(),
            "weight": _format_weight(payload.weight_grams),
            "product_detail": [
                {
                    "name": item.title,
                    "sku_number": item.title[:5],
                    "quantity": item.quantity,
                    "unit_price": item.price,
                }
                for item in payload.items
            ],
        }

        try:
            client = self._get_http_client()
            response = await client.post(self._url(PUSH_ORDER_PATH), json=body, headers=self._headers())
            data = self._json(response)
        except Exception as e:
            logger.error(f"[SHIPMOZO] createShipment error: {e}")
            raise ShipmentError("Failed to create Shipmozo shipment", details={"order_id": payload.order_id}) from e

        booking = data.get("data") if isinstance(data.get("data"), dict) else {}
        tracking_id = booking.get("refrence_id") or booking.get("order_id") or payload.order_id
        eta = datetime.now(timezone.utc) + timedelta(days=DEFAULT_DELIVERY_DAYS)
        return ShipmentResponse(
            tracking_id=str(tracking_id),
            courier_name=self.courier_name,
            estimated_delivery=eta.isoformat(),
        )

    async def cancel_shipment(self, tracking_id: str, order_id: Optional[str] = None) -> CancelResult:
        body = {"order_id": order_id or tracking_id, "awb_number": tracking_id}
        try:
            client = self._get_http_client()
            response = await client.post(self._url(CANCEL_ORDER_PATH), json=body, headers=self._headers())
            data = self._json(response)
        except Exception as e:
            logger.error(f"[SHIPMOZO] cancelShipment error: {e}")
            return CancelResult(success=False, message="API error during cancellation")

        if data.get("result") == "1":
            return CancelResult(success=True, message=data.get("message") or "Cancelled successfully")
        return CancelResult(success=False, message="Failed to cancel order with Shipmozo")

    async def get_label(self, tracking_id: str, order_id: Optional[str] = None) -> LabelResult:
        try:
            client = self._get_http_client()
            response = await client.get(
                self._url(LABEL_PATH.format(awb=tracking_id)),
                params={"type_of_label": "PDF"},
                headers=self._headers(),
            )
            data = self._json(response)
        except Exception as e:
            logger.error(f"[SHIPMOZO] getLabel error: {e}")
            return LabelResult(label_url="")

        nested = data.get("data") if isinstance(data.get("data"), dict) else {}
        return LabelResult(label_url=nested.get("label_url") or data.get("label_url") or "")

    async def track_shipment(self, tracking_id: str) -> Optional[Dict[str, Any]]:
        try:
            client = self._get_http_client()
            response = await client.get(
                self._url(TRACK_PATH),
                params={"awb_number": tracking_id},
                headers=self._headers(),
            )
            return self._json(response)
        except Exception as e:
            logger.error(f"[SHIPMOZO] trackShipment error: {e}")
            return None


def _format_weight(weight_grams: float) -> str:
    """Grams as a string, without a trailing .0 for whole numbers."""
    if float(weight_grams).is_integer():
        return str(int(weight_grams))
    return str(weight_grams)
