"""
Shipment Service

Dispatches shipment lifecycle calls (create / cancel / label / track) to a
courier adapter looked up by normalized courier id. Nothing is persisted;
callers own the order record.

Any registered adapter can be addressed here, enabled for quoting or not.
"""
import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from printship.core.config import Settings, settings as default_settings
from printship.core.exceptions import UnknownCourierError
from printship.modules.shipping.carriers import CourierRegistry
from printship.modules.shipping.carriers.base import (
    BaseCourier,
    CancelResult,
    LabelResult,
    ShipmentAddress,
    ShipmentPayload,
    ShipmentResponse,
)

logger = logging.getLogger(__name__)


def default_pickup_address(settings: Optional[Settings] = None) -> ShipmentAddress:
    settings = settings or default_settings
    return ShipmentAddress(
        name=settings.ORIGIN_PICKUP_NAME,
        phone=settings.ORIGIN_PICKUP_PHONE,
        pincode=settings.ORIGIN_PICKUP_PINCODE,
        address=settings.ORIGIN_PICKUP_ADDRESS,
    )


class ShipmentService:

    def __init__(self, registry: CourierRegistry, settings: Optional[Settings] = None):
        self.registry = registry
        self.settings = settings or default_settings

    def _resolve(self, courier_id: str) -> BaseCourier:
        adapter = self.registry.get_adapter(courier_id) if courier_id else None
        if adapter is None:
            raise UnknownCourierError(
                f"Invalid or unsupported courier: {courier_id}",
                details={"courier_id": courier_id},
            )
        return adapter

    async def create_shipment(self, payload: ShipmentPayload) -> ShipmentResponse:
        """
        Book a shipment with the payload's courier.

        Raises UnknownCourierError for an unregistered courier and lets the
        adapter's ShipmentError propagate on booking failure.
        """
        adapter = self._resolve(payload.courier_id)
        payload = replace(payload, courier_id=adapter.courier_id)

        logger.info(f"[SHIPMENT] Creating {adapter.courier_id} shipment for order {payload.order_id}")
        shipment = await adapter.create_shipment(payload)
        logger.info(f"[SHIPMENT] Order {payload.order_id} booked: {shipment.tracking_id}")
        return shipment

    async def cancel_shipment(
        self,
        courier_id: str,
        tracking_id: str,
        order_id: Optional[str] = None,
    ) -> CancelResult:
        adapter = self._resolve(courier_id)
        result = await adapter.cancel_shipment(tracking_id, order_id)
        if result.success:
            logger.info(f"[SHIPMENT] Cancelled {adapter.courier_id} shipment {tracking_id}")
        else:
            logger.warning(f"[SHIPMENT] Cancel failed for {tracking_id}: {result.message}")
        return result

    async def get_label(
        self,
        courier_id: str,
        tracking_id: str,
        order_id: Optional[str] = None,
    ) -> LabelResult:
        adapter = self._resolve(courier_id)
        return await adapter.get_label(tracking_id, order_id)

    async def track_shipment(self, courier_id: str, tracking_id: str) -> Optional[Dict[str, Any]]:
        adapter = self._resolve(courier_id)
        return await adapter.track_shipment(tracking_id)
