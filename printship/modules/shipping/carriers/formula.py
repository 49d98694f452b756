"""
Formula Couriers

Deterministic pricing for carriers without a live integration, so the
engine works end to end without credentials:

    price = round(base_fee + weight_grams * per_gram + zone_surcharge)
    days  = same_city_days if origin == destination else days

The zone surcharge only applies across cities.
"""
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from printship.modules.shipping.carriers.base import (
    BaseCourier,
    CourierPayload,
    CourierQuote,
    EnabledCouriersProvider,
    ShipmentPayload,
    ShipmentResponse,
)
from printship.modules.shipping.carriers.http import round_price

logger = logging.getLogger(__name__)


class FormulaCourier(BaseCourier):
    """Linear weight-based pricing with a fixed delivery estimate."""

    def __init__(
        self,
        courier_id: str,
        courier_name: str,
        base_fee: float,
        per_gram: float,
        days: int,
        same_city_days: int,
        zone_surcharge: float = 0.0,
        enabled_couriers: Optional[EnabledCouriersProvider] = None,
    ):
        super().__init__(enabled_couriers)
        self.courier_id = courier_id
        self.courier_name = courier_name
        self.base_fee = base_fee
        self.per_gram = per_gram
        self.days = days
        self.same_city_days = same_city_days
        self.zone_surcharge = zone_surcharge

    def price_for(self, payload: CourierPayload) -> int:
        surcharge = 0.0 if payload.same_city else self.zone_surcharge
        return round_price(self.base_fee + payload.weight_grams * self.per_gram + surcharge)

    def days_for(self, payload: CourierPayload) -> int:
        return self.same_city_days if payload.same_city else self.days

    async def get_quote(self, payload: CourierPayload) -> CourierQuote:
        try:
            return CourierQuote(
                courier_id=self.courier_id,
                courier_name=self.courier_name,
                price=self.price_for(payload),
                delivery_days=self.days_for(payload),
                available=True,
            )
        except (TypeError, ValueError, ArithmeticError) as e:
            logger.error(f"[{self.courier_id.upper()}] Formula quote failed: {e}")
            return self.unavailable()

    async def create_shipment(self, payload: ShipmentPayload) -> ShipmentResponse:
        """Simulated booking with a synthetic tracking id."""
        tracking_id = f"{self.courier_id.upper()}{secrets.randbelow(900000) + 100000}"
        eta = datetime.now(timezone.utc) + timedelta(days=self.days)
        logger.info(f"[{self.courier_id.upper()}] Simulated shipment {tracking_id} for order {payload.order_id}")
        return ShipmentResponse(
            tracking_id=tracking_id,
            courier_name=self.courier_name,
            estimated_delivery=eta.isoformat(),
        )


def delhivery(enabled_couriers: Optional[EnabledCouriersProvider] = None) -> FormulaCourier:
    """Cost-effective, moderate speed: 40 + 0.08/g, +25 across zones."""
    return FormulaCourier(
        "delhivery", "Delhivery",
        base_fee=40, per_gram=0.08, zone_surcharge=25,
        days=3, same_city_days=1,
        enabled_couriers=enabled_couriers,
    )


def bluedart(enabled_couriers: Optional[EnabledCouriersProvider] = None) -> FormulaCourier:
    """Premium and fast: 70 + 0.12/g."""
    return FormulaCourier(
        "bluedart", "Bluedart",
        base_fee=70, per_gram=0.12,
        days=2, same_city_days=1,
        enabled_couriers=enabled_couriers,
    )


def dtdc(enabled_couriers: Optional[EnabledCouriersProvider] = None) -> FormulaCourier:
    """Budget and slow: 30 + 0.06/g."""
    return FormulaCourier(
        "dtdc", "DTDC",
        base_fee=30, per_gram=0.06,
        days=4, same_city_days=2,
        enabled_couriers=enabled_couriers,
    )
