"""
Base Courier Interface

Every courier adapter implements get_quote. The shipment lifecycle
(create / cancel / label / track) is a secondary capability: the defaults
here report a clearly failed result so callers never crash on a courier
that lacks it.

get_quote never raises for ordinary failure. Network errors, non-2xx
responses, malformed bodies and missing credentials all come back as an
unavailable CourierQuote. create_shipment is the opposite: a booking
failure raises ShipmentError because a person is waiting on it.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from printship.core.exceptions import ShipmentNotSupportedError
from printship.modules.shipping.catalog import (
    CourierConfig,
    StoreConfig,
    get_enabled_couriers,
)


# =============================================================================
# Courier-Agnostic Data Classes
# =============================================================================

@dataclass(frozen=True)
class CourierPayload:
    """Quote request for one origin/destination pair."""
    origin_pincode: str
    destination_pincode: str
    weight_grams: float

    @property
    def same_city(self) -> bool:
        return self.origin_pincode == self.destination_pincode


@dataclass(frozen=True)
class CourierQuote:
    """Price (INR) and delivery estimate from one courier."""
    courier_id: str
    courier_name: str
    price: int
    delivery_days: int
    available: bool = True

    @classmethod
    def unavailable(cls, courier_id: str, courier_name: str) -> "CourierQuote":
        return cls(
            courier_id=courier_id,
            courier_name=courier_name,
            price=0,
            delivery_days=0,
            available=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "courierId": self.courier_id,
            "courierName": self.courier_name,
            "price": self.price,
            "deliveryDays": self.delivery_days,
            "available": self.available,
        }


@dataclass(frozen=True)
class ShippingOption(CourierQuote):
    """A quote tagged with the store (origin) that produced it."""
    store_pincode: str = ""
    store_name: str = ""

    @classmethod
    def from_quote(cls, quote: CourierQuote, store: StoreConfig) -> "ShippingOption":
        return cls(
            courier_id=quote.courier_id,
            courier_name=quote.courier_name,
            price=quote.price,
            delivery_days=quote.delivery_days,
            available=quote.available,
            store_pincode=store.pincode,
            store_name=store.name,
        )

    @property
    def key(self) -> tuple:
        """Display/ranking identity: same courier from two stores is two options."""
        return (self.courier_id, self.store_pincode, self.price)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["storePincode"] = self.store_pincode
        data["storeName"] = self.store_name
        return data


@dataclass(frozen=True)
class ShipmentAddress:
    name: str
    phone: str
    pincode: str
    address: str


@dataclass(frozen=True)
class ShipmentItem:
    title: str
    quantity: int
    price: float


@dataclass(frozen=True)
class ShipmentPayload:
    """Request to book a shipment with a courier."""
    order_id: str
    courier_id: str
    pickup_address: ShipmentAddress
    delivery_address: ShipmentAddress
    items: List[ShipmentItem] = field(default_factory=list)
    weight_grams: float = 500
    payment_method: str = "prepaid"  # prepaid, cod
    amount: float = 0.0


@dataclass(frozen=True)
class ShipmentResponse:
    """Result of a successful booking."""
    tracking_id: str
    courier_name: str
    label_url: Optional[str] = None
    estimated_delivery: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "trackingId": self.tracking_id,
            "courierName": self.courier_name,
            "labelUrl": self.label_url,
            "estimatedDelivery": self.estimated_delivery,
        }


@dataclass(frozen=True)
class CancelResult:
    success: bool
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"success": self.success, "message": self.message}


@dataclass(frozen=True)
class LabelResult:
    label_url: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"labelUrl": self.label_url}


# =============================================================================
# Base Courier Interface
# =============================================================================

EnabledCouriersProvider = Callable[[], List[CourierConfig]]


class BaseCourier(ABC):
    """
    Abstract base class for all courier adapters.

    Subclasses set `courier_id` and `courier_name` and implement get_quote.
    """

    courier_id: str = ""
    courier_name: str = ""

    def __init__(self, enabled_couriers: Optional[EnabledCouriersProvider] = None):
        self._enabled_couriers = enabled_couriers or get_enabled_couriers

    def is_enabled(self) -> bool:
        """True iff this courier's id is enabled in the courier catalog."""
        enabled_ids = {c.id for c in self._enabled_couriers()}
        return any(courier_id in enabled_ids for courier_id in self.enabled_aliases())

    def enabled_aliases(self) -> List[str]:
        """Catalog ids that switch this adapter on."""
        return [self.courier_id]

    def unavailable(self) -> CourierQuote:
        return CourierQuote.unavailable(self.courier_id, self.courier_name)

    @abstractmethod
    async def get_quote(self, payload: CourierPayload) -> CourierQuote:
        """
        Get a price/delivery estimate.

        Must not raise for ordinary failure; returns an unavailable quote.
        """
        pass

    async def create_shipment(self, payload: ShipmentPayload) -> ShipmentResponse:
        """Book a shipment. Raises ShipmentError on failure."""
        raise ShipmentNotSupportedError(
            f"{self.courier_name} does not support shipment creation",
            details={"courier_id": self.courier_id},
        )

    async def cancel_shipment(self, tracking_id: str, order_id: Optional[str] = None) -> CancelResult:
        return CancelResult(
            success=False,
            message=f"{self.courier_name} does not support cancellation",
        )

    async def get_label(self, tracking_id: str, order_id: Optional[str] = None) -> LabelResult:
        return LabelResult(label_url="")

    async def track_shipment(self, tracking_id: str) -> Optional[Dict[str, Any]]:
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(courier_id={self.courier_id!r})"
